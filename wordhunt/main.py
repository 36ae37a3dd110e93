from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.requests import Request

from wordhunt.ai.errors import AllCandidatesExhausted
from wordhunt.config import settings
from wordhunt.dependencies import player_store
from wordhunt.players import PlayerProfile
from wordhunt.routers import puzzles

_DEV_USERS = {"alice": 5, "bob": 1, "charlie": 0}


def _seed_dev_users() -> None:
    """Insert dev players with a few hints if they don't already exist."""
    for user_id, hints in _DEV_USERS.items():
        if player_store.get(user_id) is None:
            player_store.add(PlayerProfile(user_id=user_id, hints=hints))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    if settings.environment != "production":
        _seed_dev_users()
    yield


app = FastAPI(title="Wordhunt", lifespan=lifespan)

app.include_router(puzzles.router)


@app.exception_handler(AllCandidatesExhausted)
async def candidates_exhausted_handler(request: Request, exc: AllCandidatesExhausted) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={"success": False, "message": str(exc), "candidates": exc.candidates},
    )
