"""Puzzle routes: word generation, letter and visual hints, and a provider-key check."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from wordhunt import game
from wordhunt.ai import client as ai_client
from wordhunt.ai.provider import ANTHROPIC, GOOGLE, OPENAI, AIConfig, StructuredGenerator
from wordhunt.config import settings
from wordhunt.dependencies import get_config, get_generator, get_player_store
from wordhunt.hints import HintRequest
from wordhunt.players import PlayerStore
from wordhunt.words import Difficulty, Theme, WordResult

router = APIRouter(prefix="/api")


class HintBody(HintRequest):
    user_id: str | None = None
    is_free: bool = False


class HintResponse(BaseModel):
    success: bool
    hint: str | None = None
    revealed_letters: list[str] | None = None
    message: str | None = None


class WordBody(BaseModel):
    difficulty: Difficulty
    theme: Theme | None = None
    user_id: str | None = None


class VisualHintBody(BaseModel):
    word: str = Field(min_length=1)


class VisualHintResponse(BaseModel):
    description: str


@router.post("/hints", response_model=HintResponse)
async def request_hint(
    body: HintBody,
    store: PlayerStore = Depends(get_player_store),
    config: AIConfig = Depends(get_config),
    generator: StructuredGenerator = Depends(get_generator),
) -> HintResponse | JSONResponse:
    """Spend a hint (unless free) and return the masked word."""
    request = HintRequest(
        word=body.word,
        word_length=body.word_length,
        forbidden_letters=body.forbidden_letters,
        reveal_count=body.reveal_count,
    )
    outcome = await game.use_hint(
        store,
        request,
        user_id=body.user_id,
        is_free=body.is_free,
        config=config,
        generator=generator,
    )
    if not outcome.success:
        return JSONResponse(
            status_code=402,
            content=HintResponse(success=False, message=outcome.message).model_dump(),
        )
    return HintResponse(
        success=True,
        hint=outcome.result.hint,
        revealed_letters=outcome.result.revealed_letters,
    )


@router.post("/words", response_model=WordResult)
async def request_word(
    body: WordBody,
    store: PlayerStore = Depends(get_player_store),
    config: AIConfig = Depends(get_config),
    generator: StructuredGenerator = Depends(get_generator),
) -> WordResult:
    """Generate the next word for a round."""
    return await game.next_word(
        store,
        body.difficulty,
        user_id=body.user_id,
        theme=body.theme,
        config=config,
        generator=generator,
    )


@router.post("/visual-hints", response_model=VisualHintResponse)
async def request_visual_hint(
    body: VisualHintBody,
    config: AIConfig = Depends(get_config),
    generator: StructuredGenerator = Depends(get_generator),
) -> VisualHintResponse:
    """Describe the word as a picture, without naming it."""
    description = await ai_client.generate_image_description(
        body.word, config=config, generator=generator
    )
    return VisualHintResponse(description=description)


@router.get("/debug")
async def debug_config(config: AIConfig = Depends(get_config)) -> dict:
    """Report which provider keys are configured, without revealing them."""
    return {
        "environment": settings.environment,
        "has_openai_key": config.has_key(OPENAI),
        "has_anthropic_key": config.has_key(ANTHROPIC),
        "has_gemini_key": config.has_key(GOOGLE),
    }
