"""Shared test fixtures for the wordhunt test suite.

block_real_ai  (session scope, autouse)
    Replaces InstructorProvider.generate_structured so no test can reach a
    real model API, whatever the local .env contains.

FakeGenerator
    A scripted StructuredGenerator. Responses are keyed by model identifier;
    an exception instance is raised, a coroutine function is awaited, and
    anything else is returned as-is. Every call is recorded.

client  (function scope)
    AsyncClient wired to the FastAPI app with the player store, AI config and
    generator dependencies overridden.
"""

from __future__ import annotations

import unittest.mock
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from wordhunt.ai.provider import AIConfig, GenerationParams, InstructorProvider
from wordhunt.dependencies import get_config, get_generator, get_player_store
from wordhunt.main import app
from wordhunt.players import InMemoryPlayerStore, PlayerProfile

MODEL_A = "openai/model-a"
MODEL_B = "openai/model-b"
MODEL_C = "googleai/model-c"


@pytest.fixture(autouse=True, scope="session")
def block_real_ai():
    """Fail fast if any test reaches a real model provider."""

    async def _blocked(*args, **kwargs):
        raise RuntimeError(
            "Real model API call attempted in tests, pass a FakeGenerator instead"
        )

    with unittest.mock.patch.object(InstructorProvider, "generate_structured", new=_blocked):
        yield


class FakeGenerator:
    def __init__(self, responses: dict[str, Any] | None = None, default: Any = None) -> None:
        self.responses = responses or {}
        self.default = default
        self.calls: list[str] = []
        self.prompts: list[str] = []

    async def generate_structured(
        self, *, model, system, prompt, response_model, params=None
    ) -> Any:
        self.calls.append(model)
        self.prompts.append(prompt)
        outcome = self.responses.get(model, self.default)
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return await outcome()
        return outcome


@pytest.fixture
def ai_config() -> AIConfig:
    return AIConfig(
        default_candidates=(MODEL_A, MODEL_B, MODEL_C),
        word_timeout=1.0,
        hint_timeout=1.0,
        generation=GenerationParams(),
    )


@pytest.fixture
def store() -> InMemoryPlayerStore:
    return InMemoryPlayerStore(
        [
            PlayerProfile(user_id="alice", hints=2),
            PlayerProfile(user_id="charlie", hints=0),
        ]
    )


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest_asyncio.fixture
async def client(store, ai_config, generator):
    """AsyncClient with the store, config and generator dependencies overridden."""
    app.dependency_overrides[get_player_store] = lambda: store
    app.dependency_overrides[get_config] = lambda: ai_config
    app.dependency_overrides[get_generator] = lambda: generator

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
