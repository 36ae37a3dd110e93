"""FastAPI dependencies for Wordhunt."""

from __future__ import annotations

from wordhunt.ai.provider import AIConfig, StructuredGenerator, get_ai_config, get_provider
from wordhunt.players import InMemoryPlayerStore, PlayerStore

player_store = InMemoryPlayerStore()


def get_player_store() -> PlayerStore:
    """Return the player store.

    Override this dependency to plug in a persistent store.
    """
    return player_store


def get_config() -> AIConfig:
    """Return the process-wide AI configuration."""
    return get_ai_config()


def get_generator() -> StructuredGenerator:
    """Return the structured generator used for model calls."""
    return get_provider()
