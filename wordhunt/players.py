"""Player persistence boundary: hint balances, preferences and seen words.

The game only depends on the ``PlayerStore`` protocol. ``InMemoryPlayerStore``
backs local development and tests; a production deployment plugs in a
document-store implementation with the same methods.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Protocol

from wordhunt.words import Theme


class PersistenceError(RuntimeError):
    """Base class for player store failures."""


class InsufficientBalance(PersistenceError):
    """Raised when a paid hint is requested with no hints left."""


class UnknownPlayer(PersistenceError):
    """Raised when no profile exists for the user."""


class PersistenceUnavailable(PersistenceError):
    """Raised when the store cannot be reached."""


@dataclass
class UserPreferences:
    theme: Theme = Theme.current
    is_premium: bool = False


class PlayerStore(Protocol):
    async def decrement_hint_balance(self, user_id: str) -> int:
        """Atomically take one hint; return the remaining balance.

        Raises InsufficientBalance when the balance is already zero.
        """
        ...

    async def append_seen_word(self, user_id: str, word: str) -> None: ...

    async def get_seen_words(self, user_id: str) -> list[str]: ...

    async def get_user_preferences(self, user_id: str) -> UserPreferences: ...


@dataclass
class PlayerProfile:
    user_id: str
    hints: int = 0
    theme: Theme = Theme.current
    is_premium: bool = False
    seen_words: list[str] = field(default_factory=list)


class InMemoryPlayerStore:
    """Process-local PlayerStore. The balance update runs under a lock."""

    def __init__(self, profiles: list[PlayerProfile] | None = None) -> None:
        self._profiles: dict[str, PlayerProfile] = {p.user_id: p for p in profiles or []}
        self._lock = asyncio.Lock()

    def add(self, profile: PlayerProfile) -> None:
        self._profiles[profile.user_id] = profile

    def get(self, user_id: str) -> PlayerProfile | None:
        return self._profiles.get(user_id)

    def _require(self, user_id: str) -> PlayerProfile:
        profile = self._profiles.get(user_id)
        if profile is None:
            raise UnknownPlayer(f"User profile not found: {user_id}")
        return profile

    async def decrement_hint_balance(self, user_id: str) -> int:
        async with self._lock:
            profile = self._require(user_id)
            if profile.hints <= 0:
                raise InsufficientBalance("You don't have any hints left.")
            profile.hints -= 1
            return profile.hints

    async def append_seen_word(self, user_id: str, word: str) -> None:
        profile = self._require(user_id)
        word = word.lower()
        if word not in profile.seen_words:
            profile.seen_words.append(word)

    async def get_seen_words(self, user_id: str) -> list[str]:
        return list(self._require(user_id).seen_words)

    async def get_user_preferences(self, user_id: str) -> UserPreferences:
        profile = self._require(user_id)
        return UserPreferences(theme=profile.theme, is_premium=profile.is_premium)
