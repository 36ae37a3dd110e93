"""Round-level actions: spend a hint, fetch the next word.

Player-store failures never block a hint or a word. A paid hint whose balance
cannot be updated is still generated; only an explicit zero balance refuses it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from wordhunt.ai import client as ai_client
from wordhunt.ai.provider import AIConfig, StructuredGenerator
from wordhunt.hints import HintRequest, HintResult
from wordhunt.players import InsufficientBalance, PersistenceError, PlayerStore
from wordhunt.words import Difficulty, Theme, WordRequest, WordResult

logger = logging.getLogger(__name__)


@dataclass
class HintOutcome:
    success: bool
    result: HintResult | None = None
    message: str | None = None


async def use_hint(
    store: PlayerStore,
    request: HintRequest,
    *,
    user_id: str | None = None,
    is_free: bool = False,
    config: AIConfig | None = None,
    generator: StructuredGenerator | None = None,
) -> HintOutcome:
    """Charge the player for a hint (unless free) and generate it.

    Returns:
        HintOutcome with success=False and a player-facing message when the
        balance is empty; otherwise success=True with the hint.

    Raises:
        HintGenerationExhausted: If every candidate model failed.
    """
    if not is_free and user_id:
        try:
            remaining = await store.decrement_hint_balance(user_id)
        except InsufficientBalance as exc:
            return HintOutcome(success=False, message=str(exc))
        except PersistenceError:
            logger.exception(
                "Could not update hint balance for user %s, continuing with hint generation",
                user_id,
            )
        else:
            logger.debug("User %s has %d hints left", user_id, remaining)

    result = await ai_client.generate_hint(request, config=config, generator=generator)
    return HintOutcome(success=True, result=result)


async def next_word(
    store: PlayerStore,
    difficulty: Difficulty,
    *,
    user_id: str | None = None,
    theme: Theme | None = None,
    config: AIConfig | None = None,
    generator: StructuredGenerator | None = None,
) -> WordResult:
    """Generate the next word for a player, avoiding words they have seen.

    The theme defaults to the player's saved preference. The new word is
    recorded as seen on a best-effort basis.

    Raises:
        WordGenerationExhausted: If every candidate model failed.
    """
    seen: list[str] = []
    if user_id:
        try:
            if theme is None:
                theme = (await store.get_user_preferences(user_id)).theme
            seen = await store.get_seen_words(user_id)
        except PersistenceError:
            logger.warning("Could not load preferences for user %s, using defaults", user_id)

    request = WordRequest(difficulty=difficulty, theme=theme, exclude_words=seen)
    result = await ai_client.generate_word(request, config=config, generator=generator)

    if user_id:
        try:
            await store.append_seen_word(user_id, result.word)
        except PersistenceError:
            logger.warning("Could not record seen word for user %s", user_id)
    return result
