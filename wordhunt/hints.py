"""Hint contract: the masked-word rules and the repair pass for generated hints.

A hint is the secret word with a chosen set of distinct letters revealed at
every position they occur and every other position replaced by ``_``. The
reveal count is measured in distinct letters, never positions.

Hints come from a language model and are untrusted. ``compute_expected_mask``
audits a candidate in a fixed order and repairs what it can:

1. length: truncate or pad with ``_`` to the word length
2. chosen letters: when the candidate names its letters, rebuild from the word
3. forbidden letters: drop revealed forbidden letters, keep the other revealed
   positions; anything that is not the word's own letter at that position
   (a wrong letter, ``*``, a space) is masked
4. unique-letter count: logged when wrong, never repaired

It never raises on a malformed candidate.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from wordhunt.ai.schemas import HintCandidate
from wordhunt.letters import (
    MASK,
    fit_length,
    legal_letters,
    mask_word,
    normalize_letters,
    revealed_letters,
)

logger = logging.getLogger(__name__)


class HintRequest(BaseModel):
    word: str = Field(min_length=1)
    word_length: int | None = None
    forbidden_letters: frozenset[str] = Field(
        default=frozenset(),
        validation_alias=AliasChoices("forbidden_letters", "incorrect_guesses"),
    )
    reveal_count: int = Field(
        gt=0, validation_alias=AliasChoices("reveal_count", "letters_to_reveal")
    )

    @field_validator("word")
    @classmethod
    def _strip_word(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("word must not be blank")
        return v

    @field_validator("forbidden_letters", mode="before")
    @classmethod
    def _normalize_forbidden(cls, v: Any) -> frozenset[str]:
        return normalize_letters(v)

    @model_validator(mode="after")
    def _check_lengths(self) -> HintRequest:
        if self.word_length is None:
            self.word_length = len(self.word)
        elif self.word_length != len(self.word):
            raise ValueError(
                f"word_length {self.word_length} does not match word length {len(self.word)}"
            )
        available = len(self.legal_letters)
        if self.reveal_count > available:
            raise ValueError(
                f"reveal_count {self.reveal_count} exceeds the {available} revealable letters"
            )
        return self

    @property
    def legal_letters(self) -> list[str]:
        return legal_letters(self.word, self.forbidden_letters)


class HintResult(BaseModel):
    hint: str
    revealed_letters: list[str]
    chosen_letters: list[str] | None = None
    reasoning: str | None = None


@dataclass
class HintDiagnostics:
    """Which checks passed and which repairs were applied to a candidate."""

    length_ok: bool = True
    chosen_letters_applied: bool = False
    forbidden_ok: bool = True
    letters_match_word: bool = True
    count_ok: bool = True
    repairs: list[str] = field(default_factory=list)

    @property
    def repaired(self) -> bool:
        return bool(self.repairs)


def expected_mask(word: str, chosen_letters: Any) -> str:
    """The unique correct hint for word when chosen_letters are revealed."""
    return mask_word(word, normalize_letters(chosen_letters))


def _matches_word(ch: str, word_ch: str) -> bool:
    return ch.isalpha() and ch.lower() == word_ch.lower()


def _coerce_candidate(candidate: Any) -> HintCandidate:
    if isinstance(candidate, HintCandidate):
        return candidate
    if candidate is None:
        return HintCandidate(hint="")
    if isinstance(candidate, str):
        return HintCandidate(hint=candidate)
    if isinstance(candidate, Mapping):
        try:
            return HintCandidate.model_validate(dict(candidate))
        except ValidationError:
            # salvage the fields that are individually usable
            hint = candidate.get("hint", "")
            chosen = candidate.get("chosen_letters")
            reasoning = candidate.get("reasoning")
    else:
        # HintResult or any object exposing the same attributes
        hint = getattr(candidate, "hint", "")
        chosen = getattr(candidate, "chosen_letters", None)
        reasoning = getattr(candidate, "reasoning", None)
    return HintCandidate(
        hint=hint if isinstance(hint, str) else "",
        chosen_letters=[c for c in chosen if isinstance(c, str)]
        if isinstance(chosen, (list, tuple))
        else None,
        reasoning=reasoning if isinstance(reasoning, str) else None,
    )


def compute_expected_mask(
    request: HintRequest, candidate: Any
) -> tuple[HintResult, HintDiagnostics]:
    """Validate and repair a generated hint candidate.

    Args:
        request: The validated hint request.
        candidate: A HintCandidate, a plain dict, a raw hint string, a previous
            HintResult, or None.

    Returns:
        (result, diagnostics). The result hint always has the request's word
        length and contains only mask characters and letters of the word at
        their own positions, none of them forbidden.
    """
    word = request.word
    length = len(word)
    forbidden = request.forbidden_letters
    parsed = _coerce_candidate(candidate)
    diagnostics = HintDiagnostics()
    hint = parsed.hint

    # 1. length
    if len(hint) != length:
        logger.warning("Hint length mismatch: %d != %d, fixing", len(hint), length)
        diagnostics.length_ok = False
        diagnostics.repairs.append("length")
        hint = fit_length(hint, length)

    # 2. chosen letters are authoritative when supplied
    chosen = normalize_letters(parsed.chosen_letters)
    if chosen:
        rebuilt = mask_word(word, chosen)
        diagnostics.chosen_letters_applied = True
        if rebuilt != hint:
            logger.warning(
                "Rebuilt hint from chosen letters: before %r, after %r", hint, rebuilt
            )
            diagnostics.repairs.append("chosen_letters")
            hint = rebuilt

    # 3. forbidden letters, and revealed characters that are not the word's own
    shown = revealed_letters(hint)
    if shown & forbidden:
        logger.warning("Hint reveals forbidden letters %s", sorted(shown & forbidden))
        diagnostics.forbidden_ok = False
        diagnostics.repairs.append("forbidden_letters")
    mismatched = any(
        ch != MASK and not _matches_word(ch, word[i]) for i, ch in enumerate(hint)
    )
    if mismatched:
        logger.warning("Hint %r reveals letters that are not in %r at those positions", hint, word)
        diagnostics.letters_match_word = False
        diagnostics.repairs.append("mismatched_letters")
    # Only a letter equal to the word's own letter stays revealed, in the word's casing.
    hint = "".join(
        word[i] if _matches_word(ch, word[i]) and word[i].lower() not in forbidden else MASK
        for i, ch in enumerate(hint)
    )

    # 4. unique-letter count is reported only
    final_letters = revealed_letters(hint)
    if len(final_letters) != request.reveal_count:
        logger.warning(
            "Wrong number of unique letters revealed: %d != %d",
            len(final_letters),
            request.reveal_count,
        )
        diagnostics.count_ok = False

    result = HintResult(
        hint=hint,
        revealed_letters=sorted(final_letters),
        chosen_letters=parsed.chosen_letters,
        reasoning=parsed.reasoning,
    )
    return result, diagnostics


_EXAMPLE_WORD = "example"
_EXAMPLE_FORBIDDEN = "xyz"
_EXAMPLE_CHOSEN = ["e", "a"]


def _worked_example() -> str:
    available = legal_letters(_EXAMPLE_WORD, _EXAMPLE_FORBIDDEN)
    lines = [
        f'Word: "{_EXAMPLE_WORD}", Length: {len(_EXAMPLE_WORD)}, '
        f'Forbidden: "{_EXAMPLE_FORBIDDEN}", Reveal: {len(_EXAMPLE_CHOSEN)}',
        f"Available: [{', '.join(available)}]",
        f"Select: [{', '.join(_EXAMPLE_CHOSEN)}]",
    ]
    for i, ch in enumerate(_EXAMPLE_WORD):
        if ch in _EXAMPLE_CHOSEN:
            lines.append(f"Position {i}: '{ch}' -> in selection -> '{ch}'")
        else:
            lines.append(f"Position {i}: '{ch}' -> not in selection -> '{MASK}'")
    result = expected_mask(_EXAMPLE_WORD, _EXAMPLE_CHOSEN)
    lines.append(
        f'Result: "{result}" (length {len(result)}, unique letters: {len(_EXAMPLE_CHOSEN)})'
    )
    return "\n".join(lines)


def build_hint_prompt(request: HintRequest) -> tuple[str, str]:
    """Return (system, prompt) instructing the model to produce a hint.

    The prompt spells out the masking algorithm step by step with a worked
    example; ``compute_expected_mask`` assumes the model was told exactly this.
    """
    system = (
        "You are a hint generator for a word puzzle game. Follow the algorithm exactly "
        "and return only the requested fields."
    )
    word = request.word
    length = request.word_length
    forbidden = "".join(sorted(request.forbidden_letters))
    n = request.reveal_count

    prompt = f"""WORD: "{word}"
WORD LENGTH: {length} characters
FORBIDDEN LETTERS: "{forbidden}"
UNIQUE LETTERS TO REVEAL: {n}

CRITICAL RULES:
1. Choose EXACTLY {n} UNIQUE letter(s) from the word (not any of "{forbidden}")
2. When you reveal a letter, show ALL its occurrences
3. Replace all other positions with "{MASK}"
4. The hint MUST be EXACTLY {length} characters long

ALGORITHM:
1. List all unique letters in "{word}" that are NOT in "{forbidden}"
2. Select EXACTLY {n} letters from that list
3. For each of the {length} positions in "{word}":
   - If word[i] is in your selected letters: hint[i] = word[i]
   - Otherwise: hint[i] = "{MASK}"
4. Verify: the hint has {length} characters and reveals {n} unique letters

EXAMPLE:
{_worked_example()}

NOW SOLVE:
Word: "{word}"
Length: {length}
Forbidden: "{forbidden}"
Reveal: {n}

Return:
- reasoning: explain which {n} letters you chose
- chosen_letters: list of EXACTLY {n} letters
- hint: string of EXACTLY {length} characters"""
    return system, prompt
