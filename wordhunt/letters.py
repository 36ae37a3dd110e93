"""Letter-set and masking helpers shared by the hint engine.

All comparisons are case-insensitive: letters are compared in lower case, while
masked output keeps the original casing of the secret word.
"""

from __future__ import annotations

from collections.abc import Iterable

MASK = "_"


def normalize_letters(letters: Iterable[str] | str | None) -> frozenset[str]:
    """Lower-case and de-duplicate a collection of letters.

    Accepts a plain string ("xyz") or any iterable of strings. Multi-character
    items contribute each of their characters. Whitespace and the mask
    character are ignored; non-string items are skipped.
    """
    if not letters:
        return frozenset()
    if isinstance(letters, str):
        letters = [letters]
    result: set[str] = set()
    for item in letters:
        if not isinstance(item, str):
            continue
        for ch in item.lower():
            if ch.isspace() or ch == MASK:
                continue
            result.add(ch)
    return frozenset(result)


def distinct_letters(word: str) -> list[str]:
    """Return the lower-cased letters of word in order of first appearance."""
    seen: list[str] = []
    for ch in word.lower():
        if ch.isalpha() and ch not in seen:
            seen.append(ch)
    return seen


def legal_letters(word: str, forbidden: Iterable[str] | str | None) -> list[str]:
    """Distinct letters of word that may be revealed, in order of first appearance."""
    blocked = normalize_letters(forbidden)
    return [ch for ch in distinct_letters(word) if ch not in blocked]


def mask_word(word: str, reveal: Iterable[str] | str) -> str:
    """Reveal every occurrence of the given letters in word and mask the rest."""
    shown = normalize_letters(reveal)
    return "".join(ch if ch.lower() in shown else MASK for ch in word)


def revealed_letters(hint: str) -> frozenset[str]:
    """Lower-cased, de-duplicated set of the non-mask characters in hint."""
    return frozenset(ch.lower() for ch in hint if ch != MASK)


def revealed_positions(hint: str) -> list[int]:
    return [i for i, ch in enumerate(hint) if ch != MASK]


def fit_length(hint: str, length: int) -> str:
    """Truncate or right-pad hint with the mask character to exactly length."""
    return hint[:length].ljust(length, MASK)
