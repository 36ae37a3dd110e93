"""Word request shaping: difficulty and theme guidelines for word generation."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Difficulty(str, enum.Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class Theme(str, enum.Enum):
    current = "current"
    science_safari = "science-safari"
    history_quest = "history-quest"
    geo_genius = "geo-genius"


THEME_GUIDELINES: dict[Theme, str] = {
    Theme.current: (
        "General vocabulary EXCLUDING science, history, and geography topics. Focus on: "
        "everyday objects, emotions, actions, abstract concepts, arts, literature, business, "
        "technology, food, sports, entertainment, and general knowledge. DO NOT use "
        "scientific terms, historical terms, or geographical terms."
    ),
    Theme.science_safari: (
        "Biological sciences, space exploration, ecosystems, scientific terminology, "
        "natural phenomena, and scientific discoveries."
    ),
    Theme.history_quest: (
        "Ancient civilizations (Egypt, Rome, Greece, Mesopotamia), historical figures, "
        "historical events, artifacts, and historical terminology."
    ),
    Theme.geo_genius: (
        "Countries, capitals, cities, landmarks, geographical features, continents, "
        "oceans, and geographical terminology."
    ),
}

DIFFICULTY_GUIDELINES: dict[Difficulty, str] = {
    Difficulty.easy: "Use common words (5-7 letters) that most people know.",
    Difficulty.medium: "Use moderately challenging words (7-10 letters).",
    Difficulty.hard: "Use advanced vocabulary words (10+ letters).",
}


class WordRequest(BaseModel):
    difficulty: Difficulty
    theme: Theme = Theme.current
    exclude_words: frozenset[str] = Field(default=frozenset())

    @field_validator("theme", mode="before")
    @classmethod
    def _default_theme(cls, v: Any) -> Any:
        return Theme.current if v is None or v == "" else v

    @field_validator("exclude_words", mode="before")
    @classmethod
    def _normalize_excluded(cls, v: Any) -> frozenset[str]:
        if not v:
            return frozenset()
        if isinstance(v, str):
            v = v.split(",")
        return frozenset(w.strip().lower() for w in v if isinstance(w, str) and w.strip())


class WordResult(BaseModel):
    word: str
    definition: str


def is_excluded(word: str, request: WordRequest) -> bool:
    return word.strip().lower() in request.exclude_words


def build_word_prompt(request: WordRequest) -> tuple[str, str]:
    """Return (system, prompt) for generating one word and its definition."""
    system = (
        "You are an expert lexicographer and puzzle master for a word game. "
        "Generate a single word and its definition for the requested difficulty and theme."
    )

    parts = [
        f"Difficulty: {request.difficulty.value}",
        f"Theme: {request.theme.value}",
        "Theme guidelines:\n"
        + "\n".join(f"- {theme.value}: {text}" for theme, text in THEME_GUIDELINES.items()),
    ]
    if request.exclude_words:
        excluded = ", ".join(sorted(request.exclude_words))
        parts.append(
            f"IMPORTANT: Do NOT use any of these words (the player has already seen them): "
            f"{excluded}"
        )
    parts.append(
        "Difficulty guidelines:\n"
        + "\n".join(f'- For "{d.value}": {text}' for d, text in DIFFICULTY_GUIDELINES.items())
    )
    parts.append(
        "Requirements:\n"
        "- The word MUST relate to the theme specified above\n"
        "- The definition should be clear, concise, and dictionary-style\n"
        "- Ensure the word is appropriate for the difficulty level\n"
        "- Use only single words (no spaces, no hyphens), in lowercase"
    )
    return system, "\n\n".join(parts)


def build_image_description_prompt(word: str) -> tuple[str, str]:
    """Return (system, prompt) for a picture-style hint that never names the word."""
    system = (
        "You are an expert visual designer for a game where players guess words from images."
    )
    prompt = (
        "Create a vivid, descriptive prompt that can be used to generate an image "
        f'representing the word: "{word}".\n\n'
        "The description should:\n"
        "1. Be visual and detailed.\n"
        f'2. NOT contain the word "{word}" itself.\n'
        "3. Focus on the physical appearance, setting, or metaphorical representation "
        "of the word."
    )
    return system, prompt
