"""Pydantic response models for the AI functions, plus the raw-text variant.

Format constraints (field shapes, single-token words) live here. The masking
algorithm itself is spelled out in the prompt and enforced after the fact in
wordhunt/hints.py; nothing here trusts the model to have followed it.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T", bound=BaseModel)

_SINGLE_WORD_RE = re.compile(r"^[^\W\d_]+$")


class HintCandidate(BaseModel):
    reasoning: str | None = Field(
        default=None,
        description="Step-by-step reasoning: which letters you chose and why.",
    )
    chosen_letters: list[str] | None = Field(
        default=None,
        description="The unique letters you chose to reveal, one letter per item.",
    )
    hint: str = Field(
        description=(
            "The partially revealed word, exactly as long as the word, using "
            "underscores for unrevealed letters."
        ),
    )


class WordResponse(BaseModel):
    word: str = Field(
        description="The target word: lowercase, a single word, no spaces and no hyphens.",
    )
    definition: str = Field(
        description="A clear, concise, dictionary-style definition of the word.",
    )

    @field_validator("word")
    @classmethod
    def _single_lowercase_word(cls, v: str) -> str:
        v = v.strip().lower()
        if not _SINGLE_WORD_RE.match(v):
            raise ValueError(f"word must be a single word without spaces or hyphens, got {v!r}")
        return v

    @field_validator("definition")
    @classmethod
    def _non_empty_definition(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("definition must not be empty")
        return v


@dataclass(frozen=True)
class RawText:
    """Unstructured text returned by a generator instead of a schema object."""

    text: str


def parse_output(
    output: Any, response_model: type[T], *, text_field: str | None = None
) -> T | None:
    """Turn generator output into a response_model instance.

    Structured objects and dicts are validated directly. Raw text is parsed as
    JSON first; when that fails and ``text_field`` is given, the whole text is
    used as that field. Returns None for empty output.

    Raises:
        pydantic.ValidationError: If the output cannot be made to fit the schema.
    """
    if output is None:
        return None
    if isinstance(output, response_model):
        return output
    if isinstance(output, BaseModel):
        return response_model.model_validate(output.model_dump())
    if isinstance(output, dict):
        return response_model.model_validate(output)

    text = output.text if isinstance(output, RawText) else str(output)
    text = text.strip()
    if not text:
        return None
    try:
        data = json.loads(text)
    except ValueError:
        data = None
    if isinstance(data, dict):
        return response_model.model_validate(data)
    if isinstance(data, str):
        text = data.strip()
    if text_field is not None:
        return response_model.model_validate({text_field: text})
    return response_model.model_validate_json(text)


class ImageDescriptionResponse(BaseModel):
    description: str = Field(
        description="A detailed visual description of the word, suitable for image generation.",
    )

    @field_validator("description")
    @classmethod
    def _non_empty_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description must not be empty")
        return v
