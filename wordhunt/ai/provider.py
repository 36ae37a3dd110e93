"""Structured text generation across providers, via instructor.

Model identifiers are "<provider>/<model>" strings such as "openai/gpt-4o-mini",
"anthropic/claude-haiku-4-5-20251001" or "googleai/gemini-2.0-flash". The rest
of the package treats them as opaque.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Protocol, TypeVar

import anthropic
import instructor
import openai
from google import genai
from pydantic import BaseModel

from wordhunt.ai.errors import FailureKind, ProviderUnavailable
from wordhunt.ai.schemas import RawText
from wordhunt.config import Settings, settings

T = TypeVar("T", bound=BaseModel)

OPENAI = "openai"
ANTHROPIC = "anthropic"
GOOGLE = "googleai"
PROVIDERS = (OPENAI, ANTHROPIC, GOOGLE)


def split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class GenerationParams:
    temperature: float | None = None
    max_output_tokens: int = 1024
    top_p: float | None = None


@dataclass(frozen=True)
class AIConfig:
    """Read-only AI configuration, built once per process from Settings."""

    api_keys: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    default_candidates: tuple[str, ...] = ()
    word_model: str = ""
    word_candidates: tuple[str, ...] = ()
    hint_model: str = ""
    hint_candidates: tuple[str, ...] = ()
    word_timeout: float = 30.0
    hint_timeout: float = 60.0
    generation: GenerationParams = GenerationParams()
    hint_length_policy: str = "pad"

    @classmethod
    def from_settings(cls, s: Settings) -> AIConfig:
        return cls(
            api_keys=MappingProxyType(
                {
                    OPENAI: s.openai_api_key,
                    ANTHROPIC: s.anthropic_api_key,
                    GOOGLE: s.gemini_api_key,
                }
            ),
            default_candidates=split_csv(s.ai_default_model_candidates),
            word_model=s.ai_word_model.strip(),
            word_candidates=split_csv(s.ai_word_model_candidates),
            hint_model=s.ai_hint_model.strip(),
            hint_candidates=split_csv(s.ai_hint_model_candidates),
            word_timeout=s.ai_word_timeout_seconds,
            hint_timeout=s.ai_hint_timeout_seconds,
            generation=GenerationParams(
                temperature=s.ai_temperature,
                max_output_tokens=s.ai_max_output_tokens,
                top_p=s.ai_top_p,
            ),
            hint_length_policy=s.hint_length_mismatch_policy,
        )

    def has_key(self, provider: str) -> bool:
        return bool(self.api_keys.get(provider))


class StructuredGenerator(Protocol):
    """Anything that can answer a prompt with a schema object or raw text."""

    async def generate_structured(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        response_model: type[T],
        params: GenerationParams | None = None,
    ) -> T | RawText | None: ...


def split_model_id(model: str) -> tuple[str, str]:
    """Split "provider/model" into its parts.

    Raises:
        ProviderUnavailable: (not_found) if the identifier names no known provider.
    """
    provider, sep, name = model.partition("/")
    if not sep or not name or provider not in PROVIDERS:
        raise ProviderUnavailable(f"Model {model!r} not found", kind=FailureKind.not_found)
    return provider, name


class InstructorProvider:
    """Async structured generation over OpenAI, Anthropic and Google GenAI.

    Clients are created lazily per provider so a missing key only matters
    when a model from that provider is actually tried.
    """

    def __init__(self, config: AIConfig) -> None:
        self._config = config
        self._clients: dict[str, instructor.AsyncInstructor] = {}

    def _get_client(self, provider: str) -> instructor.AsyncInstructor:
        client = self._clients.get(provider)
        if client is not None:
            return client
        key = self._config.api_keys.get(provider, "")
        if not key:
            raise ProviderUnavailable(
                f"401 unauthorized: no API key configured for {provider}",
                kind=FailureKind.auth,
            )
        if provider == OPENAI:
            client = instructor.from_openai(openai.AsyncOpenAI(api_key=key))
        elif provider == ANTHROPIC:
            client = instructor.from_anthropic(anthropic.AsyncAnthropic(api_key=key))
        else:
            client = instructor.from_genai(genai.Client(api_key=key), use_async=True)
        self._clients[provider] = client
        return client

    @staticmethod
    def _generation_kwargs(provider: str, params: GenerationParams) -> dict[str, Any]:
        options: dict[str, Any] = {"max_tokens": params.max_output_tokens}
        if params.temperature is not None:
            options["temperature"] = params.temperature
        if params.top_p is not None:
            options["top_p"] = params.top_p
        if provider == GOOGLE:
            return {"generation_config": options}
        return options

    async def generate_structured(
        self,
        *,
        model: str,
        system: str,
        prompt: str,
        response_model: type[T],
        params: GenerationParams | None = None,
    ) -> T:
        """Send a prompt to the model and return a validated Pydantic object.

        Args:
            model: "<provider>/<model>" identifier.
            system: System prompt (behavioral instructions).
            prompt: User message content.
            response_model: Pydantic model class defining the expected output shape.
            params: Optional sampling and length settings.

        Raises:
            ProviderUnavailable: For unknown providers or missing keys.
            Any SDK error raised by the underlying client.
        """
        provider, name = split_model_id(model)
        client = self._get_client(provider)
        return await client.create(
            model=name,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            response_model=response_model,
            **self._generation_kwargs(provider, params or self._config.generation),
        )


@lru_cache
def get_ai_config() -> AIConfig:
    """Return the process-wide AI configuration."""
    return AIConfig.from_settings(settings)


@lru_cache
def get_provider() -> InstructorProvider:
    """Return the process-wide provider, built from get_ai_config()."""
    return InstructorProvider(get_ai_config())
