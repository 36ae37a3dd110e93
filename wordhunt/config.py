from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    environment: str = "local"
    debug: bool = True

    # Provider API keys. A provider without a key is skipped as an auth failure.
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "google_genai_api_key"),
    )

    # Model candidates, tried in order: explicit override, configured list, defaults.
    # Identifiers are "<provider>/<model>", e.g. "openai/gpt-4o-mini".
    ai_word_model: str = Field(
        default="",
        validation_alias=AliasChoices("ai_word_model", "google_genai_model"),
    )
    ai_word_model_candidates: str = Field(
        default="",
        validation_alias=AliasChoices("ai_word_model_candidates", "google_genai_model_candidates"),
    )
    ai_hint_model: str = ""
    ai_hint_model_candidates: str = ""
    ai_default_model_candidates: str = (
        "openai/gpt-4o-mini,"
        "openai/gpt-4o,"
        "googleai/gemini-2.0-flash-exp,"
        "googleai/gemini-1.5-flash,"
        "googleai/gemini-1.5-pro,"
        "googleai/gemini-pro"
    )

    # Per-attempt timeouts. A timed-out attempt is cancelled and the next model is tried.
    ai_word_timeout_seconds: float = 30.0
    ai_hint_timeout_seconds: float = 60.0

    ai_temperature: float | None = None
    ai_max_output_tokens: int = 1024
    ai_top_p: float | None = None

    # "pad" truncates or pads a wrong-length hint; "regenerate" moves on to the next model.
    hint_length_mismatch_policy: Literal["pad", "regenerate"] = "pad"


settings = Settings()
