"""Application configuration using Pydantic settings."""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_VAGUE_TERMS = [
    "works",
    "working",
    "done",
    "ready",
    "complete",
    "completed",
    "finished",
    "good",
    "looks good",
    "ok",
    "okay",
    "fine",
    "implemented",
    "works correctly",
    "works as expected",
]

DEFAULT_FILLER_WORDS = [
    "it",
    "is",
    "are",
    "all",
    "everything",
    "the",
    "this",
    "that",
    "stage",
    "should",
    "be",
    "must",
    "fully",
    "now",
    "and",
]


class RuleSettings(BaseModel):
    vague_terms: list[str] = Field(default_factory=lambda: list(DEFAULT_VAGUE_TERMS))
    filler_words: list[str] = Field(default_factory=lambda: list(DEFAULT_FILLER_WORDS))


class LimitSettings(BaseModel):
    max_stages: int = Field(default=1_000, ge=1)


class ObservabilitySettings(BaseModel):
    otel_service_name: str = "stagecheck"
    otel_exporter_otlp_endpoint: str | None = None
    log_level: str = "INFO"
    log_json: bool = False


class StagecheckSettings(BaseSettings):
    rules: RuleSettings = RuleSettings()
    limits: LimitSettings = LimitSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
    environment: Literal["dev", "qa", "prod"] | str = "dev"

    model_config = SettingsConfigDict(env_nested_delimiter="__", env_prefix="STAGECHECK_", case_sensitive=False)


@lru_cache(maxsize=1)
def get_settings(**kwargs: Any) -> StagecheckSettings:
    """Return cached settings instance."""
    return StagecheckSettings(**kwargs)


__all__ = ["StagecheckSettings", "get_settings", "DEFAULT_VAGUE_TERMS", "DEFAULT_FILLER_WORDS"]
