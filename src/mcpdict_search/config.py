"""Centralized configuration for mcpdict-search using Pydantic Settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcpdict_search.domain.search import SearchMode, SearchOptions
from mcpdict_search.orthography.base import CantoneseRomanization


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Variables carry the ``MCPDICT_`` prefix (``MCPDICT_DICTIONARY_PATH``,
    ``MCPDICT_TONE_INSENSITIVE``...). The search-related fields are turned into
    an immutable :class:`SearchOptions` snapshot by :meth:`search_options`.
    """

    model_config = SettingsConfigDict(
        env_prefix="MCPDICT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",  # Ignore extra env vars not defined in model
    )

    # Store
    dictionary_path: Path | None = Field(default=None, description="Path to the prebuilt SQLite dictionary store")

    # Search preferences
    default_mode: SearchMode = Field(default=SearchMode.IDEOGRAPH, description="Mode used when none is given")
    kuangx_yonh_only: bool = Field(
        default=False,
        description="Only return characters that have a Middle Chinese reading",
    )
    allow_variants: bool = Field(default=True, description="Expand ideographs to their variant forms")
    tone_insensitive: bool = Field(default=False, description="Match every tone of a toneless or toned reading")
    cantonese_romanization: CantoneseRomanization = Field(
        default=CantoneseRomanization.JYUTPING,
        description="Romanization system used to read Cantonese input",
    )

    # Logging
    log_level: str = Field(default="warning", description="Logging level")
    log_json: bool = Field(default=False, description="Emit structured JSON log lines")
    service_name: str = Field(default="mcpdict-search", description="Service name reported to OpenTelemetry")

    @field_validator("default_mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: object) -> object:
        if isinstance(value, str):
            return SearchMode.parse(value)
        return value

    @field_validator("cantonese_romanization", mode="before")
    @classmethod
    def _normalize_romanization(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower().replace("-", "_").replace(" ", "_")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        if value.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value!r}")
        return value.lower()

    def search_options(self) -> SearchOptions:
        """Snapshot the search preferences for one search call."""
        return SearchOptions(
            restrict_to_middle_chinese=self.kuangx_yonh_only,
            expand_variants=self.allow_variants,
            tone_insensitive=self.tone_insensitive,
            cantonese_romanization=self.cantonese_romanization,
        )
