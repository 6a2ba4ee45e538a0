"""
Pydantic v2 settings for MarkdownDB builds.

Settings are read from ``MARKDOWNDB_``-prefixed environment variables (and an
optional ``.env`` file) and may be overridden per invocation, giving the usual
precedence of CLI arguments > environment > defaults. The build core never
reads settings itself; only the invocation dispatcher and the CLI do.

Environment variables:
    MARKDOWNDB_MODE: Default artifact mode (``runtime`` or ``static``).
    MARKDOWNDB_PUBLIC_DIR: Output directory for static ``<id>.html`` files.
    MARKDOWNDB_SORT_ENTRIES: Visit directory entries in filename order.
    MARKDOWNDB_IGNORE: JSON list of glob patterns for entries to skip.
    MARKDOWNDB_LOG_LEVEL: Console log level.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import UnresolvedConfigurationError
from .formats import ArtifactMode

__all__ = ["LOG_LEVELS", "Settings", "load_settings"]

LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Build configuration shared by the dispatcher and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="MARKDOWNDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mode: ArtifactMode = Field(default=ArtifactMode.RUNTIME, description="Artifact mode")
    public_dir: Path = Field(
        default=Path("public"), description="Output directory for static document files"
    )
    sort_entries: bool = Field(default=True, description="Enumerate entries in filename order")
    ignore: list[str] = Field(
        default_factory=list, description="Glob patterns for directory entries to skip"
    )
    log_level: str = Field(default="INFO", description="Console log level")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        """Normalise ``value`` to an upper-case logging level name."""

        normalised = str(value).upper()
        if normalised not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return normalised


def load_settings(**overrides: Any) -> Settings:
    """Build :class:`Settings` from the environment with explicit ``overrides``.

    ``None`` overrides are dropped so unset CLI options fall through to the
    environment and defaults.

    Raises:
        UnresolvedConfigurationError: If any value fails validation.
    """

    filtered = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**filtered)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        option = ".".join(str(part) for part in first.get("loc", ())) or "settings"
        raise UnresolvedConfigurationError(
            message=f"Invalid MarkdownDB configuration for '{option}': {first.get('msg', exc)}",
            option=option,
            hint="Check MARKDOWNDB_* environment variables and CLI options.",
        ) from exc
