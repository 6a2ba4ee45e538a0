"""Typed records shared by every MarkdownDB build stage.

The header parser produces :class:`DocumentHeader` values, the ingestor wraps
them into immutable :class:`Document` records, and the artifact builder reads
them back when deciding what to embed inline and what to externalise. The
models are frozen pydantic models so equal inputs compare equal by value, which
keeps re-parsing idempotent and makes duplicate detection a plain comparison of
identifier fields.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

try:
    from pydantic import BaseModel, ConfigDict, Field, field_validator
except ImportError as exc:  # pragma: no cover - hard dependency guard
    raise RuntimeError(
        "MarkdownDB requires pydantic>=2,<3; install it via "
        '`pip install "pydantic>=2,<3"`.'
    ) from exc

from .identity import canonical_timestamp

__all__ = [
    "SCHEMA_VERSION",
    "ArtifactMode",
    "Document",
    "DocumentHeader",
]

SCHEMA_VERSION = "markdowndb/1.0.0"


class ArtifactMode(str, Enum):
    """Enumerate the artifact representations the builder can emit."""

    RUNTIME = "runtime"
    STATIC = "static"

    @classmethod
    def default(cls) -> "ArtifactMode":
        return cls.RUNTIME


class DocumentHeader(BaseModel):
    """Metadata parsed from a document's directive block.

    Attributes:
        title: Human readable title; never empty.
        timestamp: Timezone-aware publication time (UTC).
        tags: Tags in directive order, or ``None`` when the document has none.
        sources: Source references in directive order, or ``None``.
        id: Content-hash identifier derived from ``title`` and ``timestamp``.

    Examples:
        >>> header = DocumentHeader(
        ...     title="Hello World",
        ...     timestamp=datetime(2024, 1, 1, tzinfo=UTC),
        ...     id=1,
        ... )
        >>> header.tags is None
        True
    """

    title: str = Field(..., min_length=1, description="Document title")
    timestamp: datetime = Field(..., description="Publication time (UTC)")
    tags: tuple[str, ...] | None = Field(default=None, description="Ordered tags")
    sources: tuple[str, ...] | None = Field(default=None, description="Ordered sources")
    id: int = Field(..., ge=0, description="Content-hash identifier")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("timestamp")
    @classmethod
    def _normalise_timestamp(cls, value: datetime) -> datetime:
        """Coerce naive timestamps to UTC and aware ones into the UTC zone."""

        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def to_embeddable(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping of the header fields."""

        return {
            "id": self.id,
            "title": self.title,
            "timestamp": canonical_timestamp(self.timestamp),
            "tags": list(self.tags) if self.tags is not None else None,
            "sources": list(self.sources) if self.sources is not None else None,
        }


class Document(BaseModel):
    """One parsed document: its header and the rendered HTML body."""

    header: DocumentHeader
    content: str = Field(..., description="Rendered HTML body")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def id(self) -> int:
        return self.header.id

    def to_embeddable(self) -> dict[str, Any]:
        """Return the inline record used by runtime artifacts."""

        return {"header": self.header.to_embeddable(), "content": self.content}
