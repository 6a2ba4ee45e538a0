# === NAVMAP v1 ===
# {
#   "module": "MarkdownDB.errors",
#   "purpose": "Exception taxonomy and formatting helpers shared by MarkdownDB builds.",
#   "sections": [
#     {
#       "id": "markdowndberror",
#       "name": "MarkdownDBError",
#       "anchor": "class-markdowndberror",
#       "kind": "class"
#     },
#     {
#       "id": "malformedheadererror",
#       "name": "MalformedHeaderError",
#       "anchor": "class-malformedheadererror",
#       "kind": "class"
#     },
#     {
#       "id": "unresolvedconfigurationerror",
#       "name": "UnresolvedConfigurationError",
#       "anchor": "class-unresolvedconfigurationerror",
#       "kind": "class"
#     },
#     {
#       "id": "duplicateidentifiererror",
#       "name": "DuplicateIdentifierError",
#       "anchor": "class-duplicateidentifiererror",
#       "kind": "class"
#     },
#     {
#       "id": "format-error",
#       "name": "format_error",
#       "anchor": "function-format-error",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Exception types and formatting helpers shared by MarkdownDB builds.

Every fatal condition raised while compiling a markdown directory surfaces
through one of the dataclass exceptions below so that the CLI, the invocation
dispatcher, and library callers all receive the same structured fields: the
offending file, the stage that failed, and an optional remediation hint.
Rendering degradations (unsupported code block languages) are deliberately
absent; they are logged and never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional

__all__ = [
    "DuplicateIdentifierError",
    "MalformedHeaderError",
    "MarkdownDBError",
    "UnresolvedConfigurationError",
    "format_error",
]


@dataclass(eq=False)
class MarkdownDBError(ValueError):
    """Base exception capturing the failing file and a human-friendly message."""

    message: str
    path: Optional[str] = None
    hint: Optional[str] = None
    stage: str = "build"

    error_code: ClassVar[str] = "BUILD_ERROR"

    def __post_init__(self) -> None:  # pragma: no cover - simple wiring
        """Initialise the ``ValueError`` base with the human-readable message."""

        ValueError.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class MalformedHeaderError(MarkdownDBError):
    """Header block is missing a required directive or contains an invalid one."""

    token: Optional[str] = None
    stage: str = "parse"

    error_code: ClassVar[str] = "MALFORMED_HEADER"


@dataclass(eq=False)
class UnresolvedConfigurationError(MarkdownDBError):
    """Build inputs (directory, mode, output directory) could not be resolved."""

    option: str = ""
    stage: str = "config"

    error_code: ClassVar[str] = "UNRESOLVED_CONFIGURATION"


@dataclass(eq=False)
class DuplicateIdentifierError(MarkdownDBError):
    """Two or more documents of one directory share a content-hash identifier."""

    collisions: Dict[int, List[str]] = field(default_factory=dict)
    stage: str = "ingest"

    error_code: ClassVar[str] = "DUPLICATE_IDENTIFIER"

    @property
    def titles(self) -> List[str]:
        """Return every colliding title in identifier order."""

        return [title for key in sorted(self.collisions) for title in self.collisions[key]]


def format_error(error: MarkdownDBError) -> str:
    """Return a consistent error string for CLI consumption."""

    prefix = f"[{error.stage}]"
    location = f" {error.path}:" if error.path else ""
    message = error.message.rstrip(".")
    hint = f" Hint: {error.hint}" if error.hint else ""
    return f"{prefix}{location} {message}.{hint}".strip()
