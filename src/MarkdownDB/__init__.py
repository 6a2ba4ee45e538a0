"""MarkdownDB package facade with lazy loading.

MarkdownDB compiles a flat directory of ``-- directive`` headed markdown
documents into data a host program embeds at build time: either every document
inline (``runtime`` mode) or per-document HTML files plus tag/time lookup
indices (``static`` mode).

The public helpers below are imported on first attribute access so that
importing :mod:`MarkdownDB` (for example to read ``__version__``) does not pull
in the markdown renderer or Pygments.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__version__ = "0.1.0"

if TYPE_CHECKING:  # pragma: no cover - import-time hints only
    from .builder import build_artifact as build_artifact  # noqa: F401
    from .dispatch import compile_markdown_db as compile_markdown_db  # noqa: F401
    from .dispatch import markdown_db as markdown_db  # noqa: F401
    from .formats import ArtifactMode as ArtifactMode  # noqa: F401
    from .formats import Document as Document  # noqa: F401
    from .formats import DocumentHeader as DocumentHeader  # noqa: F401
    from .ingest import Corpus as Corpus  # noqa: F401
    from .ingest import ingest_directory as ingest_directory  # noqa: F401

_LAZY_ATTRS: dict[str, str] = {
    "ArtifactMode": "MarkdownDB.formats",
    "Corpus": "MarkdownDB.ingest",
    "Document": "MarkdownDB.formats",
    "DocumentHeader": "MarkdownDB.formats",
    "build_artifact": "MarkdownDB.builder",
    "compile_markdown_db": "MarkdownDB.dispatch",
    "ingest_directory": "MarkdownDB.ingest",
    "markdown_db": "MarkdownDB.dispatch",
}

__all__ = ["__version__", *sorted(_LAZY_ATTRS)]


def __getattr__(name: str) -> Any:
    """Resolve public helpers from their defining modules on first access."""

    module_name = _LAZY_ATTRS.get(name)
    if module_name is None:
        raise AttributeError(f"module 'MarkdownDB' has no attribute {name!r}")
    value = getattr(import_module(module_name), name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(_LAZY_ATTRS))
