# === NAVMAP v1 ===
# {
#   "module": "MarkdownDB.builder",
#   "purpose": "Build runtime (inline) or static (partitioned) artifacts from a corpus.",
#   "sections": [
#     {
#       "id": "runtimeartifact",
#       "name": "RuntimeArtifact",
#       "anchor": "class-runtimeartifact",
#       "kind": "class"
#     },
#     {
#       "id": "staticartifact",
#       "name": "StaticArtifact",
#       "anchor": "class-staticartifact",
#       "kind": "class"
#     },
#     {
#       "id": "resolve-mode",
#       "name": "resolve_mode",
#       "anchor": "function-resolve-mode",
#       "kind": "function"
#     },
#     {
#       "id": "build-artifact",
#       "name": "build_artifact",
#       "anchor": "function-build-artifact",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Artifact construction for the two MarkdownDB build modes.

``runtime`` artifacts embed every document inline: full header plus rendered
HTML. They have no filesystem side effects and are the default.

``static`` artifacts externalise bodies. Each document's HTML is written to
``<output_dir>/<id>.html`` and only two lookup indices are embedded, mapping
identifiers to tag sets and to timestamps. A consumer uses the indices to decide
which files to fetch lazily instead of shipping the whole corpus at build time.

The mode and the output directory are validated before any file is written.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

from .errors import UnresolvedConfigurationError
from .formats import SCHEMA_VERSION, ArtifactMode, Document
from .identity import canonical_timestamp
from .ingest import Corpus
from .io import write_text_atomic
from .logging import StructuredLogger, get_logger, log_event

__all__ = [
    "Artifact",
    "RuntimeArtifact",
    "StaticArtifact",
    "build_artifact",
    "build_runtime_artifact",
    "build_static_artifact",
    "build_tag_index",
    "build_time_index",
    "document_filename",
    "resolve_mode",
]


@dataclass(frozen=True)
class RuntimeArtifact:
    """Inline dataset embedding every document's header and content."""

    documents: tuple[Document, ...]
    mode: ArtifactMode = field(default=ArtifactMode.RUNTIME, init=False)

    def to_embeddable(self) -> list[dict[str, Any]]:
        """Return the ordered ``{header, content}`` records."""

        return [document.to_embeddable() for document in self.documents]


@dataclass(frozen=True)
class StaticArtifact:
    """Partitioned dataset: per-document HTML files plus embedded indices."""

    output_dir: Path
    files: tuple[Path, ...]
    tag_index: Dict[int, FrozenSet[str]]
    time_index: Dict[int, datetime]
    mode: ArtifactMode = field(default=ArtifactMode.STATIC, init=False)

    @property
    def ids(self) -> FrozenSet[int]:
        return frozenset(self.time_index)

    def to_embeddable(self) -> dict[str, Any]:
        """Return the two lookup indices with string keys and sorted tags."""

        return {
            "schema_version": SCHEMA_VERSION,
            "tags": {str(key): sorted(tags) for key, tags in self.tag_index.items()},
            "times": {
                str(key): canonical_timestamp(value) for key, value in self.time_index.items()
            },
        }


Artifact = Union[RuntimeArtifact, StaticArtifact]


def resolve_mode(value: Union[str, ArtifactMode, None]) -> ArtifactMode:
    """Return the :class:`ArtifactMode` for ``value``; ``None`` selects the default.

    Raises:
        UnresolvedConfigurationError: If ``value`` is not ``"runtime"`` or ``"static"``.
    """

    if value is None:
        return ArtifactMode.default()
    if isinstance(value, ArtifactMode):
        return value
    try:
        return ArtifactMode(value)
    except ValueError as exc:
        allowed = ", ".join(repr(mode.value) for mode in ArtifactMode)
        raise UnresolvedConfigurationError(
            message=f"Unknown artifact mode {value!r}; expected one of {allowed}",
            option="mode",
            hint="Pass mode='runtime' or mode='static', or omit it for runtime.",
        ) from exc


def document_filename(identifier: int) -> str:
    """Return the output file name for a document identifier."""

    return f"{identifier}.html"


def build_tag_index(documents: Iterable[Document]) -> Dict[int, FrozenSet[str]]:
    """Map each identifier to the set of its tags (empty when untagged)."""

    return {document.id: frozenset(document.header.tags or ()) for document in documents}


def build_time_index(documents: Iterable[Document]) -> Dict[int, datetime]:
    """Map each identifier to its document timestamp."""

    return {document.id: document.header.timestamp for document in documents}


def build_runtime_artifact(corpus: Corpus | Iterable[Document]) -> RuntimeArtifact:
    """Embed the full corpus inline."""

    return RuntimeArtifact(documents=tuple(corpus))


def build_static_artifact(
    corpus: Corpus | Iterable[Document],
    output_dir: str | os.PathLike[str],
    *,
    logger: Optional[StructuredLogger] = None,
) -> StaticArtifact:
    """Write each document's HTML to ``output_dir`` and return the lookup indices.

    Existing files of the same name are overwritten. Writes are independent and
    are not rolled back if a later write fails.
    """

    log = logger or get_logger().child(stage="build")
    documents = tuple(corpus)
    target = Path(output_dir).expanduser().resolve()
    target.mkdir(parents=True, exist_ok=True)

    files = []
    for document in documents:
        path = target / document_filename(document.id)
        write_text_atomic(path, document.content)
        files.append(path)
        log_event(log, "debug", "Wrote document content", doc_id=document.id, path=str(path))

    return StaticArtifact(
        output_dir=target,
        files=tuple(files),
        tag_index=build_tag_index(documents),
        time_index=build_time_index(documents),
    )


def build_artifact(
    corpus: Corpus | Iterable[Document],
    mode: Union[str, ArtifactMode, None] = None,
    *,
    output_dir: Optional[str | os.PathLike[str]] = None,
    logger: Optional[StructuredLogger] = None,
) -> Artifact:
    """Build the artifact for ``mode`` from ``corpus``.

    Args:
        corpus: Ingested documents in output order.
        mode: ``"runtime"`` (default) or ``"static"``.
        output_dir: Directory receiving ``<id>.html`` files; required for
            static builds and ignored otherwise.
        logger: Optional structured logger.

    Returns:
        A :class:`RuntimeArtifact` or a :class:`StaticArtifact`.

    Raises:
        UnresolvedConfigurationError: For unknown modes, or a static build
            without ``output_dir``. Raised before any file is written.
    """

    resolved = resolve_mode(mode)
    log = logger or get_logger().child(stage="build")
    if resolved is ArtifactMode.STATIC:
        if output_dir is None:
            raise UnresolvedConfigurationError(
                message="Static builds require an output directory for document files",
                option="output_dir",
                hint="Set --public-dir or MARKDOWNDB_PUBLIC_DIR.",
            )
        artifact: Artifact = build_static_artifact(corpus, output_dir, logger=log)
        count = len(artifact.files)
    else:
        artifact = build_runtime_artifact(corpus)
        count = len(artifact.documents)
    log_event(log, "info", "Built artifact", mode=resolved.value, documents=count)
    return artifact
