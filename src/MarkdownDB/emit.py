"""Serialise artifacts into text a host program can embed as a literal.

Two encodings are supported: plain JSON of ``artifact.to_embeddable()``, and an
ES module whose exports reconstruct the values with native JavaScript types
(``Date`` timestamps, ``Map``/``Set`` indices).
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from .builder import Artifact, RuntimeArtifact, StaticArtifact
from .identity import canonical_timestamp
from .io import write_text_atomic

__all__ = ["OutputFormat", "emit", "to_json", "to_module", "write_output"]


class OutputFormat(str, Enum):
    """Text encodings available for emitted artifacts."""

    JSON = "json"
    MODULE = "module"


def to_json(artifact: Artifact, *, indent: Optional[int] = None) -> str:
    """Return ``artifact`` as JSON text."""

    return json.dumps(artifact.to_embeddable(), indent=indent, ensure_ascii=False)


def _js(value: Any) -> str:
    """Return a JavaScript literal for a JSON-compatible ``value``."""

    return json.dumps(value, ensure_ascii=False)


def _js_date(value) -> str:
    return f"new Date({_js(canonical_timestamp(value))})"


def _runtime_module(artifact: RuntimeArtifact) -> str:
    records = []
    for document in artifact.documents:
        header = document.header
        fields = [
            f"id: {header.id}",
            f"title: {_js(header.title)}",
            f"timestamp: {_js_date(header.timestamp)}",
            f"tags: {_js(list(header.tags)) if header.tags is not None else 'undefined'}",
            f"sources: {_js(list(header.sources)) if header.sources is not None else 'undefined'}",
        ]
        records.append(
            "  {header: {" + ", ".join(fields) + "}, content: " + _js(document.content) + "}"
        )
    body = ",\n".join(records)
    return f"export default [\n{body}\n];\n" if records else "export default [];\n"


def _static_module(artifact: StaticArtifact) -> str:
    tag_entries = ", ".join(
        f"[{key}, new Set({_js(sorted(tags))})]" for key, tags in artifact.tag_index.items()
    )
    time_entries = ", ".join(
        f"[{key}, {_js_date(value)}]" for key, value in artifact.time_index.items()
    )
    return (
        f"export const tagIndex = new Map([{tag_entries}]);\n"
        f"export const timeIndex = new Map([{time_entries}]);\n"
        "export default {tagIndex, timeIndex};\n"
    )


def to_module(artifact: Artifact) -> str:
    """Return ES module source exporting ``artifact``."""

    if isinstance(artifact, StaticArtifact):
        return _static_module(artifact)
    return _runtime_module(artifact)


def emit(artifact: Artifact, fmt: OutputFormat | str = OutputFormat.JSON, *, indent: Optional[int] = None) -> str:
    """Encode ``artifact`` using ``fmt``."""

    fmt = OutputFormat(fmt)
    if fmt is OutputFormat.MODULE:
        return to_module(artifact)
    return to_json(artifact, indent=indent)


def write_output(text: str, path: Path) -> Path:
    """Atomically write emitted ``text`` to ``path``."""

    return write_text_atomic(path, text if text.endswith("\n") else text + "\n")
