"""Filesystem helpers for MarkdownDB artifacts.

Writes go through :func:`atomic_write`, which streams into a temporary sibling
file and replaces the destination in one step, so a failed build never leaves a
half-written ``<id>.html`` or artifact file behind.
"""

from __future__ import annotations

import contextlib
import os
import uuid
from pathlib import Path
from typing import Iterator, TextIO

__all__ = ["atomic_write", "write_text_atomic"]


@contextlib.contextmanager
def atomic_write(path: Path) -> Iterator[TextIO]:
    """Write to a temporary file and atomically replace the destination."""

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f"{path.name}.tmp.{uuid.uuid4().hex}")
    try:
        # newline="" keeps content byte-for-byte on every platform
        with tmp.open("w", encoding="utf-8", newline="") as handle:
            yield handle
            handle.flush()
            os.fsync(handle.fileno())
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def write_text_atomic(path: Path, text: str) -> Path:
    """Persist ``text`` to ``path`` atomically and return ``path``."""

    with atomic_write(path) as handle:
        handle.write(text)
    return path
