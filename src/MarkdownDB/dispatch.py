"""Invocation boundary between a host build and the MarkdownDB core.

A host build tool replaces a call such as ``markdownDB("./posts", "static")``
with the value this module produces. The arguments must be constants known at
build time: the directory is a non-empty string or path, and the mode is
omitted, ``"runtime"``, or ``"static"``. Anything else is rejected before any
file is read.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from .builder import Artifact, build_artifact, resolve_mode
from .errors import UnresolvedConfigurationError
from .formats import ArtifactMode
from .ingest import ingest_directory
from .logging import get_logger, log_event
from .settings import Settings, load_settings

__all__ = ["compile_markdown_db", "markdown_db", "resolve_invocation_args"]


def resolve_invocation_args(directory: object, mode: object = None) -> tuple[Path, ArtifactMode]:
    """Validate call-site arguments and return ``(absolute directory, mode)``.

    Raises:
        UnresolvedConfigurationError: If ``directory`` is not a non-empty
            string/path constant or ``mode`` is not a recognised literal.
    """

    if isinstance(directory, os.PathLike):
        directory = os.fspath(directory)
    if not isinstance(directory, str) or not directory.strip():
        raise UnresolvedConfigurationError(
            message=(
                f"There is a problem evaluating the directory argument {directory!r}. "
                "Please make sure the value is known at compile time"
            ),
            option="directory",
        )
    if mode is not None and not isinstance(mode, (str, ArtifactMode)):
        raise UnresolvedConfigurationError(
            message=f"Mode argument {mode!r} is not a string literal",
            option="mode",
        )
    return Path(directory).expanduser().resolve(), resolve_mode(mode)


def compile_markdown_db(
    directory: object,
    mode: object = None,
    *,
    output_dir: Optional[str | os.PathLike[str]] = None,
    settings: Optional[Settings] = None,
) -> Artifact:
    """Ingest ``directory`` and build the artifact for ``mode``.

    ``mode`` falls back to ``settings.mode`` and ``output_dir`` to
    ``settings.public_dir`` when omitted.
    """

    root, requested = resolve_invocation_args(directory, mode)
    cfg = settings or load_settings()
    resolved_mode = requested if mode is not None else cfg.mode
    target = output_dir if output_dir is not None else cfg.public_dir

    logger = get_logger().child(stage="dispatch")
    log_event(
        logger,
        "info",
        "Compiling markdown directory",
        directory=str(root),
        mode=resolved_mode.value,
    )
    corpus = ingest_directory(
        root,
        sort_entries=cfg.sort_entries,
        ignore=tuple(cfg.ignore),
    )
    return build_artifact(
        corpus,
        resolved_mode,
        output_dir=target if resolved_mode is ArtifactMode.STATIC else None,
    )


def markdown_db(directory: object, mode: object = None, **kwargs: Any) -> Any:
    """Return the embeddable value substituted for a ``markdownDB(...)`` call."""

    return compile_markdown_db(directory, mode, **kwargs).to_embeddable()
