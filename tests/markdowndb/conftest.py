"""Shared fixtures for the MarkdownDB test suite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

import pytest

from MarkdownDB.logging import LOGGER_NAME

DocWriter = Callable[..., Path]


def render_document(
    title: Optional[str] = "Hello World",
    date: Optional[str] = "2024-01-01",
    *,
    tags: Iterable[str] = (),
    sources: Iterable[str] = (),
    body: str = "# Hi",
) -> str:
    """Return document text in the ``-- directive ...;;body`` format."""

    lines = []
    if title is not None:
        lines.append(f"-- title {title}")
    if date is not None:
        lines.append(f"-- date {date}")
    tags = list(tags)
    if tags:
        lines.append("-- tag " + " ".join(tags))
    sources = list(sources)
    if sources:
        lines.append("-- source " + " ".join(sources))
    return "\n".join(lines) + "\n;;\n" + body


@pytest.fixture(autouse=True)
def _silence_markdowndb_logger() -> Iterator[None]:
    """Keep JSON log lines out of captured CLI output."""

    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    logger.handlers = [logging.NullHandler()]
    yield
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Empty markdown directory under ``tmp_path``."""

    directory = tmp_path / "posts"
    directory.mkdir()
    return directory


@pytest.fixture
def write_doc(docs_dir: Path) -> DocWriter:
    """Factory writing one document into :func:`docs_dir` and returning its path."""

    def _write(name: str, *args: object, raw: Optional[str] = None, **kwargs: object) -> Path:
        path = docs_dir / name
        text = raw if raw is not None else render_document(*args, **kwargs)  # type: ignore[arg-type]
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def three_docs(write_doc: DocWriter, docs_dir: Path) -> Path:
    """Directory containing three documents with distinct titles."""

    write_doc("alpha.md", "Alpha", "2024-01-01", tags=["demo", "intro"], body="# Alpha\n\nfirst")
    write_doc("beta.md", "Beta", "2024-02-01", tags=["demo"], body="# Beta\n\nsecond")
    write_doc("gamma.md", "Gamma", "2024-03-01", sources=["https://example.org"], body="third")
    return docs_dir
