"""Tests for the build-time invocation boundary."""

from __future__ import annotations

from pathlib import Path

import pytest

from MarkdownDB.builder import StaticArtifact
from MarkdownDB.dispatch import compile_markdown_db, markdown_db, resolve_invocation_args
from MarkdownDB.errors import UnresolvedConfigurationError
from MarkdownDB.formats import ArtifactMode
from MarkdownDB.settings import load_settings


@pytest.mark.parametrize("directory", [None, 42, "", "   ", ["posts"]])
def test_non_constant_directory_is_rejected(directory) -> None:
    with pytest.raises(UnresolvedConfigurationError) as excinfo:
        resolve_invocation_args(directory)

    assert excinfo.value.option == "directory"


@pytest.mark.parametrize("mode", ["hybrid", "STATIC", 1])
def test_unrecognised_mode_is_rejected(mode, three_docs: Path) -> None:
    with pytest.raises(UnresolvedConfigurationError) as excinfo:
        resolve_invocation_args(str(three_docs), mode)

    assert excinfo.value.option == "mode"


def test_mode_defaults_to_runtime(three_docs: Path) -> None:
    root, mode = resolve_invocation_args(three_docs)

    assert root == three_docs.resolve()
    assert mode is ArtifactMode.RUNTIME


def test_markdown_db_returns_inline_records(three_docs: Path, monkeypatch) -> None:
    monkeypatch.delenv("MARKDOWNDB_MODE", raising=False)

    value = markdown_db(str(three_docs))

    assert isinstance(value, list)
    assert [record["header"]["title"] for record in value] == ["Alpha", "Beta", "Gamma"]


def test_static_build_uses_configured_public_dir(three_docs: Path, tmp_path: Path) -> None:
    public = tmp_path / "public"
    settings = load_settings(public_dir=public)

    artifact = compile_markdown_db(str(three_docs), "static", settings=settings)

    assert isinstance(artifact, StaticArtifact)
    assert artifact.output_dir == public.resolve()
    assert len(list(public.glob("*.html"))) == 3


def test_settings_mode_applies_when_call_omits_mode(three_docs: Path, tmp_path: Path) -> None:
    settings = load_settings(mode="static", public_dir=tmp_path / "out")

    value = markdown_db(str(three_docs), settings=settings)

    assert set(value) == {"schema_version", "tags", "times"}


def test_invalid_mode_does_not_touch_filesystem(three_docs: Path, tmp_path: Path) -> None:
    public = tmp_path / "public"

    with pytest.raises(UnresolvedConfigurationError):
        compile_markdown_db(str(three_docs), "bogus", output_dir=public)

    assert not public.exists()
