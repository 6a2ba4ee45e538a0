"""Tests for directive header parsing and document assembly."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from MarkdownDB.errors import MalformedHeaderError
from MarkdownDB.header import (
    HeaderFields,
    fallback_title,
    parse_document,
    parse_header,
    parse_text,
    split_document,
)
from MarkdownDB.identity import assign_identifier
from MarkdownDB.render import ContentRenderer


@pytest.fixture
def renderer() -> ContentRenderer:
    return ContentRenderer()


def test_end_to_end_example_parses_header_and_renders_heading(renderer, tmp_path: Path) -> None:
    """The canonical one-line document yields the documented header and an <h1>."""

    path = tmp_path / "hello.md"
    path.write_text("-- title Hello World -- date 2024-01-01 -- tag demo;;# Hi", encoding="utf-8")

    document = parse_document(path, renderer=renderer)

    header = document.header
    assert header.title == "Hello World"
    assert header.timestamp == datetime(2024, 1, 1, tzinfo=UTC)
    assert header.tags == ("demo",)
    assert header.sources is None
    assert header.id == assign_identifier("Hello World", datetime(2024, 1, 1, tzinfo=UTC))
    assert "<h1>Hi</h1>" in document.content


def test_parsing_is_idempotent(renderer, tmp_path: Path) -> None:
    path = tmp_path / "post.md"
    path.write_text("-- title Post -- date 2024-05-05 -- tag a b;;Some *text*", encoding="utf-8")

    assert parse_document(path, renderer=renderer) == parse_document(path, renderer=renderer)


def test_multiline_header_block_with_sources() -> None:
    block = "-- title  Spaced   Out \n-- time 2023-07-04T12:30:00+02:00\n-- source  a.org   b.org \n"

    fields = parse_header(block, "post.md")

    assert fields.title == "Spaced Out"
    assert fields.timestamp == datetime(2023, 7, 4, 10, 30, tzinfo=UTC)
    assert fields.sources == ("a.org", "b.org")
    assert fields.tags is None


def test_empty_tag_and_source_directives_leave_fields_absent() -> None:
    fields = parse_header("-- title T -- date 2024-01-01 -- tag -- source", "t.md")

    assert fields.tags is None
    assert fields.sources is None


def test_title_without_tokens_falls_back_to_filename() -> None:
    fields = parse_header("-- title -- date 2024-01-01", "/posts/my-first-post.md")

    assert fields.title == "my-first-post"


def test_title_fallback_defaults_to_untitled() -> None:
    assert fallback_title("/posts/notes.txt") == "untitled"
    assert fallback_title("README") == "untitled"
    assert fallback_title("essay.markdown") == "essay"


def test_unknown_directive_is_rejected() -> None:
    """Unrecognised keywords abort instead of being skipped."""

    with pytest.raises(MalformedHeaderError) as excinfo:
        parse_header("-- title T -- date 2024-01-01 -- author Alice", "posts/t.md")

    error = excinfo.value
    assert error.token == "author"
    assert error.path == "posts/t.md"
    assert "author" in str(error)
    assert "posts/t.md" in str(error)


def test_invalid_date_names_file_and_token() -> None:
    with pytest.raises(MalformedHeaderError) as excinfo:
        parse_header("-- title T -- date 2024-13-45", "posts/t.md")

    assert excinfo.value.token == "2024-13-45"
    assert "2024-13-45" in str(excinfo.value)
    assert "posts/t.md" in str(excinfo.value)


@pytest.mark.parametrize(
    "token",
    ["0001-01-01T00:00:00+01:00", "9999-12-31T23:00:00-05:00"],
)
def test_offset_outside_utc_range_is_malformed(token: str) -> None:
    with pytest.raises(MalformedHeaderError) as excinfo:
        parse_header(f"-- title T -- date {token}", "posts/edge.md")

    assert excinfo.value.token == token
    assert excinfo.value.path == "posts/edge.md"
    assert token in str(excinfo.value)


def test_date_directive_without_value_is_rejected() -> None:
    with pytest.raises(MalformedHeaderError):
        parse_header("-- title T -- date", "t.md")


@pytest.mark.parametrize(
    ("block", "missing"),
    [
        ("-- date 2024-01-01 -- tag x", "title"),
        ("-- title Only Title", "date"),
        ("", "title"),
    ],
)
def test_missing_required_directives_are_fatal(block: str, missing: str) -> None:
    with pytest.raises(MalformedHeaderError) as excinfo:
        parse_header(block, "t.md")

    assert excinfo.value.token == missing


def test_missing_body_separator_is_fatal() -> None:
    with pytest.raises(MalformedHeaderError) as excinfo:
        split_document("-- title T -- date 2024-01-01\n# body", "t.md")

    assert excinfo.value.token == ";;"


def test_body_keeps_later_separators() -> None:
    header, body = split_document("-- title T -- date 2024-01-01;;a;;b", "t.md")

    assert header == "-- title T -- date 2024-01-01"
    assert body == "a;;b"


def test_parse_text_uses_supplied_renderer() -> None:
    document = parse_text("-- title T -- date 2024-01-01;;body", "t.md", lambda body: f"<{body}>")

    assert document.content == "<body>"


def test_header_fields_identifier_matches_document_header() -> None:
    fields = HeaderFields(title="T", timestamp=datetime(2024, 1, 1, tzinfo=UTC), tags=("x",))

    assert fields.to_header().id == fields.identifier
