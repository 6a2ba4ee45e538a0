# === NAVMAP v1 ===
# {
#   "module": "MarkdownDB.header",
#   "purpose": "Directive header parsing for MarkdownDB documents.",
#   "sections": [
#     {
#       "id": "headerfields",
#       "name": "HeaderFields",
#       "anchor": "class-headerfields",
#       "kind": "class"
#     },
#     {
#       "id": "split-document",
#       "name": "split_document",
#       "anchor": "function-split-document",
#       "kind": "function"
#     },
#     {
#       "id": "parse-header",
#       "name": "parse_header",
#       "anchor": "function-parse-header",
#       "kind": "function"
#     },
#     {
#       "id": "parse-text",
#       "name": "parse_text",
#       "anchor": "function-parse-text",
#       "kind": "function"
#     },
#     {
#       "id": "parse-document",
#       "name": "parse_document",
#       "anchor": "function-parse-document",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Directive header parsing for MarkdownDB documents.

A document is ``<header-block>;;<body-block>``. The header block is a run of
``-- keyword token...`` directives::

    -- title Hello World
    -- date 2024-01-01
    -- tag demo notes
    -- source https://example.org
    ;;
    # Body in markdown

Parsing is strict: unknown keywords, unparsable dates, and missing titles or
timestamps raise :class:`~MarkdownDB.errors.MalformedHeaderError` naming the
file and the offending token rather than producing a defaulted record.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Optional

from .errors import MalformedHeaderError
from .formats import Document, DocumentHeader
from .identity import assign_identifier

__all__ = [
    "BODY_SENTINEL",
    "DIRECTIVE_DELIMITER",
    "DIRECTIVE_KEYWORDS",
    "UNTITLED",
    "HeaderFields",
    "fallback_title",
    "parse_document",
    "parse_header",
    "parse_text",
    "parse_timestamp",
    "split_document",
]

BODY_SENTINEL = ";;"
DIRECTIVE_DELIMITER = "-- "
DIRECTIVE_KEYWORDS: tuple[str, ...] = ("tag", "source", "date", "time", "title")
UNTITLED = "untitled"

_MARKDOWN_NAME = re.compile(r"^(?P<stem>.+)\.(?:md|markdown|mdx)$", re.IGNORECASE)


@dataclass(frozen=True)
class HeaderFields:
    """Validated header values prior to identifier assignment."""

    title: str
    timestamp: datetime
    tags: Optional[tuple[str, ...]] = None
    sources: Optional[tuple[str, ...]] = None

    @property
    def identifier(self) -> int:
        """Content-hash identifier for these fields."""

        return assign_identifier(self.title, self.timestamp)

    def to_header(self) -> DocumentHeader:
        """Return the immutable :class:`DocumentHeader` including its identifier."""

        return DocumentHeader(
            title=self.title,
            timestamp=self.timestamp,
            tags=self.tags,
            sources=self.sources,
            id=self.identifier,
        )


def split_document(text: str, path: Path | str) -> tuple[str, str]:
    """Split raw document ``text`` into its header block and body block.

    Only the first sentinel separates the blocks; later occurrences belong to
    the body.

    Raises:
        MalformedHeaderError: If the ``;;`` sentinel is absent.
    """

    header_block, sep, body_block = text.partition(BODY_SENTINEL)
    if not sep:
        raise MalformedHeaderError(
            message=f"Missing '{BODY_SENTINEL}' separator between header and body in {path}",
            path=str(path),
            token=BODY_SENTINEL,
            hint=f"Terminate the directive block with '{BODY_SENTINEL}' before the body.",
        )
    return header_block, body_block


def fallback_title(path: Path | str) -> str:
    """Derive a title from a markdown file name, or ``"untitled"``."""

    match = _MARKDOWN_NAME.match(Path(path).name)
    if match is None:
        return UNTITLED
    return match.group("stem")


def parse_timestamp(token: str, path: Path | str) -> datetime:
    """Parse an ISO-8601 date or date-time token into an aware UTC datetime."""

    try:
        value = datetime.fromisoformat(token)
        # offsets can push years 1 and 9999 outside the UTC range
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    except (ValueError, OverflowError) as exc:
        raise MalformedHeaderError(
            message=f"date {token} format is not correct in {path}",
            path=str(path),
            token=token,
            hint="Use an ISO-8601 date such as 2024-01-01 or 2024-01-01T09:30:00Z.",
        ) from exc


def parse_header(header_block: str, path: Path | str) -> HeaderFields:
    """Parse the directive lines of ``header_block`` into :class:`HeaderFields`.

    Args:
        header_block: Text preceding the body sentinel.
        path: Source file, used for fallback titles and diagnostics.

    Returns:
        Header fields with a title and timestamp always present.

    Raises:
        MalformedHeaderError: On unknown keywords, bad or missing dates, or a
            missing title directive.
    """

    tags: Optional[tuple[str, ...]] = None
    sources: Optional[tuple[str, ...]] = None
    timestamp: Optional[datetime] = None
    title: Optional[str] = None

    lines = [line for line in header_block.split(DIRECTIVE_DELIMITER) if line.strip()]
    for line in lines:
        keyword, *rest = line.split()
        if keyword == "tag":
            # tag and source may be empty
            if rest:
                tags = tuple(rest)
        elif keyword == "source":
            cleaned = tuple(token.strip() for token in rest if token.strip())
            if cleaned:
                sources = cleaned
        elif keyword in ("date", "time"):
            if not rest:
                raise MalformedHeaderError(
                    message=f"'{keyword}' directive without a value in {path}",
                    path=str(path),
                    token=keyword,
                )
            timestamp = parse_timestamp(rest[0], path)
        elif keyword == "title":
            title = " ".join(rest) if rest else fallback_title(path)
        else:
            raise MalformedHeaderError(
                message=f"Incorrect markdown header format in {path}: unknown directive '{keyword}'",
                path=str(path),
                token=keyword,
                hint=f"Supported directives: {', '.join(DIRECTIVE_KEYWORDS)}.",
            )

    if title is None:
        raise MalformedHeaderError(
            message=f"Missing 'title' directive in {path}",
            path=str(path),
            token="title",
        )
    if timestamp is None:
        raise MalformedHeaderError(
            message=f"Missing 'date' directive in {path}",
            path=str(path),
            token="date",
        )
    return HeaderFields(title=title, timestamp=timestamp, tags=tags, sources=sources)


def parse_text(
    text: str, path: Path | str, renderer: Callable[[str], str]
) -> Document:
    """Parse raw document ``text`` and render its body with ``renderer``."""

    header_block, body_block = split_document(text, path)
    fields = parse_header(header_block, path)
    return Document(header=fields.to_header(), content=renderer(body_block))


def parse_document(path: Path, *, renderer: Callable[[str], str]) -> Document:
    """Read ``path`` as UTF-8 and parse it into a :class:`Document`.

    Raises:
        UnicodeDecodeError: If the file is not valid UTF-8.
        MalformedHeaderError: If the header block is invalid.
    """

    text = path.read_text(encoding="utf-8")
    return parse_text(text, path, renderer)
