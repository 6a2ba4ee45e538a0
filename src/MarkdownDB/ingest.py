"""Directory ingestion: enumerate, parse, render, identify, and de-duplicate.

The ingestor turns one flat directory of documents into a :class:`Corpus`.
Entries are visited non-recursively and, by default, in filename order so the
corpus (and every artifact derived from it) is reproducible across platforms.
Sub-directories and files that are not valid UTF-8 are skipped with a warning;
malformed headers abort the whole directory because they can only be fixed by
editing content. Once every entry is parsed the corpus is checked for
identifier collisions by grouping on the identifier value.
"""

from __future__ import annotations

import fnmatch
import os
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from .errors import DuplicateIdentifierError, MalformedHeaderError, UnresolvedConfigurationError
from .formats import Document
from .header import parse_document
from .logging import StructuredLogger, get_logger, log_event
from .render import ContentRenderer

__all__ = [
    "Corpus",
    "check_duplicates",
    "find_duplicates",
    "ingest_directory",
    "iter_entries",
    "resolve_directory",
]


@dataclass(frozen=True)
class Corpus:
    """Ordered documents parsed from a single directory."""

    directory: Path
    """Absolute path of the ingested directory."""

    documents: tuple[Document, ...]
    """Documents in enumeration order."""

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def __len__(self) -> int:
        return len(self.documents)

    @property
    def ids(self) -> tuple[int, ...]:
        return tuple(document.id for document in self.documents)


def resolve_directory(directory: str | os.PathLike[str]) -> Path:
    """Return ``directory`` as an absolute path, ensuring it is a directory."""

    root = Path(directory).expanduser().resolve()
    if not root.is_dir():
        raise UnresolvedConfigurationError(
            message=f"Markdown directory {root} does not exist or is not a directory",
            path=str(root),
            option="directory",
        )
    return root


def _is_ignored(name: str, ignore: Sequence[str]) -> bool:
    """Return ``True`` when ``name`` matches one of the ``ignore`` glob patterns."""

    return any(fnmatch.fnmatchcase(name, pattern) for pattern in ignore)


def iter_entries(
    directory: Path,
    *,
    sort_entries: bool = True,
    ignore: Sequence[str] = (),
) -> Iterator[Path]:
    """Yield the immediate children of ``directory``.

    Args:
        directory: Directory to enumerate (not recursed into).
        sort_entries: Visit entries in filename order instead of the
            platform-dependent listing order.
        ignore: ``fnmatch`` patterns matched against entry names.

    Yields:
        Paths of entries that are not ignored, regardless of their type.
    """

    entries: Iterable[Path] = directory.iterdir()
    if sort_entries:
        entries = sorted(entries, key=lambda p: p.name)
    for entry in entries:
        if ignore and _is_ignored(entry.name, ignore):
            continue
        yield entry


def find_duplicates(documents: Iterable[Document]) -> Dict[int, List[Document]]:
    """Group ``documents`` by identifier and return groups with more than one member."""

    groups: Dict[int, List[Document]] = defaultdict(list)
    for document in documents:
        groups[document.header.id].append(document)
    return {key: members for key, members in groups.items() if len(members) > 1}


def check_duplicates(documents: Sequence[Document], directory: Path) -> None:
    """Raise :class:`DuplicateIdentifierError` if any identifier is shared."""

    duplicates = find_duplicates(documents)
    if not duplicates:
        return
    collisions = {
        key: [member.header.title for member in members] for key, members in duplicates.items()
    }
    titles = [title for key in sorted(collisions) for title in collisions[key]]
    raise DuplicateIdentifierError(
        message=(
            "Some article titles collide in their hash, please change the title of "
            f"these articles {titles} under directory {directory}"
        ),
        path=str(directory),
        collisions=collisions,
        hint="Identifiers hash the title and date; change one of them for each colliding article.",
    )


def ingest_directory(
    directory: str | os.PathLike[str],
    *,
    renderer: Optional[Callable[[str], str]] = None,
    sort_entries: bool = True,
    ignore: Sequence[str] = (),
    logger: Optional[StructuredLogger] = None,
) -> Corpus:
    """Parse every document in ``directory`` into a de-duplicated :class:`Corpus`.

    Raises:
        UnresolvedConfigurationError: If ``directory`` is not a directory.
        MalformedHeaderError: If any document header is invalid.
        DuplicateIdentifierError: If two documents share an identifier.
    """

    root = resolve_directory(directory)
    log = logger or get_logger().child(stage="ingest")
    render = renderer or ContentRenderer(logger=log.child(stage="render"))

    documents: List[Document] = []
    for entry in iter_entries(root, sort_entries=sort_entries, ignore=ignore):
        if not entry.is_file():
            log_event(
                log,
                "warning",
                "Skipping entry that is not a regular file",
                doc_id=entry.name,
                path=str(entry),
                error_code="NOT_A_FILE",
            )
            continue
        try:
            document = parse_document(entry, renderer=render)
        except UnicodeDecodeError as exc:
            log_event(
                log,
                "warning",
                "Skipping file that is not valid UTF-8",
                doc_id=entry.name,
                path=str(entry),
                error_code="UNDECODABLE",
                error=str(exc),
            )
            continue
        except MalformedHeaderError as exc:
            log_event(
                log,
                "error",
                "Malformed document header",
                doc_id=entry.name,
                path=str(entry),
                token=exc.token,
                error_code=exc.error_code,
            )
            raise
        documents.append(document)
        log_event(
            log,
            "debug",
            "Parsed document",
            doc_id=document.id,
            title=document.header.title,
            path=str(entry),
        )

    check_duplicates(documents, root)
    log_event(log, "info", "Ingested markdown directory", directory=str(root), documents=len(documents))
    return Corpus(directory=root, documents=tuple(documents))
