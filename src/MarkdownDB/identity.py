"""Content-hash identifiers for parsed documents.

Identifiers are a pure function of a document's title and timestamp: the title
is concatenated with the canonical timestamp string and hashed with 32-bit
FNV-1a. Re-running a build over unchanged headers therefore yields unchanged
identifiers, which keeps the ``<id>.html`` files written by static builds
stable across builds and independent of directory enumeration order.

The canonical timestamp form mirrors JavaScript's ``Date.prototype.toJSON``
(UTC, millisecond precision, ``Z`` suffix) because the emitted artifacts are
consumed by JavaScript hosts that reconstruct the same strings.
"""

from __future__ import annotations

from datetime import UTC, datetime

__all__ = [
    "FNV_OFFSET_BASIS_32",
    "FNV_PRIME_32",
    "assign_identifier",
    "canonical_timestamp",
    "fnv1a_32",
]

FNV_OFFSET_BASIS_32 = 0x811C9DC5
FNV_PRIME_32 = 0x01000193
_MASK_32 = 0xFFFFFFFF


def fnv1a_32(data: str | bytes) -> int:
    """Return the 32-bit FNV-1a hash of ``data`` (strings are UTF-8 encoded)."""

    payload = data.encode("utf-8") if isinstance(data, str) else data
    value = FNV_OFFSET_BASIS_32
    for byte in payload:
        value ^= byte
        value = (value * FNV_PRIME_32) & _MASK_32
    return value


def canonical_timestamp(timestamp: datetime) -> str:
    """Render ``timestamp`` as ``YYYY-MM-DDTHH:MM:SS.sssZ`` in UTC.

    Naive values are interpreted as UTC.
    """

    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    rendered = timestamp.astimezone(UTC).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


def assign_identifier(title: str, timestamp: datetime) -> int:
    """Return the stable, non-negative identifier for a ``(title, timestamp)`` pair."""

    return fnv1a_32(title + canonical_timestamp(timestamp))
