"""Tests for content-hash identifiers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from hypothesis import given
from hypothesis import strategies as st

from MarkdownDB.identity import assign_identifier, canonical_timestamp, fnv1a_32


def test_fnv1a_reference_vectors() -> None:
    assert fnv1a_32("") == 0x811C9DC5
    assert fnv1a_32("a") == 0xE40C292C
    assert fnv1a_32("foobar") == 0xBF9CF968
    assert fnv1a_32(b"foobar") == fnv1a_32("foobar")


def test_canonical_timestamp_uses_millisecond_utc_form() -> None:
    assert canonical_timestamp(datetime(2024, 1, 1, tzinfo=UTC)) == "2024-01-01T00:00:00.000Z"
    assert canonical_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000Z"
    shifted = datetime(2024, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    assert canonical_timestamp(shifted) == "2024-01-01T00:00:00.000Z"


def test_identifier_hashes_title_and_canonical_timestamp() -> None:
    moment = datetime(2024, 1, 1, tzinfo=UTC)

    assert assign_identifier("Hello World", moment) == fnv1a_32(
        "Hello World2024-01-01T00:00:00.000Z"
    )


def test_identifier_changes_with_title_or_date() -> None:
    moment = datetime(2024, 1, 1, tzinfo=UTC)

    assert assign_identifier("A", moment) != assign_identifier("B", moment)
    assert assign_identifier("A", moment) != assign_identifier("A", moment + timedelta(days=1))


@given(
    title=st.text(min_size=1, max_size=40),
    moment=st.datetimes(
        min_value=datetime(1970, 1, 1), max_value=datetime(2100, 1, 1), timezones=st.just(UTC)
    ),
)
def test_identifier_is_stable_and_32_bit(title: str, moment: datetime) -> None:
    first = assign_identifier(title, moment)

    assert first == assign_identifier(title, moment)
    assert 0 <= first < 2**32


@given(
    title=st.text(min_size=1, max_size=20),
    offset_hours=st.integers(min_value=-12, max_value=14),
)
def test_identifier_depends_on_instant_not_zone(title: str, offset_hours: int) -> None:
    moment = datetime(2024, 6, 1, 12, tzinfo=UTC)
    local = moment.astimezone(timezone(timedelta(hours=offset_hours)))

    assert assign_identifier(title, local) == assign_identifier(title, moment)
