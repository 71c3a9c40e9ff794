from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from focuswrite.history import format_relative_age, format_timestamp, parse_timestamp

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(seconds=0), "just now"),
        (timedelta(seconds=59), "just now"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(minutes=59, seconds=59), "59 minutes ago"),
        (timedelta(hours=1), "1 hour ago"),
        (timedelta(hours=23, minutes=59), "23 hours ago"),
        (timedelta(days=1), "1 day ago"),
        (timedelta(days=29, hours=23), "29 days ago"),
    ],
)
def test_relative_thresholds(delta: timedelta, expected: str) -> None:
    assert format_relative_age(NOW - delta, now=NOW) == expected


def test_older_than_thirty_days_uses_calendar_date() -> None:
    moment = NOW - timedelta(days=30)

    result = format_relative_age(moment, now=NOW)

    assert result == moment.astimezone().strftime("%x")
    assert "ago" not in result


def test_future_timestamp_is_just_now() -> None:
    assert format_relative_age(NOW + timedelta(hours=2), now=NOW) == "just now"


def test_iso_string_with_z_suffix_is_parsed() -> None:
    assert format_relative_age("2024-06-15T11:00:00.000Z", now=NOW) == "1 hour ago"


def test_naive_timestamp_is_treated_as_utc() -> None:
    assert format_relative_age("2024-06-15T11:30:00", now=NOW) == "30 minutes ago"


def test_unparseable_timestamp_renders_empty() -> None:
    assert format_relative_age("yesterday-ish", now=NOW) == ""
    assert format_relative_age("", now=NOW) == ""


def test_format_timestamp_matches_javascript_iso_form() -> None:
    moment = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)

    assert format_timestamp(moment) == "2024-01-02T03:04:05.678Z"
    assert parse_timestamp(format_timestamp(moment)) == moment
