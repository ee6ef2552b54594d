from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from utils.date_parsing import months_ago, parse_date, utc_iso
from utils.number_parsing import parse_amount, parse_int


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("930M", 930_000_000),
        ("$500K", 500_000),
        ("2.5B", 2_500_000_000),
        ("1,200,000", 1_200_000),
        ("10000+", 10_000),
        (42, 42.0),
        ("n/a", None),
        (True, None),
        (None, None),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_parse_int_rounds():
    assert parse_int("1.6K") == 1600
    assert parse_int("abc") is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-03-05", date(2024, 3, 5)),
        ("2024-03", date(2024, 3, 1)),
        ("2019", date(2019, 1, 1)),
        ("2024-03-05T10:00:00Z", date(2024, 3, 5)),
        ("March 2024", None),
        ("", None),
        (20240305, None),
    ],
)
def test_parse_date(raw, expected):
    assert parse_date(raw) == expected


def test_months_ago_clamps_day():
    assert months_ago(date(2025, 3, 31), 1) == date(2025, 2, 28)
    assert months_ago(date(2025, 6, 15), 12) == date(2024, 6, 15)


def test_utc_iso_treats_naive_as_utc():
    naive = datetime(2025, 6, 15, 12, 0)
    aware = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)
    assert utc_iso(naive) == utc_iso(aware) == "2025-06-15T12:00:00+00:00"
