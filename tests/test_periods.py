from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo

import pytest

from reports.periods import DateRange, normalize_period, resolve_period

SAIGON = ZoneInfo('Asia/Ho_Chi_Minh')


def local(*args):
    return datetime(*args, tzinfo=SAIGON)


# 2024-05-15 is a Wednesday
NOW = local(2024, 5, 15, 10, 30)


def test_today():
    window = resolve_period('today', NOW)

    assert window.period == 'today'
    assert window.current == DateRange(local(2024, 5, 15), local(2024, 5, 16))
    assert window.previous == DateRange(local(2024, 5, 14), local(2024, 5, 15))


def test_week_starts_on_sunday():
    window = resolve_period('week', NOW)

    assert window.current == DateRange(local(2024, 5, 12), local(2024, 5, 16))
    assert window.previous == DateRange(local(2024, 5, 5), local(2024, 5, 12))


def test_week_on_a_sunday():
    window = resolve_period('week', local(2024, 5, 12, 8))

    assert window.current.start == local(2024, 5, 12)
    assert window.previous.start == local(2024, 5, 5)


def test_month():
    window = resolve_period('month', NOW)

    assert window.current == DateRange(local(2024, 5, 1), local(2024, 6, 1))
    assert window.previous == DateRange(local(2024, 4, 1), local(2024, 5, 1))


def test_month_in_january_reaches_back_a_year():
    window = resolve_period('month', local(2024, 1, 10))

    assert window.current == DateRange(local(2024, 1, 1), local(2024, 2, 1))
    assert window.previous == DateRange(local(2023, 12, 1), local(2024, 1, 1))


def test_year():
    window = resolve_period('year', NOW)

    assert window.current == DateRange(local(2024, 1, 1), local(2025, 1, 1))
    assert window.previous == DateRange(local(2023, 1, 1), local(2024, 1, 1))


def test_day_follows_local_time_zone():
    # 20:00 UTC on the 14th is already the 15th in Saigon
    window = resolve_period('today', datetime(2024, 5, 14, 20, 0, tzinfo=dt_timezone.utc))

    assert window.current.start == local(2024, 5, 15)


@pytest.mark.parametrize('raw, expected', [
    ('WEEK', 'week'),
    (' month ', 'month'),
    ('quarter', 'today'),
    ('', 'today'),
    (None, 'today'),
])
def test_normalize_period(raw, expected):
    assert normalize_period(raw) == expected


def test_unknown_period_falls_back_to_today():
    window = resolve_period('fortnight', NOW)

    assert window.period == 'today'
    assert window.current == DateRange(local(2024, 5, 15), local(2024, 5, 16))


def test_range_membership():
    window = resolve_period('today', NOW)

    assert NOW in window.current
    assert window.current.end not in window.current
