"""
Named reporting periods and their calendar-aligned date ranges.

All ranges are half-open ``[start, end)`` and expressed as aware datetimes in
the configured local time zone, so "today" means the cafe's day rather than
the UTC day.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from django.utils import timezone

TODAY = 'today'
WEEK = 'week'
MONTH = 'month'
YEAR = 'year'

PERIODS = (TODAY, WEEK, MONTH, YEAR)
DEFAULT_PERIOD = TODAY


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def __contains__(self, moment):
        return self.start <= moment < self.end


@dataclass(frozen=True)
class ReportWindow:
    period: str
    current: DateRange
    previous: DateRange


def normalize_period(period) -> str:
    """Map any input onto a known period; unknown values quietly mean today"""
    if not isinstance(period, str):
        return DEFAULT_PERIOD
    value = period.strip().lower()
    return value if value in PERIODS else DEFAULT_PERIOD


def _midnight(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def _start_of_week(day: date) -> date:
    # Weeks start on Sunday
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _add_months(first_of_month: date, months: int) -> date:
    index = first_of_month.year * 12 + (first_of_month.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def current_range(period: str, today: date) -> DateRange:
    if period == WEEK:
        return DateRange(_midnight(_start_of_week(today)), _midnight(today + timedelta(days=1)))
    if period == MONTH:
        first = today.replace(day=1)
        return DateRange(_midnight(first), _midnight(_add_months(first, 1)))
    if period == YEAR:
        return DateRange(_midnight(date(today.year, 1, 1)), _midnight(date(today.year + 1, 1, 1)))
    return DateRange(_midnight(today), _midnight(today + timedelta(days=1)))


def previous_range(period: str, today: date) -> DateRange:
    if period == WEEK:
        week_start = _start_of_week(today)
        return DateRange(_midnight(week_start - timedelta(days=7)), _midnight(week_start))
    if period == MONTH:
        first = today.replace(day=1)
        return DateRange(_midnight(_add_months(first, -1)), _midnight(first))
    if period == YEAR:
        return DateRange(_midnight(date(today.year - 1, 1, 1)), _midnight(date(today.year, 1, 1)))
    return DateRange(_midnight(today - timedelta(days=1)), _midnight(today))


def resolve_period(period, now: Optional[datetime] = None) -> ReportWindow:
    if now is None:
        now = timezone.localtime()
    elif timezone.is_naive(now):
        now = timezone.make_aware(now)
    else:
        now = timezone.localtime(now)

    name = normalize_period(period)
    today = now.date()
    return ReportWindow(
        period=name,
        current=current_range(name, today),
        previous=previous_range(name, today),
    )
