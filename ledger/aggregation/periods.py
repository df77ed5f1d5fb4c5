"""
Calendar Periods

Maps each time granularity to a pure function that places a date
inside its calendar period.

DESIGN DECISION: Grouping is driven by a strategy table rather than
branching per mode. Adding a granularity means adding one entry to
PERIOD_STRATEGIES; the aggregator does not change.
"""

import calendar
from datetime import date, timedelta
from typing import Callable, NamedTuple

from ledger.models.transaction import GroupingMode


class Period(NamedTuple):
    """Canonical key and inclusive bounds of one calendar period."""
    key: str
    start: date
    end: date


def day_period(day: date) -> Period:
    return Period(day.isoformat(), day, day)


def week_period(day: date) -> Period:
    """Monday-to-Sunday week containing the date, keyed by its Monday."""
    monday = day - timedelta(days=day.weekday())
    return Period(monday.isoformat(), monday, monday + timedelta(days=6))


def month_period(day: date) -> Period:
    """
    Calendar month containing the date, keyed as YYYY-MM.

    monthrange() resolves month length, so February ends on the
    29th in leap years and on the 28th otherwise.
    """
    last_day = calendar.monthrange(day.year, day.month)[1]
    return Period(
        f"{day.year:04d}-{day.month:02d}",
        day.replace(day=1),
        day.replace(day=last_day),
    )


def year_period(day: date) -> Period:
    return Period(
        f"{day.year:04d}",
        date(day.year, 1, 1),
        date(day.year, 12, 31),
    )


PeriodStrategy = Callable[[date], Period]

PERIOD_STRATEGIES: dict[GroupingMode, PeriodStrategy] = {
    GroupingMode.DAY: day_period,
    GroupingMode.WEEK: week_period,
    GroupingMode.MONTH: month_period,
    GroupingMode.YEAR: year_period,
}
