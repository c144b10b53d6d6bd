"""
Date interval resolver for dependency items

This module provides the DateIntervalResolver class, which turns a relative
date expression into the concrete windows a dependency item is checked against.

Expression Formats:
- Hours: currentHour, last1Hour, last2Hours, last3Hours
- Days: today, last1Days, last2Days, last3Days, last7Days
- Weeks: thisWeek, lastWeek, lastMonday, lastTuesday, ..., lastSunday
- Months: thisMonth, lastMonth, lastMonthBegin, lastMonthEnd

Windows spanning several hours or days are returned as one interval per
hour/day, oldest first. Every interval is inclusive and ends on the last
microsecond of its hour or day. Weeks start on Monday.

With a timezone configured, day bounds are local midnights localized one by
one, so a window on the far side of a DST change carries its own UTC offset.
Hour windows step back in absolute time and take the offset of the hour they
cover.
"""

from datetime import datetime, timedelta
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple

import pytz

from depflow.core.dependency.types import DateInterval

_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Hour offsets behind the reference time, oldest first
_HOUR_WINDOWS: Dict[str, Tuple[int, ...]] = {
    "currentHour": (0,),
    "last1Hour": (1,),
    "last2Hours": (2, 1),
    "last3Hours": (3, 2, 1),
}


class DateIntervalResolver:
    """
    Resolver from date expressions to ordered DateInterval lists.

    Args:
        timezone_str: Optional timezone (e.g., "Asia/Shanghai"). Naive
            reference times are read as wall-clock time in it, aware ones
            converted to it.
    """

    def __init__(self, timezone_str: Optional[str] = None) -> None:
        self.timezone_str = timezone_str
        self._tz = pytz.timezone(timezone_str) if timezone_str else None

    def resolve(self, reference_time: datetime, date_value: str) -> List[DateInterval]:
        """
        Resolve a date expression at a reference time.

        Args:
            reference_time: Evaluation time
            date_value: Date expression (see module docstring)

        Returns:
            Intervals in chronological order

        Raises:
            ValueError: If the expression is unknown
        """
        offsets = _HOUR_WINDOWS.get(date_value)
        if offsets is not None:
            return self._hour_windows(reference_time, offsets)

        calculator = self._calculators().get(date_value)
        if calculator is None:
            raise ValueError(f"Unknown date expression: {date_value}")
        if self._tz is None:
            return calculator(reference_time)
        return [self._localize_interval(i) for i in calculator(self._wall_clock(reference_time))]

    def is_supported(self, date_value: str) -> bool:
        return date_value in _HOUR_WINDOWS or date_value in self._calculators()

    @classmethod
    def supported_expressions(cls) -> List[str]:
        return list(_HOUR_WINDOWS) + list(cls._calculators())

    @staticmethod
    def _calculators() -> Dict[str, Callable[[datetime], List[DateInterval]]]:
        calculators: Dict[str, Callable[[datetime], List[DateInterval]]] = {
            "today": lambda dt: [DateIntervalResolver._day_interval(dt)],
            "last1Days": partial(DateIntervalResolver._last_days, days=1),
            "last2Days": partial(DateIntervalResolver._last_days, days=2),
            "last3Days": partial(DateIntervalResolver._last_days, days=3),
            "last7Days": partial(DateIntervalResolver._last_days, days=7),
            "thisWeek": DateIntervalResolver._this_week,
            "lastWeek": DateIntervalResolver._last_week,
            "thisMonth": DateIntervalResolver._this_month,
            "lastMonth": DateIntervalResolver._last_month,
            "lastMonthBegin": DateIntervalResolver._last_month_begin,
            "lastMonthEnd": DateIntervalResolver._last_month_end,
        }
        for offset, weekday in enumerate(_WEEKDAYS):
            calculators[f"last{weekday}"] = partial(DateIntervalResolver._last_weekday, offset=offset)
        return calculators

    def _wall_clock(self, dt: datetime) -> datetime:
        """Naive local time of dt in the configured timezone."""
        if dt.tzinfo is None:
            return dt
        return dt.astimezone(self._tz).replace(tzinfo=None)

    def _localize_interval(self, interval: DateInterval) -> DateInterval:
        return DateInterval(
            self._tz.localize(interval.start_time),
            self._tz.localize(interval.end_time),
        )

    def _hour_windows(self, reference_time: datetime, offsets: Tuple[int, ...]) -> List[DateInterval]:
        if self._tz is None:
            return [self._hour_interval(reference_time - timedelta(hours=o)) for o in offsets]

        if reference_time.tzinfo is None:
            aware = self._tz.localize(reference_time)
        else:
            aware = reference_time.astimezone(self._tz)
        # normalize() picks the offset in force at each stepped-back moment
        return [self._hour_interval(self._tz.normalize(aware - timedelta(hours=o))) for o in offsets]

    @staticmethod
    def _hour_interval(dt: datetime) -> DateInterval:
        start = dt.replace(minute=0, second=0, microsecond=0)
        return DateInterval(start, start.replace(minute=59, second=59, microsecond=999999))

    @staticmethod
    def _day_interval(dt: datetime) -> DateInterval:
        start = dt.replace(hour=0, minute=0, second=0, microsecond=0)
        return DateInterval(start, start.replace(hour=23, minute=59, second=59, microsecond=999999))

    @staticmethod
    def _days_between(first: datetime, last: datetime) -> List[DateInterval]:
        """One interval per day from first to last, both inclusive."""
        intervals = []
        day = first
        while day.date() <= last.date():
            intervals.append(DateIntervalResolver._day_interval(day))
            day += timedelta(days=1)
        return intervals

    @staticmethod
    def _last_days(dt: datetime, days: int) -> List[DateInterval]:
        return [
            DateIntervalResolver._day_interval(dt - timedelta(days=offset))
            for offset in range(days, 0, -1)
        ]

    @staticmethod
    def _monday_of(dt: datetime) -> datetime:
        return dt - timedelta(days=dt.weekday())

    @staticmethod
    def _this_week(dt: datetime) -> List[DateInterval]:
        return DateIntervalResolver._days_between(DateIntervalResolver._monday_of(dt), dt)

    @staticmethod
    def _last_week(dt: datetime) -> List[DateInterval]:
        last_monday = DateIntervalResolver._monday_of(dt) - timedelta(days=7)
        return DateIntervalResolver._days_between(last_monday, last_monday + timedelta(days=6))

    @staticmethod
    def _last_weekday(dt: datetime, offset: int) -> List[DateInterval]:
        last_monday = DateIntervalResolver._monday_of(dt) - timedelta(days=7)
        return [DateIntervalResolver._day_interval(last_monday + timedelta(days=offset))]

    @staticmethod
    def _first_of_last_month(dt: datetime) -> datetime:
        return (dt.replace(day=1) - timedelta(days=1)).replace(day=1)

    @staticmethod
    def _this_month(dt: datetime) -> List[DateInterval]:
        return DateIntervalResolver._days_between(dt.replace(day=1), dt)

    @staticmethod
    def _last_month(dt: datetime) -> List[DateInterval]:
        last_day = dt.replace(day=1) - timedelta(days=1)
        return DateIntervalResolver._days_between(last_day.replace(day=1), last_day)

    @staticmethod
    def _last_month_begin(dt: datetime) -> List[DateInterval]:
        return [DateIntervalResolver._day_interval(DateIntervalResolver._first_of_last_month(dt))]

    @staticmethod
    def _last_month_end(dt: datetime) -> List[DateInterval]:
        return [DateIntervalResolver._day_interval(dt.replace(day=1) - timedelta(days=1))]


__all__ = ["DateIntervalResolver"]
