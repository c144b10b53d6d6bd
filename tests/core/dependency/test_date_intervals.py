"""
Tests for DateIntervalResolver

Reference time is Wednesday 2024-05-15 10:30 unless stated otherwise.
"""

from datetime import date, datetime, timedelta, timezone

import pytest
import pytz

from depflow.core.dependency.date_intervals import DateIntervalResolver
from depflow.core.dependency.types import DateInterval

REFERENCE = datetime(2024, 5, 15, 10, 30, 0)


def _days(intervals):
    return [interval.start_time.date() for interval in intervals]


def _is_full_day(interval: DateInterval) -> bool:
    start, end = interval.start_time, interval.end_time
    return (
        start.time() == datetime.min.time()
        and (end.hour, end.minute, end.second, end.microsecond) == (23, 59, 59, 999999)
        and start.date() == end.date()
    )


@pytest.fixture
def resolver() -> DateIntervalResolver:
    return DateIntervalResolver()


class TestHourWindows:
    def test_current_hour(self, resolver):
        (interval,) = resolver.resolve(REFERENCE, "currentHour")
        assert interval.start_time == datetime(2024, 5, 15, 10, 0, 0)
        assert interval.end_time == datetime(2024, 5, 15, 10, 59, 59, 999999)

    def test_last_two_hours_oldest_first(self, resolver):
        intervals = resolver.resolve(REFERENCE, "last2Hours")
        assert [i.start_time.hour for i in intervals] == [8, 9]

    def test_last_hour_crosses_midnight(self, resolver):
        (interval,) = resolver.resolve(datetime(2024, 5, 15, 0, 20), "last1Hour")
        assert interval.start_time == datetime(2024, 5, 14, 23, 0, 0)


class TestDayWindows:
    def test_today(self, resolver):
        (interval,) = resolver.resolve(REFERENCE, "today")
        assert interval.start_time == datetime(2024, 5, 15)
        assert _is_full_day(interval)

    def test_last_three_days(self, resolver):
        intervals = resolver.resolve(REFERENCE, "last3Days")
        assert _days(intervals) == [date(2024, 5, 12), date(2024, 5, 13), date(2024, 5, 14)]
        assert all(_is_full_day(i) for i in intervals)

    def test_last_seven_days_excludes_today(self, resolver):
        intervals = resolver.resolve(REFERENCE, "last7Days")
        assert len(intervals) == 7
        assert _days(intervals)[-1] == date(2024, 5, 14)


class TestWeekWindows:
    def test_this_week_runs_through_today(self, resolver):
        intervals = resolver.resolve(REFERENCE, "thisWeek")
        assert _days(intervals) == [date(2024, 5, 13), date(2024, 5, 14), date(2024, 5, 15)]

    def test_this_week_on_monday(self, resolver):
        intervals = resolver.resolve(datetime(2024, 5, 13, 9, 0), "thisWeek")
        assert _days(intervals) == [date(2024, 5, 13)]

    def test_last_week(self, resolver):
        intervals = resolver.resolve(REFERENCE, "lastWeek")
        assert _days(intervals)[0] == date(2024, 5, 6)
        assert _days(intervals)[-1] == date(2024, 5, 12)
        assert len(intervals) == 7

    @pytest.mark.parametrize(
        "expression, expected",
        [("lastMonday", date(2024, 5, 6)), ("lastWednesday", date(2024, 5, 8)), ("lastSunday", date(2024, 5, 12))],
    )
    def test_last_weekday(self, resolver, expression, expected):
        (interval,) = resolver.resolve(REFERENCE, expression)
        assert interval.start_time.date() == expected
        assert _is_full_day(interval)


class TestMonthWindows:
    def test_this_month(self, resolver):
        intervals = resolver.resolve(REFERENCE, "thisMonth")
        assert len(intervals) == 15
        assert _days(intervals)[0] == date(2024, 5, 1)

    def test_last_month(self, resolver):
        intervals = resolver.resolve(REFERENCE, "lastMonth")
        assert len(intervals) == 30
        assert _days(intervals)[0] == date(2024, 4, 1)
        assert _days(intervals)[-1] == date(2024, 4, 30)

    def test_last_month_across_year(self, resolver):
        intervals = resolver.resolve(datetime(2024, 1, 10), "lastMonth")
        assert len(intervals) == 31
        assert _days(intervals)[0] == date(2023, 12, 1)

    def test_last_month_begin_and_end(self, resolver):
        (begin,) = resolver.resolve(datetime(2024, 3, 31, 12, 0), "lastMonthBegin")
        (end,) = resolver.resolve(datetime(2024, 3, 31, 12, 0), "lastMonthEnd")
        assert begin.start_time.date() == date(2024, 2, 1)
        assert end.start_time.date() == date(2024, 2, 29)


class TestTimezone:
    def test_naive_reference_is_localized(self):
        (interval,) = DateIntervalResolver("Asia/Shanghai").resolve(REFERENCE, "today")
        assert interval.start_time.tzinfo is not None
        assert interval.start_time.tzinfo.zone == "Asia/Shanghai"
        assert interval.start_time.date() == date(2024, 5, 15)

    def test_aware_reference_is_converted(self):
        reference = datetime(2024, 5, 15, 20, 0, tzinfo=timezone.utc)
        (interval,) = DateIntervalResolver("Asia/Shanghai").resolve(reference, "today")
        assert interval.start_time.date() == date(2024, 5, 16)

    def test_hour_window_on_aware_reference(self):
        reference = datetime(2024, 5, 15, 2, 30, tzinfo=timezone.utc)
        (interval,) = DateIntervalResolver("Asia/Shanghai").resolve(reference, "currentHour")
        assert interval.start_time.hour == 10
        assert interval.start_time.utcoffset() == timedelta(hours=8)

    def test_unknown_timezone(self):
        with pytest.raises(pytz.UnknownTimeZoneError):
            DateIntervalResolver("Mars/Olympus_Mons")


class TestExpressions:
    def test_unknown_expression(self, resolver):
        with pytest.raises(ValueError, match="Unknown date expression"):
            resolver.resolve(REFERENCE, "last5Days")

    def test_is_supported(self, resolver):
        assert resolver.is_supported("today") is True
        assert resolver.is_supported("lastFriday") is True
        assert resolver.is_supported("yesterday") is False

    def test_supported_expressions(self):
        expressions = DateIntervalResolver.supported_expressions()
        assert len(expressions) == 22
        assert "lastMonthEnd" in expressions

    def test_deterministic(self, resolver):
        assert resolver.resolve(REFERENCE, "last3Days") == resolver.resolve(REFERENCE, "last3Days")


class TestDaylightSaving:
    """America/New_York: DST starts 2024-03-10 02:00, ends 2024-11-03 02:00."""

    @pytest.fixture
    def new_york(self):
        return pytz.timezone("America/New_York")

    @pytest.fixture
    def resolver(self) -> DateIntervalResolver:
        return DateIntervalResolver("America/New_York")

    def test_previous_day_before_spring_forward(self, resolver, new_york):
        (interval,) = resolver.resolve(datetime(2024, 3, 11, 8, 0), "last1Days")
        assert interval.start_time == new_york.localize(datetime(2024, 3, 10))
        assert interval.start_time.utcoffset() == timedelta(hours=-5)
        assert interval.end_time.utcoffset() == timedelta(hours=-4)

    def test_today_on_fall_back(self, resolver, new_york):
        (interval,) = resolver.resolve(datetime(2024, 11, 3, 8, 0), "today")
        assert interval.start_time == new_york.localize(datetime(2024, 11, 3))
        assert interval.start_time.utcoffset() == timedelta(hours=-4)
        assert interval.end_time.utcoffset() == timedelta(hours=-5)

    def test_last_week_days_carry_their_own_offset(self, resolver):
        intervals = resolver.resolve(datetime(2024, 3, 13, 8, 0), "lastWeek")
        offsets = [i.start_time.utcoffset() for i in intervals]
        # Mon 4th .. Sun 10th: every midnight is still standard time
        assert offsets == [timedelta(hours=-5)] * 7
        intervals = resolver.resolve(datetime(2024, 3, 20, 8, 0), "lastWeek")
        assert intervals[0].start_time.utcoffset() == timedelta(hours=-4)

    def test_days_are_contiguous_across_the_change(self, resolver):
        intervals = resolver.resolve(datetime(2024, 3, 12, 8, 0), "last3Days")
        for earlier, later in zip(intervals, intervals[1:]):
            assert later.start_time - earlier.end_time == timedelta(microseconds=1)

    def test_last_hour_after_spring_forward(self, resolver, new_york):
        (interval,) = resolver.resolve(datetime(2024, 3, 10, 3, 30), "last1Hour")
        assert interval.start_time == new_york.localize(datetime(2024, 3, 10, 1, 0))
        assert interval.start_time.utcoffset() == timedelta(hours=-5)

    def test_repeated_hour_on_fall_back(self, resolver):
        # 01:30 EST is one hour after 01:30 EDT
        reference = pytz.timezone("America/New_York").localize(datetime(2024, 11, 3, 1, 30), is_dst=False)
        (interval,) = resolver.resolve(reference, "last1Hour")
        assert interval.start_time.hour == 1
        assert interval.start_time.utcoffset() == timedelta(hours=-4)
        assert interval.end_time.utcoffset() == timedelta(hours=-4)
