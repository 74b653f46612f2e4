"""Tests for the business-hours evaluator and schedule helpers."""

from datetime import datetime, time, timezone

from src.core.schemas import BusinessHoursEntry
from src.hours.business_hours import (
    CLOSED_LABEL,
    DAYS_OF_WEEK,
    default_business_hours,
    format_time_range,
    is_provider_open_now,
    today_day_of_week,
    weekly_schedule,
)

# 2026-03-04 is a Wednesday (day_of_week 3).
WEDNESDAY = 3


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, 4, hour, minute)


def _entry(
    day: int = WEDNESDAY,
    open_time: time | None = time(8, 0),
    close_time: time | None = time(18, 0),
    is_closed: bool = False,
) -> BusinessHoursEntry:
    return BusinessHoursEntry(
        day_of_week=day, open_time=open_time, close_time=close_time, is_closed=is_closed,
    )


class TestIsProviderOpenNow:
    def test_no_hours_empty_label(self) -> None:
        status = is_provider_open_now([], now=_at(10))
        assert status.is_open is False
        assert status.label == ""

    def test_open(self) -> None:
        status = is_provider_open_now([_entry()], now=_at(10, 30))
        assert status.is_open is True
        assert status.label == "Open until 18:00"

    def test_open_at_opening_minute(self) -> None:
        assert is_provider_open_now([_entry()], now=_at(8, 0)).is_open is True

    def test_closed_at_closing_minute(self) -> None:
        status = is_provider_open_now([_entry()], now=_at(18, 0))
        assert status.is_open is False
        assert status.label == CLOSED_LABEL

    def test_before_opening(self) -> None:
        status = is_provider_open_now([_entry(open_time=time(9, 30))], now=_at(7, 15))
        assert status.is_open is False
        assert status.label == "Opens at 09:30"

    def test_is_closed_regardless_of_time(self) -> None:
        hours = [_entry(is_closed=True)]
        for hour in (0, 9, 12, 23):
            status = is_provider_open_now(hours, now=_at(hour))
            assert status.is_open is False
            assert status.label == CLOSED_LABEL

    def test_no_entry_today_same_as_closed(self) -> None:
        missing = is_provider_open_now([_entry(day=1)], now=_at(10))
        closed = is_provider_open_now([_entry(is_closed=True)], now=_at(10))
        assert missing == closed

    def test_missing_times_closed(self) -> None:
        status = is_provider_open_now([_entry(close_time=None)], now=_at(10))
        assert status.label == CLOSED_LABEL

    def test_overnight_range_closed_after_midnight(self) -> None:
        hours = [_entry(open_time=time(22, 0), close_time=time(2, 0))]
        assert is_provider_open_now(hours, now=_at(1)).is_open is False
        assert is_provider_open_now(hours, now=_at(23)).is_open is False

    def test_aware_now_converted_to_reference_zone(self) -> None:
        # 13:00 UTC is 10:00 in São Paulo (UTC-3).
        now = datetime(2026, 3, 4, 13, 0, tzinfo=timezone.utc)
        status = is_provider_open_now([_entry(open_time=time(9, 0), close_time=time(11, 0))], now=now)
        assert status.is_open is True

    def test_aware_now_can_change_day(self) -> None:
        # 01:00 UTC Thursday is 22:00 Wednesday in São Paulo.
        now = datetime(2026, 3, 5, 1, 0, tzinfo=timezone.utc)
        hours = [_entry(open_time=time(20, 0), close_time=time(23, 0))]
        assert is_provider_open_now(hours, now=now).is_open is True

    def test_custom_timezone(self) -> None:
        now = datetime(2026, 3, 4, 10, 0, tzinfo=timezone.utc)
        hours = [_entry(open_time=time(9, 0), close_time=time(11, 0))]
        assert is_provider_open_now(hours, now=now, tz="UTC").is_open is True
        assert is_provider_open_now(hours, now=now).is_open is False

    def test_seconds_ignored(self) -> None:
        now = datetime(2026, 3, 4, 17, 59, 59)
        assert is_provider_open_now([_entry()], now=now).is_open is True


class TestHelpers:
    def test_today_day_of_week_sunday_is_zero(self) -> None:
        assert today_day_of_week(datetime(2026, 3, 1, 12, 0)) == 0
        assert today_day_of_week(_at(12)) == WEDNESDAY

    def test_format_time_range(self) -> None:
        assert format_time_range(time(8, 0), time(18, 0), False) == "08:00 - 18:00"
        assert format_time_range(time(8, 0), time(18, 0), True) == CLOSED_LABEL
        assert format_time_range(None, time(18, 0), False) == CLOSED_LABEL

    def test_default_business_hours(self) -> None:
        hours = default_business_hours()
        assert [h.day_of_week for h in hours] == list(range(7))
        assert hours[0].is_closed and hours[6].is_closed
        assert all(h.open_time == time(8, 0) for h in hours[1:6])
        assert all(h.close_time == time(18, 0) for h in hours[1:6])

    def test_weekly_schedule(self) -> None:
        rows = weekly_schedule([_entry()], now=_at(10))
        assert len(rows) == len(DAYS_OF_WEEK)
        assert rows[0].day.label == "Sunday"
        assert rows[WEDNESDAY].is_today is True
        assert rows[WEDNESDAY].hours == "08:00 - 18:00"
        assert rows[1].hours == CLOSED_LABEL
        assert sum(r.is_today for r in rows) == 1
