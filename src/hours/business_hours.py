"""Business-hours evaluation: "open now" label and weekly schedule rows.

Every provider's hours are expressed in one fixed reference timezone.
Days follow the 0 = Sunday convention. Overnight ranges (close before open)
are not supported: such a day always evaluates as closed after midnight.
"""

from datetime import datetime, time
from typing import NamedTuple
from zoneinfo import ZoneInfo

from src.core.config import REFERENCE_TIMEZONE
from src.core.schemas import BusinessHoursEntry, OpenStatus

CLOSED_LABEL = "Closed"


class Day(NamedTuple):
    value: int
    label: str
    short: str


DAYS_OF_WEEK: tuple[Day, ...] = (
    Day(0, "Sunday", "Sun"),
    Day(1, "Monday", "Mon"),
    Day(2, "Tuesday", "Tue"),
    Day(3, "Wednesday", "Wed"),
    Day(4, "Thursday", "Thu"),
    Day(5, "Friday", "Fri"),
    Day(6, "Saturday", "Sat"),
)


class ScheduleRow(NamedTuple):
    day: Day
    hours: str
    is_today: bool


def local_now(now: datetime | None = None, tz: str = REFERENCE_TIMEZONE) -> datetime:
    """Wall-clock time in the reference timezone.

    Aware datetimes are converted; naive ones are taken as already local.
    """
    zone = ZoneInfo(tz)
    if now is None:
        return datetime.now(zone)
    if now.tzinfo is None:
        return now.replace(tzinfo=zone)
    return now.astimezone(zone)


def today_day_of_week(now: datetime | None = None, tz: str = REFERENCE_TIMEZONE) -> int:
    return local_now(now, tz).isoweekday() % 7


def is_provider_open_now(
    hours: list[BusinessHoursEntry],
    now: datetime | None = None,
    tz: str = REFERENCE_TIMEZONE,
) -> OpenStatus:
    """Evaluate whether a provider is open at ``now`` (default: current time).

    Returns an empty label when the provider has no hours at all, "Closed"
    when today is closed or has no usable entry, otherwise "Open until HH:MM"
    or "Opens at HH:MM".
    """
    if not hours:
        return OpenStatus(is_open=False, label="")

    current = local_now(now, tz)
    day = current.isoweekday() % 7
    current_time = time(current.hour, current.minute)

    today = next((h for h in hours if h.day_of_week == day), None)
    if today is None or today.is_closed:
        return OpenStatus(is_open=False, label=CLOSED_LABEL)
    if today.open_time is None or today.close_time is None:
        return OpenStatus(is_open=False, label=CLOSED_LABEL)

    if today.open_time <= current_time < today.close_time:
        return OpenStatus(is_open=True, label=f"Open until {_hhmm(today.close_time)}")
    if current_time < today.open_time:
        return OpenStatus(is_open=False, label=f"Opens at {_hhmm(today.open_time)}")
    return OpenStatus(is_open=False, label=CLOSED_LABEL)


def format_time_range(open_time: time | None, close_time: time | None, is_closed: bool) -> str:
    if is_closed or open_time is None or close_time is None:
        return CLOSED_LABEL
    return f"{_hhmm(open_time)} - {_hhmm(close_time)}"


def default_business_hours() -> list[BusinessHoursEntry]:
    """Monday to Friday 08:00-18:00, weekends closed."""
    entries = []
    for day in DAYS_OF_WEEK:
        weekday = 1 <= day.value <= 5
        entries.append(
            BusinessHoursEntry(
                day_of_week=day.value,
                open_time=time(8, 0) if weekday else None,
                close_time=time(18, 0) if weekday else None,
                is_closed=not weekday,
            )
        )
    return entries


def weekly_schedule(
    hours: list[BusinessHoursEntry],
    now: datetime | None = None,
    tz: str = REFERENCE_TIMEZONE,
) -> list[ScheduleRow]:
    """One row per day of the week, Sunday first, with today marked."""
    by_day = {h.day_of_week: h for h in hours}
    today = today_day_of_week(now, tz)
    rows = []
    for day in DAYS_OF_WEEK:
        entry = by_day.get(day.value)
        text = (
            format_time_range(entry.open_time, entry.close_time, entry.is_closed)
            if entry
            else CLOSED_LABEL
        )
        rows.append(ScheduleRow(day=day, hours=text, is_today=day.value == today))
    return rows


def _hhmm(t: time) -> str:
    return t.strftime("%H:%M")
