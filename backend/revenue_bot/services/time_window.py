"""Local-day windows under a fixed UTC offset.

Every "today" or "selected date" in the bot goes through this module so the
labels users see and the Stripe query windows agree. The offset is a plain
hour count from configuration; there is no timezone database and no DST.
"""
import calendar
from datetime import date, datetime, timedelta, timezone

from revenue_bot.schemas.stats import DateOption, TimeWindow

SECONDS_PER_HOUR = 3600
# 23:59:59.999 local, expressed in ms past local midnight
_LAST_MS_OF_DAY = (24 * SECONDS_PER_HOUR * 1000) - 1

# Discord select menus accept at most 25 options.
MAX_DATE_OPTIONS = 25

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def resolve_day_window(target_date: date, offset_hours: int) -> TimeWindow:
    """Return the UTC epoch window covering ``target_date`` as a local day.

    The date's year/month/day are read as a local calendar date; a
    ``datetime`` contributes its UTC calendar components. The end boundary is
    the floor of 23:59:59.999 local in whole seconds, so a record created in
    the last fractional second of the day can fall outside the window.
    """
    if isinstance(target_date, datetime):
        if target_date.tzinfo is not None:
            target_date = target_date.astimezone(timezone.utc)
        target_date = target_date.date()

    local_midnight = calendar.timegm((target_date.year, target_date.month, target_date.day, 0, 0, 0))
    start_ms = (local_midnight - offset_hours * SECONDS_PER_HOUR) * 1000
    end_ms = start_ms + _LAST_MS_OF_DAY
    return TimeWindow(start=start_ms // 1000, end=end_ms // 1000)


def to_local(moment: datetime, offset_hours: int) -> datetime:
    """Shift an instant to naive local wall-clock time."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).replace(tzinfo=None) + timedelta(hours=offset_hours)


def local_today(offset_hours: int, now: datetime | None = None) -> date:
    return to_local(now or datetime.now(timezone.utc), offset_hours).date()


def format_calendar_label(value: date | datetime, offset_hours: int, include_year: bool = False) -> str:
    """Render ``Mon Jan 5`` (optionally ``Mon Jan 5, 2026``).

    A ``datetime`` is an instant and is shifted by the offset first; a plain
    ``date`` is already a local calendar date.
    """
    if isinstance(value, datetime):
        value = to_local(value, offset_hours).date()
    label = f"{WEEKDAYS[value.weekday()]} {MONTHS[value.month - 1]} {value.day}"
    if include_year:
        label = f"{label}, {value.year}"
    return label


def format_payout_date(epoch_seconds: int, offset_hours: int) -> str:
    local = to_local(datetime.fromtimestamp(epoch_seconds, tz=timezone.utc), offset_hours)
    return f"{MONTHS[local.month - 1]} {local.day}"


def recent_local_dates(
    offset_hours: int,
    count: int = MAX_DATE_OPTIONS,
    now: datetime | None = None,
) -> list[DateOption]:
    """Date-picker options for the last ``count`` local days, newest first."""
    if not 1 <= count <= MAX_DATE_OPTIONS:
        raise ValueError(f"count must be between 1 and {MAX_DATE_OPTIONS}")

    today = local_today(offset_hours, now)
    options: list[DateOption] = []
    for days_back in range(count):
        day = today - timedelta(days=days_back)
        if days_back == 0:
            label = f"Today - {format_calendar_label(day, offset_hours)}"
        elif days_back == 1:
            label = f"Yesterday - {format_calendar_label(day, offset_hours)}"
        else:
            label = format_calendar_label(day, offset_hours, include_year=True)
        options.append(DateOption(value=day.isoformat(), label=label))
    return options


def parse_local_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` option value back into a local calendar date."""
    return date.fromisoformat(value.strip())
