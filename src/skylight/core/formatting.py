"""Display formatting for dates, times and view periods."""

from datetime import date, datetime

from .window import ViewMode

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def format_hour(hour: int) -> str:
    """12-hour label for an hour row, e.g. '12 AM', '1 PM'."""
    if hour == 0:
        return "12 AM"
    if hour == 12:
        return "12 PM"
    if hour < 12:
        return f"{hour} AM"
    return f"{hour - 12} PM"


def format_time(dt: datetime) -> str:
    """e.g. '9:05 AM'."""
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def format_date(d: date) -> str:
    """e.g. 'Saturday, June 1, 2024'."""
    return f"{WEEKDAY_NAMES[d.weekday()]}, {MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_duration(start: datetime, end: datetime) -> str:
    """e.g. '45 minutes', '2 hours', '1 hour 30 minutes'."""
    total = int((end - start).total_seconds() // 60)
    hours, minutes = divmod(total, 60)
    if hours == 0:
        return _plural(minutes, "minute")
    if minutes == 0:
        return _plural(hours, "hour")
    return f"{_plural(hours, 'hour')} {_plural(minutes, 'minute')}"


def period_label(view_mode: ViewMode, anchor: date, days: list[date]) -> str:
    """Header label: 'June 2024' for months, 'June 2-8, 2024' for weeks."""
    if view_mode == ViewMode.MONTH:
        return f"{MONTH_NAMES[anchor.month - 1]} {anchor.year}"
    if not days:
        return ""
    start, end = days[0], days[-1]
    if start.year != end.year:
        return f"{MONTH_NAMES[start.month - 1]} {start.day}, {start.year} - {MONTH_NAMES[end.month - 1]} {end.day}, {end.year}"
    if start.month == end.month:
        return f"{MONTH_NAMES[start.month - 1]} {start.day}-{end.day}, {start.year}"
    return f"{MONTH_NAMES[start.month - 1]} {start.day} - {MONTH_NAMES[end.month - 1]} {end.day}, {start.year}"
