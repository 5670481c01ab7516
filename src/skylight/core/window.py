"""Pure date-window logic - which days and hours a view shows."""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum

ALL_WEEK_DAYS = (0, 1, 2, 3, 4, 5, 6)
DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

FETCH_DAYS_BEFORE = 30
FETCH_DAYS_AFTER = 60


class ViewMode(str, Enum):
    MONTH = "month"
    WEEK_COMPACT = "week-compact"
    WEEK_STANDARD = "week-standard"


@dataclass(frozen=True)
class ViewWindow:
    """Visible days of a view, plus the hour range for the gridded week."""

    days: list[date]
    start_hour: int | None = None
    end_hour: int | None = None
    month: tuple[int, int] | None = field(default=None, compare=False)

    def hours(self) -> list[int]:
        """Hour rows of the gridded week view (inclusive range)."""
        if self.start_hour is None or self.end_hour is None:
            return []
        return list(range(self.start_hour, self.end_hour + 1))

    def in_month(self, d: date) -> bool:
        """False for overflow days of a month grid."""
        if self.month is None:
            return True
        return (d.year, d.month) == self.month


def sunday_weekday(d: date) -> int:
    """Weekday with 0 = Sunday ... 6 = Saturday."""
    return d.isoweekday() % 7


def ordered_day_names(first_day_of_week: int = 0) -> list[str]:
    """Day-header labels rotated to start at `first_day_of_week`."""
    return DAY_NAMES[first_day_of_week:] + DAY_NAMES[:first_day_of_week]


def month_days(anchor: date, first_day_of_week: int = 0) -> list[date]:
    """
    Days of the month grid containing `anchor`.

    Leading overflow days from the previous month, every day of the month,
    then trailing days from the next month to complete the last 7-day row.
    """
    first = anchor.replace(day=1)
    days_in_month = calendar.monthrange(first.year, first.month)[1]
    leading = (sunday_weekday(first) - first_day_of_week + 7) % 7
    total = leading + days_in_month
    trailing = 0 if total % 7 == 0 else 7 - total % 7

    grid_start = first - timedelta(days=leading)
    return [grid_start + timedelta(days=i) for i in range(total + trailing)]


def week_start(anchor: date, first_day_of_week: int = 0) -> date:
    """Most recent day on or before `anchor` that falls on `first_day_of_week`."""
    diff = (sunday_weekday(anchor) - first_day_of_week + 7) % 7
    return anchor - timedelta(days=diff)


def week_days(
    anchor: date,
    first_day_of_week: int = 0,
    weekdays: tuple[int, ...] | list[int] = ALL_WEEK_DAYS,
) -> list[date]:
    """The 7 days of the anchor's week, filtered to `weekdays`."""
    start = week_start(anchor, first_day_of_week)
    days = [start + timedelta(days=i) for i in range(7)]
    return [d for d in days if sunday_weekday(d) in weekdays]


def rolling_days(anchor: date, count: int) -> list[date]:
    """The anchor plus the next `count` days."""
    return [anchor + timedelta(days=i) for i in range(count + 1)]


def compute_window(
    view_mode: ViewMode,
    anchor: date,
    first_day_of_week: int = 0,
    weekdays: tuple[int, ...] | list[int] = ALL_WEEK_DAYS,
    rolling: int | None = None,
    start_hour: int = 8,
    end_hour: int = 21,
) -> ViewWindow:
    """
    Compute the visible window for a view mode and anchor date.

    Pure function - no I/O. Rolling mode overrides the week views only;
    the month grid is unaffected by it.
    """
    if view_mode == ViewMode.MONTH:
        return ViewWindow(
            days=month_days(anchor, first_day_of_week),
            month=(anchor.year, anchor.month),
        )

    if rolling is not None:
        days = rolling_days(anchor, rolling)
    else:
        days = week_days(anchor, first_day_of_week, weekdays)

    if view_mode == ViewMode.WEEK_STANDARD:
        if start_hour > end_hour:
            raise ValueError(f"start_hour {start_hour} is after end_hour {end_hour}")
        return ViewWindow(days=days, start_hour=start_hour, end_hour=end_hour)
    return ViewWindow(days=days)


def add_months(d: date, months: int) -> date:
    """Shift a date by whole months, clamping to the target month's last day."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def navigation_step_days(rolling: int | None) -> int:
    """Days a week view moves per next/previous."""
    return rolling + 1 if rolling is not None else 7


def fetch_window(anchor: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Fixed fetch band around the anchor: 30 days before to 60 days after."""
    start = datetime.combine(anchor - timedelta(days=FETCH_DAYS_BEFORE), time.min, tzinfo=tz)
    end = datetime.combine(anchor + timedelta(days=FETCH_DAYS_AFTER), time.max, tzinfo=tz)
    return start, end
