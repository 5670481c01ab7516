"""Overlap-column layout for the gridded week view - pure, no I/O."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from .events import CalendarEvent

MIN_DURATION_MINUTES = 15


@dataclass
class PositionedEvent:
    """A timed event placed in a day column, in hour units."""

    event: CalendarEvent
    column: int
    total_columns: int
    start_offset_hours: float
    duration_hours: float

    def rect(self, hour_height: float) -> tuple[float, float, float, float]:
        """(left, width) as fractions of the day width, (top, height) in hour_height units."""
        width = 1 / self.total_columns
        return (
            self.column * width,
            width,
            self.start_offset_hours * hour_height,
            self.duration_hours * hour_height,
        )


@dataclass
class _Block:
    event: CalendarEvent
    start_minutes: int
    end_minutes: int
    column: int = 0

    def overlaps(self, other: "_Block") -> bool:
        return self.start_minutes < other.end_minutes and self.end_minutes > other.start_minutes


def minutes_into_day(dt: datetime, day: date) -> int:
    """Wall-clock minutes from local midnight of `day` (negative before it)."""
    midnight = datetime.combine(day, time.min, tzinfo=dt.tzinfo)
    return (dt - midnight) // timedelta(minutes=1)


def layout_day(
    day: date,
    events: list[CalendarEvent],
    start_hour: int,
    end_hour: int,
    min_duration: int = MIN_DURATION_MINUTES,
) -> list[PositionedEvent]:
    """
    Assign the day's timed events to side-by-side columns.

    Only events starting on `day` within [start_hour, end_hour] are laid
    out; the rest are dropped, not clipped. An event continuing from the
    previous day is therefore absent from its continuation day's grid.
    Events are sorted by start, then longer first, and each goes into the
    first column it does not overlap.
    Every event shares the day's total column count.

    Durations shorter than `min_duration` minutes are stretched to it so
    zero-length events stay visible.
    """
    blocks = []
    for event in events:
        if event.all_day:
            continue
        start_minutes = minutes_into_day(event.start, day)
        if start_minutes < 0 or not start_hour <= start_minutes // 60 <= end_hour:
            continue
        end_minutes = max(minutes_into_day(event.end, day), start_minutes + min_duration)
        blocks.append(_Block(event, start_minutes, end_minutes))

    blocks.sort(key=lambda b: (b.start_minutes, -(b.end_minutes - b.start_minutes)))

    columns: list[list[_Block]] = []
    for block in blocks:
        for index, column in enumerate(columns):
            if not any(block.overlaps(other) for other in column):
                column.append(block)
                block.column = index
                break
        else:
            columns.append([block])
            block.column = len(columns) - 1

    total_columns = len(columns)
    return [
        PositionedEvent(
            event=b.event,
            column=b.column,
            total_columns=total_columns,
            start_offset_hours=b.start_minutes / 60 - start_hour,
            duration_hours=(b.end_minutes - b.start_minutes) / 60,
        )
        for b in blocks
    ]
