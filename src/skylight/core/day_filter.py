"""Pure per-day event selection - no I/O dependencies."""

from collections.abc import Collection, Iterable
from datetime import date

from .events import CalendarEvent


def event_day_bounds(event: CalendarEvent) -> tuple[date, date]:
    """Local calendar days of the event's start and end."""
    return event.start.date(), event.end.date()


def occupies_day(event: CalendarEvent, day: date) -> bool:
    """
    Check whether an event appears on `day`.

    All-day events end exclusively. Timed events end inclusively at day
    granularity, so an event running past midnight shows on both days.
    """
    start_day, end_day = event_day_bounds(event)
    if event.all_day:
        return start_day <= day < end_day
    return start_day <= day <= end_day


def visible_events(
    events: Iterable[CalendarEvent],
    hidden_sources: Collection[str] = (),
) -> list[CalendarEvent]:
    """Drop events from hidden calendars."""
    return [e for e in events if e.source_id not in hidden_sources]


def split_all_day(events: Iterable[CalendarEvent]) -> tuple[list[CalendarEvent], list[CalendarEvent]]:
    """Partition into (all-day, timed), preserving order."""
    all_day: list[CalendarEvent] = []
    timed: list[CalendarEvent] = []
    for event in events:
        (all_day if event.all_day else timed).append(event)
    return all_day, timed


def events_for_day(
    day: date,
    events: Iterable[CalendarEvent],
    hidden_sources: Collection[str] = (),
) -> list[CalendarEvent]:
    """
    Events shown on `day`: all-day first in order of appearance, then timed
    events by start time (stable).

    Pure function - no I/O.
    """
    matching = [e for e in visible_events(events, hidden_sources) if occupies_day(e, day)]
    all_day, timed = split_all_day(matching)
    return all_day + sorted(timed, key=lambda e: e.start)
