"""Pure event normalization logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo

DEFAULT_PALETTE = [
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#FFA07A",
    "#98D8C8",
    "#F7DC6F",
    "#BB8FCE",
    "#85C1E2",
]


class MalformedEventError(ValueError):
    """Raised when a raw event record has no recognizable time encoding."""

    pass


@dataclass(frozen=True)
class TimedValue:
    """A `{"dateTime": ...}` time value."""

    date_time: str


@dataclass(frozen=True)
class AllDayValue:
    """A `{"date": ...}` time value."""

    date: str


@dataclass(frozen=True)
class LegacyValue:
    """A bare ISO-8601 string, all-day when it carries no time component."""

    text: str


RawEventTime = TimedValue | AllDayValue | LegacyValue


@dataclass(frozen=True)
class Attendee:
    identity: str


@dataclass
class CalendarEvent:
    """A calendar event in canonical form."""

    id: str
    summary: str
    start: datetime
    end: datetime
    all_day: bool
    source_id: str
    color: str
    description: str = ""
    location: str = ""
    attendees: list[Attendee] = field(default_factory=list)

    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() / 60)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "summary": self.summary,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "all_day": self.all_day,
            "source_id": self.source_id,
            "color": self.color,
            "description": self.description,
            "location": self.location,
            "attendees": [a.identity for a in self.attendees],
        }


def default_color(index: int) -> str:
    """Palette color for the source at position `index`."""
    return DEFAULT_PALETTE[index % len(DEFAULT_PALETTE)]


def source_color(source_id: str, index: int, overrides: dict[str, str] | None = None) -> str:
    """Resolve a source color: explicit override, else the cyclic palette."""
    if overrides and overrides.get(source_id):
        return overrides[source_id]
    return default_color(index)


def parse_raw_time(value) -> RawEventTime:
    """Detect which of the three time encodings a raw value uses."""
    if isinstance(value, dict):
        if value.get("dateTime"):
            return TimedValue(str(value["dateTime"]))
        if value.get("date"):
            return AllDayValue(str(value["date"]))
        raise MalformedEventError(f"Time object has neither dateTime nor date: {value!r}")
    if isinstance(value, str) and value:
        return LegacyValue(value)
    raise MalformedEventError(f"Unrecognized time value: {value!r}")


def _parse_datetime(text: str, tz: tzinfo) -> datetime:
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise MalformedEventError(f"Invalid date-time {text!r}: {e}") from e
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def _parse_date(text: str, tz: tzinfo) -> datetime:
    try:
        d = date.fromisoformat(text)
    except ValueError as e:
        raise MalformedEventError(f"Invalid date {text!r}: {e}") from e
    return datetime.combine(d, time.min, tzinfo=tz)


def resolve_time(raw: RawEventTime, tz: tzinfo) -> tuple[datetime, bool]:
    """Resolve a raw time value to (datetime in tz, is_all_day)."""
    match raw:
        case TimedValue(date_time=text):
            return _parse_datetime(text, tz), False
        case AllDayValue(date=text):
            return _parse_date(text, tz), True
        case LegacyValue(text=text) if "T" in text:
            return _parse_datetime(text, tz), False
        case LegacyValue(text=text):
            return _parse_date(text, tz), True
    raise MalformedEventError(f"Unsupported time value: {raw!r}")


def _event_id(raw: dict, fallback: str) -> str:
    uid = raw.get("uid") or raw.get("id")
    if not uid:
        return fallback
    if raw.get("recurrence_id"):
        return f"{uid}:{raw['recurrence_id']}"
    return str(uid)


def _attendees(raw: dict) -> list[Attendee]:
    attendees = raw.get("attendees")
    if not isinstance(attendees, list):
        return []
    return [
        Attendee(str(a.get("email") or a.get("displayName") or "Unknown"))
        for a in attendees
        if isinstance(a, dict)
    ]


def normalize_event(
    raw: dict,
    source_id: str,
    color: str,
    tz: tzinfo,
    fallback_id: str = "",
) -> CalendarEvent:
    """
    Convert one raw provider record into a CalendarEvent.

    Pure function - no I/O. The start value's shape decides `all_day`.
    A missing end defaults to one day (all-day) or zero length (timed).

    Raises:
        MalformedEventError: if the start or end cannot be parsed.
    """
    if not isinstance(raw, dict):
        raise MalformedEventError(f"Event record is not a mapping: {raw!r}")

    start, all_day = resolve_time(parse_raw_time(raw.get("start")), tz)

    if raw.get("end"):
        end, _ = resolve_time(parse_raw_time(raw["end"]), tz)
    elif all_day:
        end = start + timedelta(days=1)
    else:
        end = start

    end = max(end, start)

    return CalendarEvent(
        id=_event_id(raw, fallback_id or source_id),
        summary=str(raw.get("summary") or ""),
        start=start,
        end=end,
        all_day=all_day,
        source_id=source_id,
        color=color,
        description=str(raw.get("description") or ""),
        location=str(raw.get("location") or ""),
        attendees=_attendees(raw),
    )


def sort_events_by_start(events: list[CalendarEvent]) -> list[CalendarEvent]:
    """Sort events by start time, keeping the original order for ties."""
    return sorted(events, key=lambda e: e.start)
