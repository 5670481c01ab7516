"""Tests for event normalization."""

from datetime import datetime, timedelta, timezone

import pytest

from skylight.core.events import (
    DEFAULT_PALETTE,
    AllDayValue,
    Attendee,
    CalendarEvent,
    LegacyValue,
    MalformedEventError,
    TimedValue,
    default_color,
    normalize_event,
    parse_raw_time,
    resolve_time,
    sort_events_by_start,
    source_color,
)

TZ = timezone(timedelta(hours=-4))


def _normalize(raw: dict) -> CalendarEvent:
    return normalize_event(raw, source_id="calendar.family", color="#123456", tz=TZ, fallback_id="calendar.family-0")


class TestParseRawTime:
    def test_date_time_object(self):
        assert parse_raw_time({"dateTime": "2024-06-01T10:00:00-04:00"}) == TimedValue("2024-06-01T10:00:00-04:00")

    def test_date_object(self):
        assert parse_raw_time({"date": "2024-06-01"}) == AllDayValue("2024-06-01")

    def test_bare_string(self):
        assert parse_raw_time("2024-06-01") == LegacyValue("2024-06-01")

    def test_empty_object_is_malformed(self):
        with pytest.raises(MalformedEventError):
            parse_raw_time({})

    def test_missing_value_is_malformed(self):
        with pytest.raises(MalformedEventError):
            parse_raw_time(None)


class TestResolveTime:
    def test_timed_converted_to_display_timezone(self):
        dt, all_day = resolve_time(TimedValue("2024-06-01T14:00:00+00:00"), TZ)
        assert all_day is False
        assert dt == datetime(2024, 6, 1, 10, 0, tzinfo=TZ)
        assert dt.hour == 10

    def test_all_day_is_local_midnight(self):
        dt, all_day = resolve_time(AllDayValue("2024-06-01"), TZ)
        assert all_day is True
        assert dt == datetime(2024, 6, 1, tzinfo=TZ)

    def test_legacy_without_time_is_all_day(self):
        dt, all_day = resolve_time(LegacyValue("2024-06-01"), TZ)
        assert all_day is True
        assert dt.date().isoformat() == "2024-06-01"

    def test_legacy_with_time_is_timed(self):
        dt, all_day = resolve_time(LegacyValue("2024-06-01T09:30:00"), TZ)
        assert all_day is False
        assert dt == datetime(2024, 6, 1, 9, 30, tzinfo=TZ)

    def test_garbage_raises(self):
        with pytest.raises(MalformedEventError):
            resolve_time(LegacyValue("next tuesday"), TZ)

    def test_garbage_date_time_raises(self):
        with pytest.raises(MalformedEventError):
            resolve_time(TimedValue("2024-13-45T99:00"), TZ)


class TestNormalizeEvent:
    def test_timed_event(self):
        event = _normalize(
            {
                "summary": "Dentist",
                "start": {"dateTime": "2024-06-01T10:00:00-04:00"},
                "end": {"dateTime": "2024-06-01T11:00:00-04:00"},
                "location": "Main St",
                "description": "Cleaning",
            }
        )
        assert event.all_day is False
        assert event.summary == "Dentist"
        assert event.location == "Main St"
        assert event.description == "Cleaning"
        assert event.source_id == "calendar.family"
        assert event.color == "#123456"
        assert event.duration_minutes() == 60

    def test_all_day_event_end_is_exclusive(self):
        event = _normalize({"summary": "Camp", "start": {"date": "2024-06-01"}, "end": {"date": "2024-06-03"}})
        assert event.all_day is True
        assert event.end - event.start == timedelta(days=2)

    def test_legacy_string_all_day(self):
        event = _normalize({"summary": "Holiday", "start": "2024-06-01", "end": "2024-06-02"})
        assert event.all_day is True

    def test_legacy_string_timed(self):
        event = _normalize({"start": "2024-06-01T08:00:00-04:00", "end": "2024-06-01T09:00:00-04:00"})
        assert event.all_day is False
        assert event.start.hour == 8

    def test_missing_end_all_day_defaults_to_one_day(self):
        event = _normalize({"start": {"date": "2024-06-01"}})
        assert event.end - event.start == timedelta(days=1)

    def test_missing_end_timed_defaults_to_zero_length(self):
        event = _normalize({"start": {"dateTime": "2024-06-01T10:00:00-04:00"}})
        assert event.end == event.start

    def test_end_before_start_is_clamped(self):
        event = _normalize(
            {
                "start": {"dateTime": "2024-06-01T10:00:00-04:00"},
                "end": {"dateTime": "2024-06-01T09:00:00-04:00"},
            }
        )
        assert event.end == event.start

    def test_missing_start_raises(self):
        with pytest.raises(MalformedEventError):
            _normalize({"summary": "No time"})

    def test_non_mapping_raises(self):
        with pytest.raises(MalformedEventError):
            _normalize("not an event")

    def test_missing_summary_is_empty(self):
        event = _normalize({"start": {"date": "2024-06-01"}})
        assert event.summary == ""

    def test_uid_used_as_id(self):
        event = _normalize({"uid": "abc", "start": {"date": "2024-06-01"}})
        assert event.id == "abc"

    def test_recurring_instance_id(self):
        event = _normalize({"uid": "abc", "recurrence_id": "20240601", "start": {"date": "2024-06-01"}})
        assert event.id == "abc:20240601"

    def test_synthesized_id(self):
        event = _normalize({"start": {"date": "2024-06-01"}})
        assert event.id == "calendar.family-0"

    def test_attendees(self):
        event = _normalize(
            {
                "start": {"date": "2024-06-01"},
                "attendees": [
                    {"email": "sam@example.com"},
                    {"displayName": "Alex"},
                    {},
                ],
            }
        )
        assert event.attendees == [Attendee("sam@example.com"), Attendee("Alex"), Attendee("Unknown")]

    def test_non_list_attendees_ignored(self):
        event = _normalize({"start": {"date": "2024-06-01"}, "attendees": 5})
        assert event.attendees == []


class TestColors:
    def test_palette_is_cyclic(self):
        assert default_color(0) == DEFAULT_PALETTE[0]
        assert default_color(8) == DEFAULT_PALETTE[0]
        assert default_color(9) == DEFAULT_PALETTE[1]

    def test_override_wins(self):
        assert source_color("calendar.work", 0, {"calendar.work": "#000000"}) == "#000000"

    def test_no_override_uses_index(self):
        assert source_color("calendar.work", 2, {"calendar.other": "#000000"}) == DEFAULT_PALETTE[2]


class TestSortEventsByStart:
    def test_sorts_and_keeps_ties_stable(self):
        first = _normalize({"uid": "a", "start": {"dateTime": "2024-06-01T10:00:00-04:00"}})
        second = _normalize({"uid": "b", "start": {"dateTime": "2024-06-01T10:00:00-04:00"}})
        early = _normalize({"uid": "c", "start": {"dateTime": "2024-06-01T08:00:00-04:00"}})

        result = sort_events_by_start([first, second, early])

        assert [e.id for e in result] == ["c", "a", "b"]
