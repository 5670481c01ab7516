"""Tests for the calendar widget controller."""

from datetime import date, datetime, timezone

import pytest

from skylight.config import Config
from skylight.core.events import DEFAULT_PALETTE
from skylight.core.window import ViewMode
from skylight.widget import CalendarWidget

TODAY = date(2024, 6, 12)  # Wednesday


def _timed(summary: str, start: str, end: str) -> dict:
    return {"summary": summary, "start": {"dateTime": start}, "end": {"dateTime": end}}


class FakeProvider:
    def __init__(self, records: dict[str, list[dict]]):
        self.records = records
        self.calls: list[tuple] = []

    async def list_events(self, source_id, start, end):
        self.calls.append((source_id, start, end))
        return self.records.get(source_id, [])

    async def get_events_rest(self, source_id, start, end):
        return []


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def provider():
    return FakeProvider(
        {
            "calendar.family": [
                _timed("Soccer", "2024-06-12T10:00:00+00:00", "2024-06-12T11:00:00+00:00"),
                _timed("Dinner", "2024-06-12T10:30:00+00:00", "2024-06-12T12:00:00+00:00"),
                _timed("Lunch", "2024-06-13T12:00:00+00:00", "2024-06-13T13:00:00+00:00"),
            ],
            "calendar.work": [
                {"summary": "Offsite", "start": {"date": "2024-06-12"}, "end": {"date": "2024-06-13"}},
                _timed("Standup", "2024-06-12T09:00:00+00:00", "2024-06-12T09:15:00+00:00"),
            ],
        }
    )


@pytest.fixture
def make_widget(provider):
    """Factory for widgets over the fake provider, with config overrides."""

    def _make(**overrides):
        options = {"entities": ["calendar.family", "calendar.work"], "timezone": "UTC"}
        options.update(overrides)
        return CalendarWidget(Config(**options), provider, today=TODAY, clock=FakeClock())

    return _make


class TestInitialState:
    def test_starts_on_default_view_at_today(self, make_widget):
        widget = make_widget(default_view=ViewMode.WEEK_COMPACT)

        assert widget.state.view_mode == ViewMode.WEEK_COMPACT
        assert widget.state.anchor == TODAY
        assert widget.state.hidden_sources == frozenset()
        assert widget.events == []

    @pytest.mark.asyncio
    async def test_refresh_fetches_band_around_anchor(self, make_widget, provider):
        widget = make_widget()

        assert await widget.refresh() is True

        assert len(widget.events) == 5
        _, start, end = provider.calls[0]
        assert start == datetime(2024, 5, 13, tzinfo=timezone.utc)
        assert end.date() == date(2024, 8, 11)

    @pytest.mark.asyncio
    async def test_fresh_refresh_is_skipped(self, make_widget, provider):
        widget = make_widget()

        await widget.refresh()
        assert await widget.refresh() is False
        assert len(provider.calls) == 2


class TestNavigation:
    @pytest.mark.asyncio
    async def test_next_month_refetches_even_when_fresh(self, make_widget, provider):
        widget = make_widget()
        await widget.refresh()

        state = await widget.next()

        assert state.anchor == date(2024, 7, 12)
        assert len(provider.calls) == 4
        _, start, _ = provider.calls[-1]
        assert start == datetime(2024, 6, 12, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_previous_week(self, make_widget):
        widget = make_widget(default_view=ViewMode.WEEK_STANDARD)

        state = await widget.previous()

        assert state.anchor == date(2024, 6, 5)

    @pytest.mark.asyncio
    async def test_rolling_step(self, make_widget):
        widget = make_widget(default_view=ViewMode.WEEK_COMPACT, rolling_days=2)

        await widget.next()

        assert widget.state.anchor == date(2024, 6, 15)
        assert widget.window().days == [date(2024, 6, 15), date(2024, 6, 16), date(2024, 6, 17)]

    @pytest.mark.asyncio
    async def test_today_returns_to_date(self, make_widget, provider):
        widget = make_widget()
        await widget.next()
        await widget.next()

        state = await widget.today(as_of=TODAY)

        assert state.anchor == TODAY
        assert len(provider.calls) == 6

    @pytest.mark.asyncio
    async def test_navigation_keeps_hidden_sources(self, make_widget):
        widget = make_widget()
        widget.toggle_source("calendar.work")

        await widget.next()

        assert widget.state.hidden_sources == frozenset({"calendar.work"})


class TestLocalChanges:
    @pytest.mark.asyncio
    async def test_set_view_mode_does_not_refetch(self, make_widget, provider):
        widget = make_widget()
        await widget.refresh()

        widget.set_view_mode("week-standard")

        assert widget.state.view_mode == ViewMode.WEEK_STANDARD
        assert widget.state.anchor == TODAY
        assert len(provider.calls) == 2

    def test_unknown_view_mode_rejected(self, make_widget):
        widget = make_widget()
        with pytest.raises(ValueError):
            widget.set_view_mode("year")

    @pytest.mark.asyncio
    async def test_toggle_source_hides_and_restores(self, make_widget, provider):
        widget = make_widget()
        await widget.refresh()

        widget.toggle_source("calendar.work")
        hidden = [e.summary for e in widget.events_for_day(TODAY)]
        widget.toggle_source("calendar.work")
        restored = [e.summary for e in widget.events_for_day(TODAY)]

        assert hidden == ["Soccer", "Dinner"]
        assert restored == ["Offsite", "Standup", "Soccer", "Dinner"]
        assert len(provider.calls) == 2


class TestView:
    @pytest.mark.asyncio
    async def test_month_view(self, make_widget):
        widget = make_widget()
        await widget.refresh()

        view = widget.view(today=TODAY)

        assert view.label == "June 2024"
        assert view.day_names[0] == "Sun"
        assert len(view.days) == 42
        assert view.days[0].day == date(2024, 5, 26)
        assert view.days[0].in_month is False

        cell = next(c for c in view.days if c.day == TODAY)
        assert cell.is_today is True
        assert [e.summary for e in cell.shown()] == ["Offsite", "Standup", "Soccer"]
        assert cell.more_count() == 1

    @pytest.mark.asyncio
    async def test_month_view_with_monday_start(self, make_widget):
        widget = make_widget(first_day_of_week=1)
        await widget.refresh()

        view = widget.view(today=TODAY)

        assert view.day_names[0] == "Mon"
        assert view.days[0].day == date(2024, 5, 27)

    @pytest.mark.asyncio
    async def test_compact_week_view(self, make_widget):
        widget = make_widget(default_view=ViewMode.WEEK_COMPACT)
        await widget.refresh()

        view = widget.view(today=TODAY)

        assert view.label == "June 9-15, 2024"
        assert [c.day for c in view.days][0] == date(2024, 6, 9)
        assert len(view.days) == 7
        cell = next(c for c in view.days if c.day == TODAY)
        assert cell.max_visible is None
        assert len(cell.shown()) == 4
        assert cell.more_count() == 0

    @pytest.mark.asyncio
    async def test_filtered_weekdays(self, make_widget):
        widget = make_widget(default_view=ViewMode.WEEK_COMPACT, week_days=[1, 2, 3, 4, 5])
        await widget.refresh()

        view = widget.view(today=TODAY)

        assert [c.day for c in view.days] == [date(2024, 6, d) for d in range(10, 15)]

    @pytest.mark.asyncio
    async def test_standard_week_view(self, make_widget):
        widget = make_widget(default_view=ViewMode.WEEK_STANDARD, week_start_hour=8, week_end_hour=18)
        await widget.refresh()

        view = widget.view(today=TODAY)

        assert view.hours == list(range(8, 19))
        assert view.max_all_day == 1
        day = next(d for d in view.schedule if d.day == TODAY)
        assert [e.summary for e in day.all_day] == ["Offsite"]

        blocks = {b.event.summary: b for b in day.blocks}
        assert blocks["Standup"].column == 0
        assert blocks["Soccer"].column == 0
        assert blocks["Dinner"].column == 1
        assert {b.total_columns for b in day.blocks} == {2}
        assert blocks["Dinner"].start_offset_hours == pytest.approx(2.5)
        assert blocks["Dinner"].duration_hours == pytest.approx(1.5)

    @pytest.mark.asyncio
    async def test_source_badges(self, make_widget):
        widget = make_widget(colors={"calendar.work": "#000000"})
        widget.toggle_source("calendar.family")

        view = widget.view(today=TODAY)

        assert [(s.name, s.color, s.hidden) for s in view.sources] == [
            ("family", DEFAULT_PALETTE[0], True),
            ("work", "#000000", False),
        ]
        assert view.sources[0].initial == "F"
