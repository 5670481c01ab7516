"""Calendar widget controller - owns view state and the fetched event set.

Navigation commands (next/previous/today) are state transitions followed by a
forced refresh; view switches and calendar toggles only change what is shown.
"""

import time
from collections.abc import Callable
from datetime import date, datetime

from .adapters.composite_calendar import CompositeCalendarAdapter, FetchState
from .config import Config
from .core.day_filter import events_for_day
from .core.events import CalendarEvent
from .core.view_model import CalendarView, assemble_view
from .core.view_state import (
    ViewState,
    go_to_today,
    next_period,
    previous_period,
    toggle_source,
    with_view_mode,
)
from .core.window import ViewMode, ViewWindow, compute_window, fetch_window
from .ports.calendar_provider import CalendarProvider


class CalendarWidget:
    """Multi-calendar widget: month, compact week and gridded week views."""

    def __init__(
        self,
        config: Config,
        provider: CalendarProvider,
        today: date | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.tz = config.tzinfo()
        self.state = ViewState(view_mode=config.default_view, anchor=today or datetime.now(self.tz).date())
        self.events: list[CalendarEvent] = []
        self._fetcher = CompositeCalendarAdapter(
            provider,
            tz=self.tz,
            colors=config.colors,
            timeout=config.fetch_timeout,
            clock=clock,
        )

    @property
    def fetch_state(self) -> FetchState:
        return self._fetcher.state

    def window(self) -> ViewWindow:
        """Visible days (and hours) for the current state."""
        return compute_window(
            self.state.view_mode,
            self.state.anchor,
            first_day_of_week=self.config.first_day_of_week,
            weekdays=self.config.week_days,
            rolling=self.config.rolling_days,
            start_hour=self.config.week_start_hour,
            end_hour=self.config.week_end_hour,
        )

    async def refresh(self, force: bool = False) -> bool:
        """Refetch all calendars. Returns False when the refresh was skipped."""
        start, end = fetch_window(self.state.anchor, self.tz)
        events = await self._fetcher.refresh(self.config.entities, start, end, force=force)
        if events is None:
            return False
        self.events = events
        return True

    async def _navigate(self, state: ViewState) -> ViewState:
        self.state = state
        self._fetcher.invalidate()
        await self.refresh(force=True)
        return self.state

    async def next(self) -> ViewState:
        return await self._navigate(next_period(self.state, self.config.rolling_days))

    async def previous(self) -> ViewState:
        return await self._navigate(previous_period(self.state, self.config.rolling_days))

    async def today(self, as_of: date | None = None) -> ViewState:
        return await self._navigate(go_to_today(self.state, as_of or datetime.now(self.tz).date()))

    def set_view_mode(self, view_mode: ViewMode | str) -> ViewState:
        self.state = with_view_mode(self.state, view_mode)
        return self.state

    def toggle_source(self, source_id: str) -> ViewState:
        self.state = toggle_source(self.state, source_id)
        return self.state

    def events_for_day(self, day: date) -> list[CalendarEvent]:
        return events_for_day(day, self.events, self.state.hidden_sources)

    def view(self, today: date | None = None) -> CalendarView:
        """Assemble the view model for rendering."""
        return assemble_view(
            self.state,
            self.window(),
            self.events,
            self.config.entities,
            colors=self.config.colors,
            first_day_of_week=self.config.first_day_of_week,
            today=today or datetime.now(self.tz).date(),
        )
