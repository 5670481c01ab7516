"""Functional core - pure calendar view logic with no I/O."""

from .events import CalendarEvent, Attendee, MalformedEventError, normalize_event, sort_events_by_start
from .window import ViewMode, ViewWindow, compute_window, fetch_window
from .day_filter import events_for_day, occupies_day
from .layout import PositionedEvent, layout_day
from .view_state import ViewState
from .view_model import CalendarView, assemble_view

__all__ = [
    # Events
    "CalendarEvent",
    "Attendee",
    "MalformedEventError",
    "normalize_event",
    "sort_events_by_start",
    # Windows
    "ViewMode",
    "ViewWindow",
    "compute_window",
    "fetch_window",
    # Filtering and layout
    "events_for_day",
    "occupies_day",
    "PositionedEvent",
    "layout_day",
    # State and view model
    "ViewState",
    "CalendarView",
    "assemble_view",
]
