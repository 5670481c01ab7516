"""View state and its navigation transitions - pure, no I/O."""

from dataclasses import dataclass, field, replace
from datetime import date, timedelta

from .window import ViewMode, add_months, navigation_step_days


@dataclass(frozen=True)
class ViewState:
    """What the widget is showing: mode, anchor date and hidden calendars."""

    view_mode: ViewMode
    anchor: date
    hidden_sources: frozenset[str] = field(default_factory=frozenset)


def shift_period(state: ViewState, direction: int, rolling: int | None = None) -> ViewState:
    """Move the anchor one period forward (direction=1) or back (direction=-1)."""
    if state.view_mode == ViewMode.MONTH:
        anchor = add_months(state.anchor, direction)
    else:
        anchor = state.anchor + timedelta(days=direction * navigation_step_days(rolling))
    return replace(state, anchor=anchor)


def next_period(state: ViewState, rolling: int | None = None) -> ViewState:
    return shift_period(state, 1, rolling)


def previous_period(state: ViewState, rolling: int | None = None) -> ViewState:
    return shift_period(state, -1, rolling)


def go_to_today(state: ViewState, today: date | None = None) -> ViewState:
    return replace(state, anchor=today or date.today())


def with_view_mode(state: ViewState, view_mode: ViewMode | str) -> ViewState:
    return replace(state, view_mode=ViewMode(view_mode))


def toggle_source(state: ViewState, source_id: str) -> ViewState:
    """Hide a visible calendar or show a hidden one."""
    return replace(state, hidden_sources=state.hidden_sources ^ {source_id})
