"""Pure view-model assembly - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date

from .day_filter import events_for_day, split_all_day
from .events import CalendarEvent, source_color
from .formatting import period_label
from .layout import PositionedEvent, layout_day
from .view_state import ViewState
from .window import ViewMode, ViewWindow, ordered_day_names

MONTH_CELL_MAX_VISIBLE = 3


@dataclass
class SourceBadge:
    """A calendar toggle shown above the schedule."""

    source_id: str
    name: str
    color: str
    hidden: bool

    @property
    def initial(self) -> str:
        return self.name[:1].upper()


@dataclass
class DayCell:
    """One day of the month grid or the compact week list."""

    day: date
    events: list[CalendarEvent]
    is_today: bool
    in_month: bool = True
    max_visible: int | None = None

    def shown(self) -> list[CalendarEvent]:
        if self.max_visible is None:
            return self.events
        return self.events[: self.max_visible]

    def more_count(self) -> int:
        return len(self.events) - len(self.shown())


@dataclass
class ScheduleDay:
    """One column of the gridded week view."""

    day: date
    is_today: bool
    all_day: list[CalendarEvent]
    blocks: list[PositionedEvent]


@dataclass
class CalendarView:
    """Everything a renderer needs for the current view."""

    view_mode: ViewMode
    label: str
    days: list[DayCell] = field(default_factory=list)
    schedule: list[ScheduleDay] = field(default_factory=list)
    day_names: list[str] = field(default_factory=list)
    hours: list[int] = field(default_factory=list)
    max_all_day: int = 0
    sources: list[SourceBadge] = field(default_factory=list)


def source_name(source_id: str) -> str:
    """Display name of an entity: the part after the domain, e.g. 'family'."""
    _, _, name = source_id.partition(".")
    return name or source_id


def source_badges(
    source_ids: list[str],
    colors: dict[str, str] | None,
    hidden: frozenset[str],
) -> list[SourceBadge]:
    return [
        SourceBadge(
            source_id=sid,
            name=source_name(sid),
            color=source_color(sid, i, colors),
            hidden=sid in hidden,
        )
        for i, sid in enumerate(source_ids)
    ]


def assemble_view(
    state: ViewState,
    window: ViewWindow,
    events: list[CalendarEvent],
    source_ids: list[str],
    colors: dict[str, str] | None = None,
    first_day_of_week: int = 0,
    today: date | None = None,
) -> CalendarView:
    """
    Assemble the view model for the current state.

    Pure function - no I/O. Month and compact week views get simple
    chronological day lists; the gridded week gets column layout.
    """
    today = today or date.today()
    hidden = state.hidden_sources
    view = CalendarView(
        view_mode=state.view_mode,
        label=period_label(state.view_mode, state.anchor, window.days),
        sources=source_badges(source_ids, colors, hidden),
    )

    if state.view_mode == ViewMode.WEEK_STANDARD:
        view.hours = window.hours()
        for day in window.days:
            all_day, timed = split_all_day(events_for_day(day, events, hidden))
            view.schedule.append(
                ScheduleDay(
                    day=day,
                    is_today=day == today,
                    all_day=all_day,
                    blocks=layout_day(day, timed, window.start_hour, window.end_hour),
                )
            )
        view.max_all_day = max((len(d.all_day) for d in view.schedule), default=0)
        return view

    is_month = state.view_mode == ViewMode.MONTH
    if is_month:
        view.day_names = ordered_day_names(first_day_of_week)
    for day in window.days:
        view.days.append(
            DayCell(
                day=day,
                events=events_for_day(day, events, hidden),
                is_today=day == today,
                in_month=window.in_month(day),
                max_visible=MONTH_CELL_MAX_VISIBLE if is_month else None,
            )
        )
    return view
