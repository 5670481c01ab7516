"""Skylight CLI - multi-calendar schedule viewer."""

import asyncio
import json
import logging
import sys
from datetime import date
from pathlib import Path

import click

from .adapters.home_assistant import HomeAssistantAdapter
from .config import Config, ConfigurationError, load_config
from .core.events import CalendarEvent
from .core.formatting import format_date, format_hour, format_time
from .core.view_model import CalendarView, source_badges
from .core.window import ViewMode
from .widget import CalendarWidget


@click.group()
@click.version_option(package_name="skylight-calendar")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to skylight.conf",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, config_path: Path | None, debug: bool):
    """Skylight - multi-calendar schedule viewer."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    ctx.obj = {"config_path": config_path}


def _load(ctx) -> Config:
    try:
        return load_config(ctx.obj["config_path"])
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _build_widget(
    ctx,
    view_mode: ViewMode,
    anchor: str | None,
    hide: tuple[str, ...],
) -> CalendarWidget:
    """Load config, fetch all calendars, and position the widget."""
    config = _load(ctx)
    try:
        target = date.fromisoformat(anchor) if anchor else None
    except ValueError:
        click.echo(f"Error: invalid date '{anchor}', expected YYYY-MM-DD", err=True)
        sys.exit(1)

    provider = HomeAssistantAdapter(config.ha_url, config.ha_token, timeout=config.fetch_timeout)
    widget = CalendarWidget(config, provider, today=target)
    widget.set_view_mode(view_mode)
    for source_id in hide:
        widget.toggle_source(source_id)
    asyncio.run(widget.refresh(force=True))
    return widget


def _event_line(event: CalendarEvent) -> str:
    time_str = "All day" if event.all_day else format_time(event.start)
    loc = f" @ {event.location}" if event.location else ""
    return f"  {time_str:9} {event.summary or 'Untitled Event'}{loc}"


def _view_to_json(view: CalendarView) -> str:
    data = {
        "view_mode": view.view_mode.value,
        "label": view.label,
        "sources": [
            {"id": s.source_id, "name": s.name, "color": s.color, "hidden": s.hidden}
            for s in view.sources
        ],
    }
    if view.view_mode == ViewMode.WEEK_STANDARD:
        data["hours"] = view.hours
        data["days"] = [
            {
                "date": d.day.isoformat(),
                "all_day": [e.to_dict() for e in d.all_day],
                "blocks": [
                    {
                        "event": b.event.to_dict(),
                        "column": b.column,
                        "total_columns": b.total_columns,
                        "start_offset_hours": b.start_offset_hours,
                        "duration_hours": b.duration_hours,
                    }
                    for b in d.blocks
                ],
            }
            for d in view.schedule
        ]
    else:
        data["days"] = [
            {
                "date": d.day.isoformat(),
                "in_month": d.in_month,
                "events": [e.to_dict() for e in d.events],
            }
            for d in view.days
        ]
    return json.dumps(data, indent=2)


def _show_day_list(view: CalendarView, skip_empty: bool) -> None:
    click.echo(view.label)
    for cell in view.days:
        if skip_empty and not cell.events:
            continue
        marker = " (today)" if cell.is_today else ""
        click.echo()
        click.echo(f"### {format_date(cell.day)}{marker}")
        if not cell.events:
            click.echo("  No events")
        for event in cell.shown():
            click.echo(_event_line(event))
        if cell.more_count():
            click.echo(f"  +{cell.more_count()} more")


def _show_schedule(view: CalendarView) -> None:
    click.echo(view.label)
    if view.hours:
        click.echo(f"Hours: {format_hour(view.hours[0])} - {format_hour(view.hours[-1])}")
    for day in view.schedule:
        marker = " (today)" if day.is_today else ""
        click.echo()
        click.echo(f"### {format_date(day.day)}{marker}")
        for event in day.all_day:
            click.echo(_event_line(event))
        for block in day.blocks:
            event = block.event
            span = f"{format_time(event.start)}-{format_time(event.end)}"
            column = f"[{block.column + 1}/{block.total_columns}]"
            click.echo(f"  {span:19} {column} {event.summary or 'Untitled'}")
        if not day.all_day and not day.blocks:
            click.echo("  No events")


def _view_options(f):
    f = click.option("--json", "as_json", is_flag=True, help="Output as JSON")(f)
    f = click.option("--hide", multiple=True, help="Calendar entity to hide (repeatable)")(f)
    f = click.option("--date", "-d", "anchor", default=None, help="Anchor date (YYYY-MM-DD), defaults to today")(f)
    return f


@main.command()
@_view_options
@click.pass_context
def month(ctx, anchor: str | None, hide: tuple[str, ...], as_json: bool):
    """Show the month grid."""
    widget = _build_widget(ctx, ViewMode.MONTH, anchor, hide)
    view = widget.view()
    if as_json:
        click.echo(_view_to_json(view))
    else:
        _show_day_list(view, skip_empty=True)


@main.command()
@_view_options
@click.pass_context
def week(ctx, anchor: str | None, hide: tuple[str, ...], as_json: bool):
    """Show the compact week list."""
    widget = _build_widget(ctx, ViewMode.WEEK_COMPACT, anchor, hide)
    view = widget.view()
    if as_json:
        click.echo(_view_to_json(view))
    else:
        _show_day_list(view, skip_empty=False)


@main.command()
@_view_options
@click.pass_context
def schedule(ctx, anchor: str | None, hide: tuple[str, ...], as_json: bool):
    """Show the hour-gridded week with side-by-side overlapping events."""
    widget = _build_widget(ctx, ViewMode.WEEK_STANDARD, anchor, hide)
    view = widget.view()
    if as_json:
        click.echo(_view_to_json(view))
    else:
        _show_schedule(view)


@main.command()
@click.pass_context
def sources(ctx):
    """List configured calendars and their colors."""
    config = _load(ctx)
    for badge in source_badges(config.entities, config.colors, frozenset()):
        origin = "configured" if badge.source_id in config.colors else "palette"
        click.echo(f"{badge.source_id:30} {badge.color} ({origin})")
