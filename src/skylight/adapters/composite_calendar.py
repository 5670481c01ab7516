"""Composite calendar adapter - combines events from every configured entity."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, tzinfo

from skylight.core.events import (
    CalendarEvent,
    MalformedEventError,
    normalize_event,
    sort_events_by_start,
    source_color,
)
from skylight.ports.calendar_provider import CalendarProvider

logger = logging.getLogger(__name__)

STALE_AFTER_SECONDS = 60


@dataclass
class FetchState:
    """Refresh bookkeeping: in-progress flag and last completion time."""

    fetching: bool = False
    last_fetch: float | None = None


class CompositeCalendarAdapter:
    """
    Fetches every calendar entity concurrently and merges the results.

    Each entity tries the provider's primary channel, then its REST
    fallback; an entity failing both contributes no events. At most one
    refresh runs at a time, and unforced refreshes are skipped while the
    last one is younger than `stale_after` seconds.
    """

    def __init__(
        self,
        provider: CalendarProvider,
        tz: tzinfo,
        colors: dict[str, str] | None = None,
        timeout: float = 30,
        stale_after: float = STALE_AFTER_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.tz = tz
        self.colors = colors or {}
        self.timeout = timeout
        self.stale_after = stale_after
        self._clock = clock
        self.state = FetchState()

    def invalidate(self) -> None:
        """Forget the last refresh so the next one always runs."""
        self.state.last_fetch = None

    def is_stale(self) -> bool:
        if self.state.last_fetch is None:
            return True
        return self._clock() - self.state.last_fetch >= self.stale_after

    async def refresh(
        self,
        source_ids: list[str],
        window_start: datetime,
        window_end: datetime,
        force: bool = False,
    ) -> list[CalendarEvent] | None:
        """
        Fetch and merge events from all sources.

        Returns:
            The merged event list sorted by start, or None when the refresh
            was skipped (one already running, or the last one is fresh).
        """
        if self.state.fetching:
            logger.debug("Refresh already in progress, skipping")
            return None
        if not force and not self.is_stale():
            logger.debug("Events are fresh, skipping refresh")
            return None

        self.state.fetching = True
        try:
            batches = await asyncio.gather(
                *(
                    self._fetch_source(index, source_id, window_start, window_end)
                    for index, source_id in enumerate(source_ids)
                )
            )
        finally:
            self.state.fetching = False

        events = sort_events_by_start([e for batch in batches for e in batch])
        self.state.last_fetch = self._clock()
        logger.info(f"Fetched {len(events)} events from {len(source_ids)} calendars")
        return events

    async def _fetch_source(
        self,
        index: int,
        source_id: str,
        window_start: datetime,
        window_end: datetime,
    ) -> list[CalendarEvent]:
        try:
            records = await asyncio.wait_for(
                self.provider.list_events(source_id, window_start, window_end),
                timeout=self.timeout,
            )
        except Exception as e:
            logger.warning(f"Failed to fetch events for {source_id}: {e!r}, trying REST fallback")
            try:
                records = await asyncio.wait_for(
                    self.provider.get_events_rest(source_id, window_start.date(), window_end.date()),
                    timeout=self.timeout,
                )
            except Exception as e2:
                logger.error(f"REST fallback also failed for {source_id}: {e2!r}")
                return []

        return self._normalize(index, source_id, records or [])

    def _normalize(self, index: int, source_id: str, records: list[dict]) -> list[CalendarEvent]:
        color = source_color(source_id, index, self.colors)
        events = []
        for position, raw in enumerate(records):
            try:
                events.append(
                    normalize_event(
                        raw,
                        source_id=source_id,
                        color=color,
                        tz=self.tz,
                        fallback_id=f"{source_id}-{position}",
                    )
                )
            except MalformedEventError as e:
                logger.debug(f"Skipping malformed event from {source_id}: {e}")
                continue
            except Exception as e:
                logger.warning(f"Skipping unreadable event from {source_id}: {e!r}")
                continue
        return events
