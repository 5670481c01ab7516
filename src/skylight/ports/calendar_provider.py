"""Calendar provider interface."""

from datetime import date, datetime
from typing import Protocol


class CalendarProvider(Protocol):
    """Interface for fetching raw event records for one calendar entity."""

    async def list_events(self, source_id: str, start: datetime, end: datetime) -> list[dict]:
        """Primary channel: events between two date-times."""
        ...

    async def get_events_rest(self, source_id: str, start: date, end: date) -> list[dict]:
        """Fallback channel: events between two dates."""
        ...
