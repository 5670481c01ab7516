"""Adapters - I/O implementations of ports."""

from .home_assistant import HomeAssistantAdapter, HomeAssistantError
from .composite_calendar import CompositeCalendarAdapter

__all__ = [
    "HomeAssistantAdapter",
    "HomeAssistantError",
    "CompositeCalendarAdapter",
]
