"""Home Assistant calendar adapter - WebSocket API with REST fallback."""

import asyncio
import json
import logging
from datetime import date, datetime, timezone

import requests
import websockets

logger = logging.getLogger(__name__)

EVENT_LIST_COMMAND = "calendar/event/list"


class HomeAssistantError(Exception):
    """Raised when Home Assistant refuses or fails a request."""

    pass


class HomeAssistantAdapter:
    """
    Fetches calendar entity events from a Home Assistant instance.

    Implements CalendarProvider protocol.
    """

    def __init__(self, base_url: str, token: str, timeout: float = 30):
        """
        Initialize the adapter.

        Args:
            base_url: Instance URL, e.g. http://homeassistant.local:8123
            token: Long-lived access token.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session = requests.Session()

    @property
    def websocket_url(self) -> str:
        if self.base_url.startswith("https://"):
            return "wss://" + self.base_url[len("https://") :] + "/api/websocket"
        if self.base_url.startswith("http://"):
            return "ws://" + self.base_url[len("http://") :] + "/api/websocket"
        return self.base_url + "/api/websocket"

    async def _authenticate(self, ws) -> None:
        greeting = json.loads(await ws.recv())
        if greeting.get("type") != "auth_required":
            raise HomeAssistantError(f"Unexpected greeting: {greeting.get('type')}")
        await ws.send(json.dumps({"type": "auth", "access_token": self.token}))
        reply = json.loads(await ws.recv())
        if reply.get("type") != "auth_ok":
            raise HomeAssistantError(f"Authentication failed: {reply.get('message', reply.get('type'))}")

    async def list_events(self, source_id: str, start: datetime, end: datetime) -> list[dict]:
        """Fetch events over the WebSocket API."""
        async with websockets.connect(self.websocket_url, open_timeout=self.timeout) as ws:
            await self._authenticate(ws)
            await ws.send(
                json.dumps(
                    {
                        "id": 1,
                        "type": EVENT_LIST_COMMAND,
                        "entity_id": source_id,
                        "start_date_time": start.astimezone(timezone.utc).isoformat(),
                        "end_date_time": end.astimezone(timezone.utc).isoformat(),
                    }
                )
            )
            while True:
                message = json.loads(await ws.recv())
                if message.get("id") == 1 and message.get("type") == "result":
                    break

        if not message.get("success"):
            error = message.get("error") or {}
            raise HomeAssistantError(f"{EVENT_LIST_COMMAND} failed for {source_id}: {error.get('message', 'unknown error')}")

        result = message.get("result")
        if isinstance(result, dict):
            result = result.get("events")
        return list(result) if isinstance(result, list) else []

    async def get_events_rest(self, source_id: str, start: date, end: date) -> list[dict]:
        """Fetch events over the REST API, bounded by whole dates."""
        return await asyncio.to_thread(self._get_events_rest, source_id, start, end)

    def _get_events_rest(self, source_id: str, start: date, end: date) -> list[dict]:
        resp = self._session.get(
            f"{self.base_url}/api/calendars/{source_id}",
            params={
                "start": f"{start.isoformat()}T00:00:00Z",
                "end": f"{end.isoformat()}T23:59:59Z",
            },
            headers={"Authorization": f"Bearer {self.token}"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, list):
            logger.debug(f"Unexpected REST payload for {source_id}: {type(data).__name__}")
            return []
        return data
