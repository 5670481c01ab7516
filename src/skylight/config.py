"""Configuration management for Skylight."""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil.tz import tzlocal

from .core.window import ALL_WEEK_DAYS, ViewMode

logger = logging.getLogger(__name__)

SKYLIGHT_HOME = Path(os.environ.get("SKYLIGHT_HOME", Path.home() / "skylight"))
CONFIG_FILE = SKYLIGHT_HOME / "config" / "skylight.conf"

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


class ConfigurationError(ValueError):
    """Raised when the widget configuration is missing or invalid."""

    pass


@dataclass
class Config:
    """Skylight configuration. Validated on construction."""

    entities: list[str]
    title: str = "Family Calendar"
    show_week_numbers: bool = True
    first_day_of_week: int = 0
    colors: dict[str, str] = field(default_factory=dict)
    max_events: int = 100
    view_mode: ViewMode = ViewMode.MONTH
    default_view: ViewMode = ViewMode.MONTH
    week_days: list[int] = field(default_factory=lambda: list(ALL_WEEK_DAYS))
    rolling_days: int | None = None
    week_start_hour: int = 8
    week_end_hour: int = 21
    # Presentation only, passed through to renderers
    compact_height: bool = False
    height_scale: float = 1.0
    compact_header: bool = False
    header_color: str = "var(--primary-color)"
    # Connection
    ha_url: str = "http://homeassistant.local:8123"
    ha_token: str = ""
    timezone: str = ""
    fetch_timeout: float = 30.0

    def __post_init__(self):
        if not isinstance(self.entities, list) or not self.entities:
            raise ConfigurationError("You need to define calendar entities")
        if not all(isinstance(e, str) and e for e in self.entities):
            raise ConfigurationError(f"Calendar entities must be non-empty strings: {self.entities!r}")
        if not 0 <= self.first_day_of_week <= 6:
            raise ConfigurationError(f"first_day_of_week must be 0-6, got {self.first_day_of_week}")
        if not self.week_days or any(not 0 <= d <= 6 for d in self.week_days):
            raise ConfigurationError(f"week_days must be a non-empty subset of 0-6, got {self.week_days!r}")
        if self.rolling_days is not None and self.rolling_days < 0:
            raise ConfigurationError(f"rolling_days must be non-negative, got {self.rolling_days}")
        for name in ("week_start_hour", "week_end_hour"):
            if not 0 <= getattr(self, name) <= 23:
                raise ConfigurationError(f"{name} must be 0-23, got {getattr(self, name)}")
        if self.week_start_hour > self.week_end_hour:
            raise ConfigurationError(
                f"week_start_hour ({self.week_start_hour}) must not be after week_end_hour ({self.week_end_hour})"
            )
        if self.fetch_timeout <= 0:
            raise ConfigurationError(f"fetch_timeout must be positive, got {self.fetch_timeout}")
        self.tzinfo()

    def tzinfo(self) -> tzinfo:
        """Display timezone: the configured zone, or the system's local rules."""
        if not self.timezone:
            return tzlocal()
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown timezone: {self.timezone}") from e


def _view_mode(value) -> ViewMode:
    try:
        return ViewMode(value)
    except ValueError as e:
        modes = ", ".join(m.value for m in ViewMode)
        raise ConfigurationError(f"Unknown view '{value}' (expected one of: {modes})") from e


def _int(key: str, value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e


def _float(key: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from e


def parse_card_config(data: dict) -> Config:
    """
    Build a Config from a card-style mapping.

    Unset (None) options fall back to their defaults. `default_view`
    defaults to `view_mode`.

    Raises:
        ConfigurationError: if entities are missing or any option is invalid.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping")

    entities = data.get("entities")
    if not isinstance(entities, list):
        raise ConfigurationError("You need to define calendar entities")

    view_mode = _view_mode(data.get("view_mode") or ViewMode.MONTH.value)
    default_view = _view_mode(data.get("default_view") or view_mode.value)

    colors = data.get("colors") or {}
    if not isinstance(colors, dict):
        raise ConfigurationError(f"colors must be a mapping, got {colors!r}")

    week_days = data.get("week_days")
    if week_days is None:
        week_days = list(ALL_WEEK_DAYS)
    elif not isinstance(week_days, list):
        raise ConfigurationError(f"week_days must be a list, got {week_days!r}")

    rolling = data.get("rolling_days")

    def opt(key, default):
        value = data.get(key)
        return default if value is None else value

    return Config(
        entities=list(entities),
        title=str(opt("title", "Family Calendar")),
        show_week_numbers=bool(opt("show_week_numbers", True)),
        first_day_of_week=_int("first_day_of_week", opt("first_day_of_week", 0)),
        colors={str(k): str(v) for k, v in colors.items()},
        max_events=_int("max_events", opt("max_events", 100)),
        view_mode=view_mode,
        default_view=default_view,
        week_days=[_int("week_days", d) for d in week_days],
        rolling_days=None if rolling is None else _int("rolling_days", rolling),
        week_start_hour=_int("week_start_hour", opt("week_start_hour", 8)),
        week_end_hour=_int("week_end_hour", opt("week_end_hour", 21)),
        compact_height=bool(opt("compact_height", False)),
        height_scale=_float("height_scale", opt("height_scale", 1.0)),
        compact_header=bool(opt("compact_header", False)),
        header_color=str(opt("header_color", "var(--primary-color)")),
        ha_url=str(opt("ha_url", "http://homeassistant.local:8123")),
        ha_token=str(opt("ha_token", "")),
        timezone=str(opt("timezone", "")),
        fetch_timeout=_float("fetch_timeout", opt("fetch_timeout", 30.0)),
    )


def _parse_bool(key: str, value: str) -> bool:
    if value.lower() in _TRUE:
        return True
    if value.lower() in _FALSE:
        return False
    raise ConfigurationError(f"{key} must be true or false, got {value!r}")


def _parse_list(key: str, value: str) -> list:
    """JSON array, or comma-separated text."""
    if value.startswith("["):
        try:
            data = json.loads(value)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse {key.upper()} JSON: {e}") from e
        if not isinstance(data, list):
            raise ConfigurationError(f"{key} must be a list")
        return data
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_colors(value: str) -> dict[str, str]:
    """JSON object, or "calendar.a:#FF0000,calendar.b:#00FF00"."""
    if value.startswith("{"):
        try:
            data = json.loads(value)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse COLORS JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError("colors must be a mapping")
        return data

    colors = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if ":" not in entry:
            logger.warning(f"Ignoring color entry without a color: {entry}")
            continue
        entity, color = entry.split(":", 1)
        colors[entity.strip()] = color.strip()
    return colors


def _unquote(value: str) -> str:
    """Handle quoted values with inline comments: "value" # comment"""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments, keeping "#" inside colors
    return re.split(r"\s+#", value, maxsplit=1)[0].strip()


def load_config(path: Path | None = None) -> Config:
    """Load configuration from skylight.conf file."""
    path = path or CONFIG_FILE
    data: dict = {}

    if path.exists():
        lines = path.read_text().splitlines()
    else:
        logger.warning(f"Config file not found: {path}")
        lines = []

    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "entities":
                data["entities"] = [str(e) for e in _parse_list(key, value)]
            case "week_days":
                data["week_days"] = _parse_list(key, value)
            case "colors":
                data["colors"] = _parse_colors(value)
            case "show_week_numbers" | "compact_height" | "compact_header":
                data[key] = _parse_bool(key, value)
            case "rolling_days":
                data[key] = None if value.lower() in ("", "none", "null") else value
            case (
                "title"
                | "view_mode"
                | "default_view"
                | "header_color"
                | "ha_url"
                | "ha_token"
                | "timezone"
                | "first_day_of_week"
                | "max_events"
                | "week_start_hour"
                | "week_end_hour"
                | "height_scale"
                | "fetch_timeout"
            ):
                data[key] = value

    return parse_card_config(data)
