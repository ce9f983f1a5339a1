"""
Sidebar settings.

Settings are stored in ~/.config/zjsidebar/sidebar_config.json and merged
over the defaults in ``constants``. The shared collapse record lives in the
same directory unless ZJSIDEBAR_STATE_DIR points somewhere else.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from .constants import (
    ALERT_TICK_SECONDS,
    COLLAPSE_RECORD_FILENAME,
    COLLAPSED_WIDTH,
    DEFAULT_FLASH_UNITS,
    DEFAULT_TOGGLE_KEY,
    DEFAULT_TOGGLE_MODE,
    ENV_STATE_DIR,
    EXPANDED_WIDTH,
    POLL_CEILING_SECONDS,
    POLL_FLOOR_SECONDS,
    POLL_GROWTH_FACTOR,
    SETTINGS_FILENAME,
    SIDEBAR_CONFIG_DIR,
)

logger = logging.getLogger(__name__)


@dataclass
class SidebarSettings:
    """Tunable behaviour of a sidebar instance."""

    tick_seconds: float = ALERT_TICK_SECONDS
    poll_floor: float = POLL_FLOOR_SECONDS
    poll_ceiling: float = POLL_CEILING_SECONDS
    poll_growth: float = POLL_GROWTH_FACTOR
    flash_units: int = DEFAULT_FLASH_UNITS
    strict_broadcast: bool = False
    toggle_key: str = DEFAULT_TOGGLE_KEY
    toggle_mode: str = DEFAULT_TOGGLE_MODE
    expanded_width: int = EXPANDED_WIDTH
    collapsed_width: int = COLLAPSED_WIDTH

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def get_state_dir() -> Path:
    """Get the state directory, respecting the ZJSIDEBAR_STATE_DIR override.

    Tests point the override at a temp directory so they never touch the
    user's real collapse record.
    """
    override = os.environ.get(ENV_STATE_DIR)
    state_dir = Path(override) if override else SIDEBAR_CONFIG_DIR
    state_dir.mkdir(parents=True, exist_ok=True)
    return state_dir


def get_collapse_record_path() -> Path:
    """Path of the record shared by every sidebar instance."""
    return get_state_dir() / COLLAPSE_RECORD_FILENAME


def get_settings_path() -> Path:
    return get_state_dir() / SETTINGS_FILENAME


def load_sidebar_settings(path: Path | None = None) -> SidebarSettings:
    """
    Load settings from file.

    Unknown keys are ignored and values of the wrong type fall back to the
    default for that field, as does a poll range that could not back off
    (non-positive floor, ceiling below floor, growth below 1).

    Returns:
        SidebarSettings, or defaults if the file doesn't exist or is invalid
    """
    path = path or get_settings_path()
    if not path.exists():
        return SidebarSettings()

    try:
        raw = json.loads(path.read_text())
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.debug("Ignoring unreadable settings file %s: %s", path, e)
        return SidebarSettings()

    if not isinstance(raw, dict):
        return SidebarSettings()

    defaults = SidebarSettings()
    values: dict[str, Any] = {}
    for field in fields(SidebarSettings):
        if field.name not in raw:
            continue
        default = getattr(defaults, field.name)
        value = raw[field.name]
        if isinstance(default, float) and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        if type(value) is not type(default):
            logger.debug("Ignoring setting %s=%r: expected %s", field.name, value, type(default).__name__)
            continue
        values[field.name] = value

    settings = SidebarSettings(**values)
    if settings.tick_seconds <= 0:
        logger.debug("Ignoring tick_seconds=%r: must be positive", settings.tick_seconds)
        settings.tick_seconds = defaults.tick_seconds
    if not _valid_poll_range(settings):
        logger.debug(
            "Ignoring poll range floor=%r ceiling=%r growth=%r",
            settings.poll_floor,
            settings.poll_ceiling,
            settings.poll_growth,
        )
        settings.poll_floor = defaults.poll_floor
        settings.poll_ceiling = defaults.poll_ceiling
        settings.poll_growth = defaults.poll_growth
    return settings


def _valid_poll_range(settings: SidebarSettings) -> bool:
    return (
        settings.poll_floor > 0
        and settings.poll_ceiling >= settings.poll_floor
        and settings.poll_growth >= 1
    )
