"""Per-tab alert states.

An alert is one of two kinds sharing the color-alternation mechanic:

- ``CommandResult``: a command finished in a background tab. Flashes until
  the tab is visited, never expires.
- ``Notification``: an explicit nudge. Flashes ``flash_count`` full on/off
  cycles, then either expires or, when persistent, stays lit until visited.

Alert maps serialize to JSON keyed by the tab position so sibling instances
can adopt them verbatim.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from ..exceptions import PayloadError


@dataclass
class CommandResult:
    success: bool
    alternate_color: bool = True

    kind = "command_result"

    def tick(self) -> bool:
        """Flip the color. Returns True if the entry should be kept."""
        self.alternate_color = not self.alternate_color
        return True

    @property
    def needs_ticks(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "success": self.success, "alternate_color": self.alternate_color}


@dataclass
class Notification:
    flash_count: int
    persistent: bool = True
    alternate_color: bool = False

    kind = "notification"

    def tick(self) -> bool:
        """Advance one phase. Returns True if the entry should be kept.

        The count only drops on the "off" phase, so each unit is one full
        on/off cycle. A persistent notification that ran out of flashes
        stays lit and stops alternating.
        """
        if self.flash_count <= 0:
            if not self.persistent:
                return False
            self.alternate_color = True
            return True

        self.alternate_color = not self.alternate_color
        if not self.alternate_color:
            self.flash_count -= 1
            if self.flash_count == 0:
                if not self.persistent:
                    return False
                self.alternate_color = True
        return True

    @property
    def needs_ticks(self) -> bool:
        return self.flash_count > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "flash_count": self.flash_count,
            "persistent": self.persistent,
            "alternate_color": self.alternate_color,
        }


AlertState = Union[CommandResult, Notification]


def alert_from_dict(data: Any) -> AlertState:
    """Rebuild one alert from its JSON form."""
    if not isinstance(data, dict):
        raise PayloadError("Alert entry is not an object", entry=data)

    kind = data.get("kind", CommandResult.kind)
    alternate_color = data.get("alternate_color", True)
    if not isinstance(alternate_color, bool):
        raise PayloadError("alternate_color must be a boolean", entry=data)

    if kind == CommandResult.kind:
        success = data.get("success")
        if not isinstance(success, bool):
            raise PayloadError("success must be a boolean", entry=data)
        return CommandResult(success=success, alternate_color=alternate_color)

    if kind == Notification.kind:
        flash_count = data.get("flash_count")
        persistent = data.get("persistent", True)
        if isinstance(flash_count, bool) or not isinstance(flash_count, int) or flash_count < 0:
            raise PayloadError("flash_count must be a non-negative integer", entry=data)
        if not isinstance(persistent, bool):
            raise PayloadError("persistent must be a boolean", entry=data)
        return Notification(flash_count=flash_count, persistent=persistent, alternate_color=alternate_color)

    raise PayloadError("Unknown alert kind", kind=kind)


def dump_alert_map(alerts: dict[int, AlertState]) -> str:
    """Serialize an alert map for a broadcast payload."""
    return json.dumps({str(position): alert.to_dict() for position, alert in sorted(alerts.items())})


def load_alert_map(payload: str | None) -> dict[int, AlertState]:
    """Parse a broadcast payload back into an alert map.

    Raises:
        PayloadError: if the payload is missing, not JSON, or any entry is malformed
    """
    if not payload:
        raise PayloadError("Empty alert payload")
    try:
        raw = json.loads(payload)
    except json.JSONDecodeError as e:
        raise PayloadError("Alert payload is not valid JSON") from e
    if not isinstance(raw, dict):
        raise PayloadError("Alert payload is not an object")

    alerts: dict[int, AlertState] = {}
    for key, entry in raw.items():
        try:
            position = int(key)
        except (TypeError, ValueError) as e:
            raise PayloadError("Alert key is not a tab position", key=key) from e
        if position < 0:
            raise PayloadError("Alert key is negative", key=key)
        alerts[position] = alert_from_dict(entry)
    return alerts
