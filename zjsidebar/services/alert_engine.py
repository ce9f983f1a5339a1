"""Per-tab alert lifecycle.

The engine owns the map from tab position to alert state. It is advanced by
reports (CLI pipe requests), timer ticks and tab activation, and is read by
the renderer and the broadcast relay. It never arms timers itself: every
call tells the caller whether more ticks are needed.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Set

from ..exceptions import TabNotFoundError
from ..models.alerts import AlertState, CommandResult, Notification
from ..models.tabs import TabSnapshot

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """What a single tick did to the alert map."""

    removed: Set[int] = field(default_factory=set)
    needs_more: bool = False


class AlertEngine:
    """Alert state keyed by tab position."""

    def __init__(self) -> None:
        self._alerts: Dict[int, AlertState] = {}
        self._known_positions: Set[int] = set()
        self._active_position: Optional[int] = None

    @property
    def active_position(self) -> Optional[int]:
        return self._active_position

    def is_empty(self) -> bool:
        return not self._alerts

    def needs_ticks(self) -> bool:
        """True while any entry still alternates."""
        return any(alert.needs_ticks for alert in self._alerts.values())

    def sync_tabs(self, snapshot: TabSnapshot) -> None:
        """Track which positions exist and which one is active.

        Entries for tabs that no longer exist are dropped, and the active
        tab's entry is cleared.
        """
        self._known_positions = snapshot.positions()
        for position in list(self._alerts):
            if position not in self._known_positions:
                del self._alerts[position]

        active = snapshot.active
        if active is not None:
            self._active_position = active.position
            self.clear_on_activation(active.position)

    def report_command_result(self, tab_position: int, success: bool) -> bool:
        """Record that a command finished in ``tab_position``.

        Returns:
            True if this is the first alert (the map was empty before)

        Raises:
            TabNotFoundError: if the position does not match a known tab
        """
        if tab_position not in self._known_positions:
            raise TabNotFoundError("No tab at position", position=tab_position)

        first_alert = not self._alerts
        self._alerts[tab_position] = CommandResult(success=success, alternate_color=True)
        logger.debug("Command result alert on tab %s (success=%s)", tab_position, success)
        return first_alert

    def report_notification(self, target_tab: int, flash_units: int) -> bool:
        """Flash ``target_tab`` for ``flash_units`` on/off cycles.

        Refused for the active tab and for positions that are not known.
        """
        if target_tab == self._active_position:
            logger.debug("Ignoring notification for active tab %s", target_tab)
            return False
        if target_tab not in self._known_positions:
            logger.debug("Ignoring notification for unknown tab %s", target_tab)
            return False

        self._alerts[target_tab] = Notification(flash_count=max(flash_units, 0), persistent=True)
        return True

    def advance_one_tick(self) -> TickResult:
        """Apply one timer tick to every entry.

        A tick on an empty map is a no-op and reports that no further ticks
        are needed, so the caller does not re-arm the timer.
        """
        if not self._alerts:
            return TickResult()

        removed = set()
        for position, alert in list(self._alerts.items()):
            if not alert.tick():
                del self._alerts[position]
                removed.add(position)

        if removed:
            logger.debug("Alerts expired on tabs %s", sorted(removed))
        return TickResult(removed=removed, needs_more=self.needs_ticks())

    def clear_on_activation(self, tab_position: int) -> bool:
        """Drop any alert for a tab that just became active."""
        return self._alerts.pop(tab_position, None) is not None

    def replace_all(self, alerts: Dict[int, AlertState]) -> None:
        """Adopt an alert map computed elsewhere, keeping the active-tab invariant."""
        self._alerts = dict(alerts)
        if self._active_position is not None:
            self._alerts.pop(self._active_position, None)

    def snapshot(self) -> Dict[int, AlertState]:
        """Read-only copy of the alert map."""
        return {position: replace(alert) for position, alert in self._alerts.items()}

    def get(self, tab_position: int) -> Optional[AlertState]:
        return self._alerts.get(tab_position)
