"""
Sidebar orchestration.

``SidebarController`` is the only piece that deals with host events. It
routes each event into the alert engine, collapse sync and broadcast relay
and answers with a ``DispatchResult`` describing what changed and which
actions the host should take. Timer scheduling is part of that answer:
components never arm timers themselves.

Arming a timer that is already armed reschedules it.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from rich.text import Text

from .config.constants import (
    HEADER_ROWS,
    PIPE_BROADCAST,
    PIPE_NOTIFY,
    PIPE_TAB_ALERT,
    PIPE_TOGGLE,
    TIMER_ALERTS,
    TIMER_COLLAPSE_POLL,
)
from .config.settings import SidebarSettings
from .exceptions import TabNotFoundError
from .models.collapse import now_millis
from .models.events import (
    ArmTimer,
    BroadcastAlerts,
    DispatchResult,
    Event,
    KeyPress,
    ModeUpdate,
    MouseClick,
    MouseScroll,
    PaneUpdate,
    PermissionResult,
    PipeMessage,
    Redraw,
    SetSelectable,
    SwapLayout,
    SwitchTab,
    TabUpdate,
    TimerFired,
)
from .models.tabs import PaneManifest, TabSnapshot
from .names import NameCache
from .services.alert_engine import AlertEngine
from .services.broadcast_relay import BroadcastRelay
from .services.collapse_store import CollapseStore
from .services.collapse_sync import CollapseSync, PollState
from .ui.sidebar_renderer import SidebarRenderer, tab_at_row

logger = logging.getLogger(__name__)


class SidebarHost(Protocol):
    """Primitives a host must provide to carry out controller actions."""

    def redraw(self) -> None:
        ...

    def switch_tab(self, index: int) -> None:
        ...

    def swap_layout(self, collapsed: bool) -> None:
        ...

    def broadcast(self, name: str, payload: str) -> None:
        ...

    def arm_timer(self, timer: str, seconds: float) -> None:
        ...

    def set_selectable(self, selectable: bool) -> None:
        ...


def apply_actions(host: SidebarHost, result: DispatchResult) -> None:
    """Carry out every action of a dispatch result on ``host``, in order."""
    for action in result.actions:
        if isinstance(action, Redraw):
            host.redraw()
        elif isinstance(action, SwitchTab):
            host.switch_tab(action.index)
        elif isinstance(action, SwapLayout):
            host.swap_layout(action.collapsed)
        elif isinstance(action, BroadcastAlerts):
            host.broadcast(action.name, action.payload)
        elif isinstance(action, ArmTimer):
            host.arm_timer(action.timer, action.seconds)
        elif isinstance(action, SetSelectable):
            host.set_selectable(action.selectable)


class SidebarController:
    """One sidebar instance."""

    def __init__(
        self,
        store: CollapseStore,
        settings: SidebarSettings | None = None,
        clock: Callable[[], int] | None = None,
    ):
        self.settings = settings or SidebarSettings()
        self.engine = AlertEngine()
        self.relay = BroadcastRelay(self.engine, strict=self.settings.strict_broadcast)
        poll_state = PollState(
            floor=self.settings.poll_floor,
            ceiling=self.settings.poll_ceiling,
            growth_factor=self.settings.poll_growth,
        )
        self.sync = CollapseSync(store, poll_state, clock=clock or now_millis)
        self.names = NameCache()
        self.renderer = SidebarRenderer(self.names)

        self.snapshot = TabSnapshot()
        self.manifest = PaneManifest()
        self.mode = "NORMAL"
        self.dark = True
        self._alert_timer_armed = False

        self._handlers: dict[type, Callable[[Event], DispatchResult]] = {
            TabUpdate: self._on_tab_update,
            PaneUpdate: self._on_pane_update,
            ModeUpdate: self._on_mode_update,
            MouseClick: self._on_mouse_click,
            MouseScroll: self._on_mouse_scroll,
            KeyPress: self._on_key_press,
            TimerFired: self._on_timer,
            PermissionResult: self._on_permission_result,
            PipeMessage: self._on_pipe_message,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self) -> DispatchResult:
        """Start-up actions: stay selectable until permissions are answered,
        and start polling the shared collapse record."""
        result = DispatchResult()
        result.add(SetSelectable(True))
        result.add(ArmTimer(TIMER_COLLAPSE_POLL, self.sync.next_poll_delay()))
        return result

    @property
    def collapsed(self) -> bool:
        return self.sync.desired_state()

    @property
    def active_index(self) -> int | None:
        """1-based number of the active tab."""
        active = self.snapshot.active
        return active.number if active is not None else None

    def handle(self, event: Event) -> DispatchResult:
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.debug("Got unrecognized event: %r", event)
            return DispatchResult()
        return handler(event)

    def render(self, rows: int, cols: int) -> list[Text]:
        return self.renderer.render(
            self.snapshot,
            self.engine.snapshot(),
            rows,
            cols,
            mode=self.mode,
            dark=self.dark,
            collapsed=self.collapsed,
        )

    # ------------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------------

    def _on_tab_update(self, event: TabUpdate) -> DispatchResult:
        snapshot = TabSnapshot(tabs=tuple(event.tabs))
        active = snapshot.active
        if active is None:
            logger.warning("Could not find active tab.")
            return DispatchResult()

        previous = self.snapshot.active
        changed = previous is None or previous.position != active.position or snapshot != self.snapshot
        self.snapshot = snapshot
        self.engine.sync_tabs(snapshot)
        return DispatchResult(state_changed=changed)

    def _on_pane_update(self, event: PaneUpdate) -> DispatchResult:
        self.manifest = event.manifest
        return DispatchResult()

    def _on_mode_update(self, event: ModeUpdate) -> DispatchResult:
        changed = event.mode != self.mode or event.dark != self.dark
        self.mode = event.mode
        self.dark = event.dark
        if event.session_name:
            self.names.set_session(event.session_name)
        return DispatchResult(state_changed=changed)

    def _on_mouse_click(self, event: MouseClick) -> DispatchResult:
        if event.row < HEADER_ROWS:
            return self._toggle_collapse()

        result = DispatchResult()
        tab = tab_at_row(self.snapshot, event.row)
        if tab is not None:
            result.add(SwitchTab(tab.number))
        return result

    def _on_mouse_scroll(self, event: MouseScroll) -> DispatchResult:
        result = DispatchResult()
        current = self.active_index
        if current is None:
            return result
        if event.up:
            target = min(current + 1, len(self.snapshot))
        else:
            target = max(current - 1, 1)
        result.add(SwitchTab(target))
        return result

    def _on_key_press(self, event: KeyPress) -> DispatchResult:
        if event.key == self.settings.toggle_key and event.mode.upper() == self.settings.toggle_mode.upper():
            return self._toggle_collapse()
        return DispatchResult()

    def _on_timer(self, event: TimerFired) -> DispatchResult:
        if event.timer == TIMER_ALERTS:
            return self._tick_alerts()
        if event.timer == TIMER_COLLAPSE_POLL:
            return self._poll_collapse()
        logger.debug("Ignoring unknown timer %r", event.timer)
        return DispatchResult()

    def _on_permission_result(self, event: PermissionResult) -> DispatchResult:
        result = DispatchResult()
        if event.granted:
            result.add(SetSelectable(False))
        else:
            logger.warning("Permission denied by user.")
        return result

    def _on_pipe_message(self, event: PipeMessage) -> DispatchResult:
        if event.from_plugin:
            if event.is_private and event.name == PIPE_BROADCAST:
                return self._on_broadcast(event.payload)
            return DispatchResult()

        if event.name == PIPE_TAB_ALERT:
            return self._on_tab_alert(event.args)
        if event.name == PIPE_NOTIFY:
            return self._on_notify(event.args)
        if event.name == PIPE_TOGGLE:
            return self._toggle_collapse()
        return DispatchResult()

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    def _on_tab_alert(self, args: dict[str, str]) -> DispatchResult:
        try:
            pane_id = int(args["pane_id"])
            exit_code = int(args["exit_code"])
        except (KeyError, ValueError):
            logger.debug("Ignoring malformed tab alert: %r", args)
            return DispatchResult()

        active = self.snapshot.active
        exclude = active.position if active is not None else None
        position = self.manifest.tab_for_pane(pane_id, exclude=exclude)
        if position is None:
            logger.debug("No background tab holds pane %s", pane_id)
            return DispatchResult()

        try:
            self.engine.report_command_result(position, exit_code == 0)
        except TabNotFoundError as e:
            logger.debug("Dropping tab alert: %s", e)
            return DispatchResult()

        result = DispatchResult(state_changed=True)
        self._arm_alert_timer(result)
        return result

    def _on_notify(self, args: dict[str, str]) -> DispatchResult:
        flash_units = self.settings.flash_units
        try:
            if "flashes" in args:
                flash_units = int(args["flashes"])
            if "tab" in args:
                tab = self.snapshot.by_number(int(args["tab"]))
            elif "tab_name" in args:
                tab = self.snapshot.by_name(args["tab_name"])
            else:
                tab = None
        except ValueError:
            logger.debug("Ignoring malformed notification: %r", args)
            return DispatchResult()

        if tab is None:
            logger.debug("Notification target not found: %r", args)
            return DispatchResult()

        if not self.engine.report_notification(tab.position, flash_units):
            return DispatchResult()

        result = DispatchResult(state_changed=True)
        self._arm_alert_timer(result)
        return result

    def _on_broadcast(self, payload: str | None) -> DispatchResult:
        if not self.relay.on_broadcast_received(payload):
            return DispatchResult()
        result = DispatchResult(state_changed=True)
        self._arm_alert_timer(result)
        return result

    def _tick_alerts(self) -> DispatchResult:
        self._alert_timer_armed = False
        if self.engine.is_empty():
            # Last alert was visited; stop here rather than re-render forever
            return DispatchResult()

        tick = self.engine.advance_one_tick()
        result = DispatchResult(state_changed=True)
        if tick.needs_more:
            self._arm_alert_timer(result)
        outbound = self.relay.outbound()
        if outbound is not None:
            result.add(outbound)
        return result

    def _arm_alert_timer(self, result: DispatchResult) -> None:
        if self._alert_timer_armed or not self.engine.needs_ticks():
            return
        self._alert_timer_armed = True
        result.add(ArmTimer(TIMER_ALERTS, self.settings.tick_seconds))

    # ------------------------------------------------------------------
    # Collapse
    # ------------------------------------------------------------------

    def _toggle_collapse(self) -> DispatchResult:
        record = self.sync.toggle()
        result = DispatchResult(state_changed=True)
        result.add(Redraw())
        result.add(SwapLayout(record.collapsed))
        result.add(ArmTimer(TIMER_COLLAPSE_POLL, self.sync.next_poll_delay()))
        return result

    def _poll_collapse(self) -> DispatchResult:
        result = DispatchResult()
        collapsed = self.sync.poll_once()
        if collapsed is not None:
            result.state_changed = True
            result.add(Redraw())
            result.add(SwapLayout(collapsed))
        result.add(ArmTimer(TIMER_COLLAPSE_POLL, self.sync.next_poll_delay()))
        return result

