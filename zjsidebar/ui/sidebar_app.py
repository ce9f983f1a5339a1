#!/usr/bin/env python3
"""
Textual preview host for the sidebar.

Runs two sidebar instances side by side against a simulated workspace so
alert flashing, broadcast catch-up and collapse synchronization can be
watched without a terminal multiplexer. Both instances share the real
collapse record file, exactly like plugin instances in separate tabs.
"""

from __future__ import annotations

import logging

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.timer import Timer
from textual.widgets import Footer, Static

from ..config.constants import PIPE_NOTIFY, PIPE_TAB_ALERT
from ..config.settings import SidebarSettings
from ..controller import SidebarController, apply_actions
from ..models.events import (
    Event,
    ModeUpdate,
    MouseClick,
    PaneUpdate,
    PermissionResult,
    PipeMessage,
    TabUpdate,
    TimerFired,
)
from ..models.tabs import PaneManifest, TabInfo
from ..services.collapse_store import CollapseStore

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 12


class SimulatedWorkspace:
    """Tabs and panes standing in for the multiplexer."""

    def __init__(self, tab_count: int = 4):
        self.names = [f"Tab #{i + 1}" for i in range(tab_count)]
        self.active = 0

    def tabs(self) -> tuple[TabInfo, ...]:
        return tuple(
            TabInfo(position=i, name=name, active=i == self.active)
            for i, name in enumerate(self.names)
        )

    def manifest(self) -> PaneManifest:
        # one pane per tab, pane id == position
        return PaneManifest({i: (i,) for i in range(len(self.names))})

    def add_tab(self, name: str | None = None) -> None:
        self.names.append(name or f"Tab #{len(self.names) + 1}")

    def switch_to(self, index: int) -> None:
        if 1 <= index <= len(self.names):
            self.active = index - 1

    def background_pane(self) -> int | None:
        for position in range(len(self.names)):
            if position != self.active:
                return position
        return None


class SidebarPane(Static):
    """One sidebar instance acting as the host for its controller."""

    DEFAULT_CSS = """
    SidebarPane {
        height: 100%;
        margin-right: 2;
    }
    """

    def __init__(self, controller: SidebarController, **kwargs):
        super().__init__(**kwargs)
        self.controller = controller
        self._armed: dict[str, Timer] = {}
        self._apply_width(controller.collapsed)

    @property
    def cols(self) -> int:
        settings = self.controller.settings
        return settings.collapsed_width if self.controller.collapsed else settings.expanded_width

    def _apply_width(self, collapsed: bool) -> None:
        settings = self.controller.settings
        self.styles.width = settings.collapsed_width if collapsed else settings.expanded_width

    def feed(self, event: Event | None) -> None:
        result = self.controller.load() if event is None else self.controller.handle(event)
        apply_actions(self, result)
        if result.should_render:
            self.redraw()

    def on_click(self, event: events.Click) -> None:
        self.feed(MouseClick(row=event.y, col=event.x))

    # SidebarHost ---------------------------------------------------------

    def redraw(self) -> None:
        lines = self.controller.render(PREVIEW_ROWS, self.cols)
        self.update(Text("\n").join(lines))

    def switch_tab(self, index: int) -> None:
        self.app.switch_tab(index)

    def swap_layout(self, collapsed: bool) -> None:
        self._apply_width(collapsed)

    def broadcast(self, name: str, payload: str) -> None:
        self.app.broadcast_from(self, name, payload)

    def arm_timer(self, timer: str, seconds: float) -> None:
        existing = self._armed.pop(timer, None)
        if existing is not None:
            existing.stop()
        self._armed[timer] = self.set_timer(seconds, lambda: self.feed(TimerFired(timer)))

    def set_selectable(self, selectable: bool) -> None:
        self.can_focus = selectable


class SidebarPreviewApp(App[None]):
    """Two sidebar instances over one simulated workspace."""

    CSS = """
    Horizontal {
        height: 1fr;
        padding: 1;
    }
    """

    BINDINGS = [
        Binding("j", "next_tab", "Next tab"),
        Binding("k", "prev_tab", "Prev tab"),
        Binding("n", "new_tab", "New tab"),
        Binding("s", "alert(0)", "Cmd ok"),
        Binding("x", "alert(1)", "Cmd failed"),
        Binding("f", "notify_tab", "Notify"),
        Binding("c", "toggle", "Collapse"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        store: CollapseStore,
        settings: SidebarSettings | None = None,
        instances: int = 2,
        session_name: str = "preview",
    ):
        super().__init__()
        self.workspace = SimulatedWorkspace()
        self.session_name = session_name
        self.panes = [
            SidebarPane(SidebarController(store, settings), id=f"sidebar-{i}")
            for i in range(instances)
        ]

    def compose(self) -> ComposeResult:
        with Horizontal():
            yield from self.panes
        yield Footer()

    def on_mount(self) -> None:
        self.call_after_refresh(self.start_instances)

    def start_instances(self) -> None:
        for pane in self.panes:
            pane.feed(None)
        self.publish_event(PermissionResult(granted=True))
        self.publish_event(ModeUpdate(mode="NORMAL", session_name=self.session_name))
        self.publish_workspace()

    def publish_event(self, event: Event, panes: list[SidebarPane] | None = None) -> None:
        for pane in self.panes if panes is None else panes:
            pane.feed(event)

    def publish_workspace(self) -> None:
        self.publish_event(PaneUpdate(self.workspace.manifest()))
        self.publish_event(TabUpdate(self.workspace.tabs()))

    def switch_tab(self, index: int) -> None:
        self.workspace.switch_to(index)
        self.publish_workspace()

    def broadcast_from(self, sender: SidebarPane, name: str, payload: str) -> None:
        siblings = [pane for pane in self.panes if pane is not sender]
        message = PipeMessage(name=name, payload=payload, from_plugin=True, is_private=True)
        logger.debug("Broadcast from %s to %d sibling(s)", sender.id, len(siblings))
        self.publish_event(message, siblings)

    def action_next_tab(self) -> None:
        self.switch_tab(min(self.workspace.active + 2, len(self.workspace.names)))

    def action_prev_tab(self) -> None:
        self.switch_tab(max(self.workspace.active, 1))

    def action_new_tab(self) -> None:
        self.workspace.add_tab()
        self.publish_workspace()

    def action_alert(self, exit_code: int) -> None:
        pane_id = self.workspace.background_pane()
        if pane_id is None:
            self.notify("No background tab to alert")
            return
        args = {"pane_id": str(pane_id), "exit_code": str(exit_code)}
        self.publish_event(PipeMessage(name=PIPE_TAB_ALERT, args=args))

    def action_notify_tab(self) -> None:
        target = len(self.workspace.names)
        self.publish_event(PipeMessage(name=PIPE_NOTIFY, args={"tab": str(target)}))

    def action_toggle(self) -> None:
        # Only the first instance sees the toggle; the others catch up by polling
        self.panes[0].feed(MouseClick(row=0, col=0))
