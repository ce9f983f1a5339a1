"""Host events consumed by the sidebar and the actions it asks the host to take.

Both sets are closed: the controller dispatches on the concrete event type
and every handler answers with a ``DispatchResult``. Hosts translate actions
into their own primitives (redraw, switch tab, timers, pipe sends).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .tabs import PaneManifest, TabInfo


# =============================================================================
# Events
# =============================================================================


@dataclass(frozen=True)
class TabUpdate:
    tabs: tuple[TabInfo, ...]


@dataclass(frozen=True)
class PaneUpdate:
    manifest: PaneManifest


@dataclass(frozen=True)
class ModeUpdate:
    mode: str
    dark: bool = True
    session_name: str | None = None


@dataclass(frozen=True)
class MouseClick:
    row: int
    col: int


@dataclass(frozen=True)
class MouseScroll:
    up: bool


@dataclass(frozen=True)
class KeyPress:
    key: str
    mode: str


@dataclass(frozen=True)
class TimerFired:
    timer: str


@dataclass(frozen=True)
class PermissionResult:
    granted: bool


@dataclass(frozen=True)
class PipeMessage:
    """A message from the CLI or from a sibling plugin instance."""

    name: str
    args: dict[str, str] = field(default_factory=dict)
    payload: str | None = None
    from_plugin: bool = False
    is_private: bool = False


Event = Union[
    TabUpdate,
    PaneUpdate,
    ModeUpdate,
    MouseClick,
    MouseScroll,
    KeyPress,
    TimerFired,
    PermissionResult,
    PipeMessage,
]


# =============================================================================
# Actions
# =============================================================================


@dataclass(frozen=True)
class Redraw:
    pass


@dataclass(frozen=True)
class SwitchTab:
    index: int  # 1-based


@dataclass(frozen=True)
class SwapLayout:
    collapsed: bool


@dataclass(frozen=True)
class BroadcastAlerts:
    name: str
    payload: str


@dataclass(frozen=True)
class ArmTimer:
    timer: str
    seconds: float


@dataclass(frozen=True)
class SetSelectable:
    selectable: bool


Action = Union[Redraw, SwitchTab, SwapLayout, BroadcastAlerts, ArmTimer, SetSelectable]


@dataclass
class DispatchResult:
    """Outcome of handling a single event."""

    state_changed: bool = False
    actions: list[Action] = field(default_factory=list)

    def add(self, action: Action) -> None:
        self.actions.append(action)

    def merge(self, other: DispatchResult) -> None:
        self.state_changed = self.state_changed or other.state_changed
        self.actions.extend(other.actions)

    @property
    def should_render(self) -> bool:
        return self.state_changed or any(isinstance(a, Redraw) for a in self.actions)
