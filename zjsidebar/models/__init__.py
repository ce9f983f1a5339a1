"""Value types shared by the sidebar services and renderer."""

from .alerts import AlertState, CommandResult, Notification
from .collapse import CollapseRecord
from .tabs import PaneManifest, TabInfo, TabSnapshot

__all__ = [
    "AlertState",
    "CollapseRecord",
    "CommandResult",
    "Notification",
    "PaneManifest",
    "TabInfo",
    "TabSnapshot",
]
