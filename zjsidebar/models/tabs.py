"""Tab and pane views supplied by the host on every update."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TabInfo:
    """A single tab as reported by the host.

    ``position`` is the 0-based assignment-order slot and is the identity key
    for alerts. The 1-based tab number used by switch requests is
    ``position + 1``.
    """

    position: int
    name: str
    active: bool = False

    @property
    def number(self) -> int:
        return self.position + 1


@dataclass(frozen=True)
class TabSnapshot:
    """Ordered, read-only view of the host's tabs for one render cycle."""

    tabs: tuple[TabInfo, ...] = ()

    @classmethod
    def from_tabs(cls, tabs: list[TabInfo]) -> TabSnapshot:
        return cls(tabs=tuple(tabs))

    def __len__(self) -> int:
        return len(self.tabs)

    def __iter__(self):
        return iter(self.tabs)

    @property
    def active(self) -> TabInfo | None:
        """The active tab, or None if the host sent an inconsistent snapshot."""
        for tab in self.tabs:
            if tab.active:
                return tab
        return None

    def positions(self) -> set[int]:
        return {tab.position for tab in self.tabs}

    def by_position(self, position: int) -> TabInfo | None:
        for tab in self.tabs:
            if tab.position == position:
                return tab
        return None

    def by_number(self, number: int) -> TabInfo | None:
        """Look up a tab by its 1-based tab number."""
        return self.by_position(number - 1)

    def by_name(self, name: str) -> TabInfo | None:
        for tab in self.tabs:
            if tab.name == name:
                return tab
        return None


@dataclass(frozen=True)
class PaneManifest:
    """Which pane ids live in which tab, keyed by tab position."""

    panes: dict[int, tuple[int, ...]] = field(default_factory=dict)

    def tab_for_pane(self, pane_id: int, exclude: int | None = None) -> int | None:
        """Find the tab position containing ``pane_id``, skipping ``exclude``."""
        for position, pane_ids in self.panes.items():
            if position == exclude:
                continue
            if pane_id in pane_ids:
                return position
        return None
