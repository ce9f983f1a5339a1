"""Paint the sidebar into fixed-width rich ``Text`` rows.

Row layout (0-indexed):
    0       blank
    1       input mode, centered
    2       separator
    3..     one row per tab
    rest    blank

Only foreground/background (plus bold/italic) are used, so any host that can
print rich text can display the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from rich.style import Style
from rich.text import Text

from ..config.constants import DEFAULT_TAB_NAME_PREFIX, HEADER_ROWS
from ..models.alerts import AlertState, CommandResult
from ..models.tabs import TabInfo, TabSnapshot
from ..names import NameCache
from .layout import display_width, layout

MODE_COLORS = {
    "NORMAL": "green",
    "LOCKED": "magenta",
}
DEFAULT_MODE_COLOR = "dark_orange"
SUCCESS_COLOR = "green"
FAILURE_COLOR = "red"
NOTIFY_COLOR = "yellow"


@dataclass(frozen=True)
class Palette:
    text: str
    background: str

    @classmethod
    def for_theme(cls, dark: bool) -> Palette:
        return cls(text="white", background="black") if dark else cls(text="black", background="white")


def center(text: str, width: int) -> str:
    """Center ``text`` in ``width`` columns, truncating like ``layout`` when too wide."""
    text_width = display_width(text)
    if text_width >= width:
        return layout(text, width)
    pad = width - text_width
    left = pad // 2
    return " " * left + text + " " * (pad - left)


def alert_color(alert: AlertState) -> str:
    if isinstance(alert, CommandResult):
        return SUCCESS_COLOR if alert.success else FAILURE_COLOR
    return NOTIFY_COLOR


class SidebarRenderer:
    """Turns a tab snapshot and alert map into styled rows."""

    def __init__(self, names: NameCache | None = None):
        self.names = names

    def label_for(self, tab: TabInfo) -> str:
        """Tab name, swapping host default names for a decorative one."""
        if self.names is not None and tab.name.startswith(DEFAULT_TAB_NAME_PREFIX):
            return self.names.get_or_generate(tab.position)
        return tab.name

    def render(
        self,
        snapshot: TabSnapshot,
        alerts: Mapping[int, AlertState],
        rows: int,
        cols: int,
        mode: str = "NORMAL",
        dark: bool = True,
        collapsed: bool = False,
    ) -> list[Text]:
        if rows <= 0 or cols <= 0 or not len(snapshot):
            return []

        palette = Palette.for_theme(dark)
        base = Style(color=palette.text, bgcolor=palette.background)
        lines: list[Text] = [
            Text(" " * cols, style=base),
            self._mode_line(mode, cols, palette),
            Text("─" * cols, style=base),
        ]

        for tab in snapshot:
            if len(lines) >= rows:
                break
            lines.append(self._tab_line(tab, alerts.get(tab.position), cols, palette, collapsed))

        while len(lines) < rows:
            lines.append(Text(" " * cols, style=base))
        return lines[:rows]

    def _mode_line(self, mode: str, cols: int, palette: Palette) -> Text:
        mode_text = mode.upper()
        style = Style(
            color=palette.text,
            bgcolor=MODE_COLORS.get(mode_text, DEFAULT_MODE_COLOR),
            bold=True,
        )
        return Text(center(mode_text, cols), style=style)

    def _tab_line(
        self,
        tab: TabInfo,
        alert: AlertState | None,
        cols: int,
        palette: Palette,
        collapsed: bool,
    ) -> Text:
        if collapsed:
            cell = layout(str(tab.number), cols)
        else:
            cell = " " + layout(f"{tab.number} {self.label_for(tab)}", cols - 1)

        if tab.active:
            fg, bg = palette.background, palette.text
        else:
            fg, bg = palette.text, palette.background

        if alert is not None:
            color = alert_color(alert)
            if alert.alternate_color:
                style = Style(color=fg, bgcolor=color, bold=True)
            else:
                style = Style(color=color, bgcolor=bg, bold=True)
        elif tab.active:
            style = Style(color=fg, bgcolor=bg, bold=True)
        else:
            style = Style(color=fg, bgcolor=bg, italic=True)
        return Text(cell, style=style)


def tab_at_row(snapshot: TabSnapshot, row: int) -> TabInfo | None:
    """Map a clicked row back to the tab painted there."""
    index = row - HEADER_ROWS
    if index < 0 or index >= len(snapshot):
        return None
    return snapshot.tabs[index]
