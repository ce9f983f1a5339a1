"""
Fixed-width layout of tab labels.

``layout(text, width)`` always returns a string whose terminal display width
is exactly ``width``, whatever the input contains: combining marks,
double-width CJK, emoji with variation selectors, skin tones or ZWJ
sequences. Widths come from rich's cell tables, measured per grapheme
cluster so multi-codepoint emoji count as the single glyph a terminal draws.
"""

from __future__ import annotations

import unicodedata

from rich.cells import get_character_cell_size

from ..config.constants import ELLIPSIS

ZWJ = "\u200d"
VS16 = "\ufe0f"
_REGIONAL_INDICATORS = range(0x1F1E6, 0x1F200)
_SKIN_TONES = range(0x1F3FB, 0x1F400)
_TAGS = range(0xE0020, 0xE0080)


def _is_extender(ch: str) -> bool:
    code = ord(ch)
    return (
        get_character_cell_size(ch) == 0
        or code in _SKIN_TONES
        or code in _TAGS
        or unicodedata.category(ch) in ("Mn", "Me", "Cf")
    )


def split_graphemes(text: str) -> list[str]:
    """Split text into the clusters a terminal draws as one glyph.

    Control characters are dropped; they have no place in a single cell row.
    """
    clusters: list[str] = []
    join_next = False
    for ch in text:
        if unicodedata.category(ch) == "Cc":
            continue
        code = ord(ch)
        if clusters and (join_next or _is_extender(ch)):
            clusters[-1] += ch
            join_next = ch == ZWJ
            continue
        if (
            clusters
            and code in _REGIONAL_INDICATORS
            and len(clusters[-1]) == 1
            and ord(clusters[-1]) in _REGIONAL_INDICATORS
        ):
            # flag: two regional indicators
            clusters[-1] += ch
            continue
        clusters.append(ch)
        join_next = ch == ZWJ
    return clusters


def grapheme_width(cluster: str) -> int:
    """Display width of a single cluster, 0 to 2 columns."""
    if not cluster:
        return 0
    base = cluster[0]
    width = get_character_cell_size(base)
    if len(cluster) == 1:
        return width
    if ord(base) in _REGIONAL_INDICATORS:
        return 2
    if VS16 in cluster or ZWJ in cluster or any(ord(c) in _SKIN_TONES for c in cluster):
        return 2
    return width


def display_width(text: str) -> int:
    """Terminal columns needed to draw ``text``."""
    return sum(grapheme_width(cluster) for cluster in split_graphemes(text))


def _take(clusters: list[str], budget: int) -> tuple[str, int]:
    """Leading clusters that fit in ``budget`` columns, and their width."""
    taken: list[str] = []
    used = 0
    for cluster in clusters:
        width = grapheme_width(cluster)
        if used + width > budget:
            break
        taken.append(cluster)
        used += width
    return "".join(taken), used


def layout(text: str, target_width: int) -> str:
    """Render ``text`` into exactly ``target_width`` terminal columns.

    Narrow labels (one glyph, up to two columns) are centered; everything
    else is left-justified. Labels that don't fit are cut on cluster
    boundaries and, when there are more than three columns, end with an
    ellipsis.

    Args:
        text: Label to render, may be empty
        target_width: Cell width in columns

    Returns:
        The padded or truncated label, empty for a zero width
    """
    if target_width <= 0:
        return ""

    clusters = split_graphemes(text)
    width = sum(grapheme_width(cluster) for cluster in clusters)
    plain = "".join(clusters)

    if width <= target_width:
        pad = target_width - width
        if width <= 2 and pad > 0:
            left = pad // 2
            return " " * left + plain + " " * (pad - left)
        return plain + " " * pad

    if target_width <= 3:
        kept, used = _take(clusters, target_width)
        return kept + " " * (target_width - used)

    ellipsis_width = display_width(ELLIPSIS)
    kept, used = _take(clusters, target_width - ellipsis_width)
    return kept + " " * (target_width - used - ellipsis_width) + ELLIPSIS
