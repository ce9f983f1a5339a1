"""The collapsed/expanded record exchanged through the shared store."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any

from ..exceptions import PayloadError


def now_millis() -> int:
    """Wall-clock milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class CollapseRecord:
    """One user toggle. The record with the greatest timestamp wins."""

    timestamp: int
    collapsed: bool

    def supersedes(self, other: CollapseRecord | None) -> bool:
        return other is None or self.timestamp > other.timestamp

    def to_json(self) -> str:
        return json.dumps({"timestamp": self.timestamp, "collapsed": self.collapsed})

    @classmethod
    def from_json(cls, text: str) -> CollapseRecord:
        """Decode a stored record.

        Raises:
            PayloadError: if the text is not a well-formed record
        """
        try:
            raw: Any = json.loads(text)
        except json.JSONDecodeError as e:
            raise PayloadError("Collapse record is not valid JSON") from e
        if not isinstance(raw, dict):
            raise PayloadError("Collapse record is not an object")

        timestamp = raw.get("timestamp")
        collapsed = raw.get("collapsed")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise PayloadError("Collapse record timestamp must be an integer", timestamp=timestamp)
        if not isinstance(collapsed, bool):
            raise PayloadError("Collapse record flag must be a boolean", collapsed=collapsed)
        return cls(timestamp=timestamp, collapsed=collapsed)
