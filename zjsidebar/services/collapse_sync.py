"""Cross-instance agreement on the collapsed/expanded flag.

Each sidebar instance keeps a local belief (the newest ``CollapseRecord`` it
has seen) and reconciles it against the shared store by polling. The record
with the greatest timestamp wins; instances never talk to each other
directly for this flag.

Polling backs off exponentially while nothing changes and snaps back to the
floor after any local write or observed change, so a toggle made in one
instance shows up quickly everywhere while idle instances settle at the
ceiling interval. Polling never stops.

Store failures (missing, corrupt or unreadable record) are treated exactly
like "no newer revision".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Hashable

from ..config.constants import POLL_CEILING_SECONDS, POLL_FLOOR_SECONDS, POLL_GROWTH_FACTOR
from ..exceptions import StoreError
from ..models.collapse import CollapseRecord, now_millis
from .collapse_store import CollapseStore

logger = logging.getLogger(__name__)


@dataclass
class PollState:
    """Adaptive polling cadence, private to one instance."""

    floor: float = POLL_FLOOR_SECONDS
    ceiling: float = POLL_CEILING_SECONDS
    growth_factor: float = POLL_GROWTH_FACTOR
    current_interval: float = POLL_FLOOR_SECONDS
    last_seen_version: Hashable | None = None

    def __post_init__(self) -> None:
        if self.floor <= 0:
            raise ValueError("poll floor must be positive")
        if self.ceiling < self.floor:
            raise ValueError("poll ceiling must not be below the floor")
        if self.growth_factor < 1:
            raise ValueError("poll growth factor must be at least 1")
        self.current_interval = min(max(self.current_interval, self.floor), self.ceiling)

    def reset(self) -> None:
        self.current_interval = self.floor

    def grow(self) -> None:
        self.current_interval = min(self.current_interval * self.growth_factor, self.ceiling)


class CollapseSync:
    """Owns the shared collapsed/expanded flag for one instance."""

    def __init__(
        self,
        store: CollapseStore,
        poll_state: PollState | None = None,
        clock: Callable[[], int] = now_millis,
    ):
        self.store = store
        self.poll_state = poll_state or PollState()
        self._clock = clock
        self._belief: CollapseRecord | None = None
        self.write_error: StoreError | None = None

    @property
    def belief(self) -> CollapseRecord | None:
        return self._belief

    def desired_state(self) -> bool:
        """The locally believed flag; expanded until something is observed."""
        return self._belief.collapsed if self._belief is not None else False

    def toggle(self) -> CollapseRecord:
        """Flip the flag, publish it, and poll fast again.

        A failed write keeps the new local belief; other instances simply
        won't see it until a later write succeeds.
        """
        timestamp = self._clock()
        if self._belief is not None and timestamp <= self._belief.timestamp:
            # Keep records strictly ordered even if the wall clock stepped back
            timestamp = self._belief.timestamp + 1

        record = CollapseRecord(timestamp=timestamp, collapsed=not self.desired_state())
        self._belief = record
        self.poll_state.reset()

        self.write_error = None
        try:
            self.store.write(record)
        except StoreError as e:
            self.write_error = e
            logger.warning("Collapse state not shared: %s", e)

        logger.debug("Toggled sidebar to %s", "collapsed" if record.collapsed else "expanded")
        return record

    def poll_once(self) -> bool | None:
        """Check the store for a newer record.

        Returns:
            The newly adopted collapsed flag, or None if nothing changed
        """
        state = self.poll_state
        try:
            revision = self.store.revision()
        except StoreError as e:
            logger.debug("Collapse store unavailable: %s", e)
            state.grow()
            return None

        if revision is None or revision == state.last_seen_version:
            state.grow()
            return None

        try:
            record = self.store.read()
        except StoreError as e:
            logger.debug("Ignoring unreadable collapse record: %s", e)
            state.grow()
            return None

        state.last_seen_version = revision
        if record is None or not record.supersedes(self._belief):
            state.grow()
            return None

        self._belief = record
        state.reset()
        logger.debug("Adopted collapse record %s", record)
        return record.collapsed

    def next_poll_delay(self) -> float:
        """Seconds until the next poll; always defined while the instance lives."""
        return self.poll_state.current_interval
