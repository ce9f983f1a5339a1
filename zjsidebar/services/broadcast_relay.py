"""Alert catch-up between sibling sidebar instances.

Every tick that still has live alerts sends the current alert map to the
other instances of the plugin. A receiver adopts it verbatim only when it has
nothing of its own (or, in strict mode, when the map differs from its own).
This lets an instance that started after alerts were raised render them
without waiting; it is not a merge.
"""

import logging
from typing import Optional

from ..config.constants import PIPE_BROADCAST
from ..exceptions import PayloadError
from ..models.alerts import dump_alert_map, load_alert_map
from ..models.events import BroadcastAlerts
from .alert_engine import AlertEngine

logger = logging.getLogger(__name__)


class BroadcastRelay:
    """Thin coordination layer over an ``AlertEngine``."""

    def __init__(self, engine: AlertEngine, strict: bool = False):
        self.engine = engine
        self.strict = strict

    def outbound(self) -> Optional[BroadcastAlerts]:
        """Payload to send after a tick, or None when there is nothing live."""
        alerts = self.engine.snapshot()
        if not alerts:
            return None
        return BroadcastAlerts(name=PIPE_BROADCAST, payload=dump_alert_map(alerts))

    def on_broadcast_received(self, payload: Optional[str]) -> bool:
        """Adopt a sibling's alert map when this instance should catch up.

        Returns:
            True if the map was applied
        """
        current = self.engine.snapshot()
        if current and not self.strict:
            return False

        try:
            incoming = load_alert_map(payload)
        except PayloadError as e:
            logger.debug("Dropping malformed alert broadcast: %s", e)
            return False

        if self.strict and incoming == current:
            return False

        self.engine.replace_all(incoming)
        logger.debug("Caught up on %d alert(s) from a sibling instance", len(incoming))
        return True
