"""
Alert Log - bounded, insertion-ordered record of alerts.
"""

import logging
from collections import deque
from collections.abc import Iterator

from ..models import Alert, AlertKind
from ..utils.constants import MAX_ALERTS

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    AlertKind.INFO: logging.INFO,
    AlertKind.SUCCESS: logging.INFO,
    AlertKind.WARNING: logging.WARNING,
    AlertKind.ERROR: logging.ERROR,
}


class AlertLog:
    """
    Append-only alert record capped at ``capacity`` entries.

    The cap is enforced on every append; the oldest entry is evicted first.
    Not thread-safe on its own - the session aggregator serializes access.
    """

    def __init__(self, capacity: int = MAX_ALERTS):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._alerts: deque[Alert] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._alerts.maxlen

    def append(self, alert: Alert) -> None:
        self._alerts.append(alert)
        logger.log(_LOG_LEVELS[alert.kind], alert.message)

    def latest(self) -> Alert | None:
        return self._alerts[-1] if self._alerts else None

    def clear(self) -> None:
        self._alerts.clear()

    def snapshot(self) -> list[Alert]:
        """Copy of the log, most recent last."""
        return list(self._alerts)

    def __len__(self) -> int:
        return len(self._alerts)

    def __iter__(self) -> Iterator[Alert]:
        return iter(self.snapshot())
