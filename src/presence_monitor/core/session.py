"""
Session Aggregator - owns the alert log, classifier and session timing.

All mutations happen under a single lock so a StatusSnapshot never shows a
half-applied tick.
"""

import logging
import threading

from ..models import (
    Alert,
    AlertKind,
    Session,
    StatusSnapshot,
    TickResult,
    count_persons,
)
from .alert_log import AlertLog
from .classifier import ViolationClassifier

logger = logging.getLogger(__name__)

DETECTION_ERROR_MESSAGE = "Error during person detection"


class SessionAggregator:
    """
    Aggregates tick results into counters, alerts and session state.

    This is the only writer of the alert log.
    """

    def __init__(self, alert_log: AlertLog | None = None):
        self._lock = threading.RLock()
        self._alerts = alert_log if alert_log is not None else AlertLog()
        self._classifier = ViolationClassifier()
        self._session = Session()
        self._person_count = 0

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._session.active

    def apply(self, result: TickResult) -> Alert | None:
        """
        Apply one tick to the session.

        A failed tick only adds an error alert; counters, person count and
        the classifier's previous count are left untouched. Ticks that started
        before the session clock was last restarted are dropped.

        Returns:
            The alert appended for this tick, if any
        """
        with self._lock:
            if not self.is_current(result):
                logger.debug(f"Dropping tick {result.index} started before reset")
                return None

            if result.failed:
                alert = Alert.error(DETECTION_ERROR_MESSAGE)
                self._alerts.append(alert)
                return alert

            person_count = count_persons(result.detections)
            classification = self._classifier.observe(person_count)
            self._person_count = classification.person_count
            if classification.alert is not None:
                self._alerts.append(classification.alert)
            return classification.alert

    def is_current(self, result: TickResult) -> bool:
        """True if the tick started within the current session period."""
        with self._lock:
            return result.started_at >= self._session.started_at

    def add_alert(self, kind: AlertKind, message: str) -> Alert:
        alert = Alert(kind, message)
        with self._lock:
            self._alerts.append(alert)
        return alert

    def begin(self) -> None:
        """Mark the session active and restart its clock."""
        with self._lock:
            self._session.active = True
            self._session.restart_clock()

    def end(self) -> bool:
        """
        Mark the session inactive.

        Returns:
            True if the session was active before the call
        """
        with self._lock:
            was_active = self._session.active
            self._session.active = False
            return was_active

    def reset(self) -> None:
        """
        Clear alerts and counters and restart the session clock.

        The activity flag is preserved so a running session keeps running.
        """
        with self._lock:
            self._alerts.clear()
            self._classifier.reset()
            self._person_count = 0
            self._session.restart_clock()
        logger.info("Session data reset")

    def snapshot(self) -> StatusSnapshot:
        with self._lock:
            return StatusSnapshot(
                person_count=self._person_count,
                violations=self._classifier.counters,
                session_start_time=self._session.started_at,
                is_active=self._session.active,
            )

    def alerts(self) -> list[Alert]:
        with self._lock:
            return self._alerts.snapshot()

    def latest_alert(self) -> Alert | None:
        with self._lock:
            return self._alerts.latest()
