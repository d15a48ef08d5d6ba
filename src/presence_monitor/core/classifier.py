"""
Violation Classifier - edge-triggered person-count state machine.

State is the previous tick's person count (None before the first tick) and
the cumulative violation counters. Each tick is evaluated once against these
rules, first match wins:

1. count == 0 and previous != 0      -> no-person violation, error alert
2. count > 1 and previous <= 1       -> multiple-person violation, warning alert
3. count == 1 and previous != 1      -> compliant, success alert
4. anything else                     -> no change

Sustained conditions therefore alert once, at the transition.
"""

import logging
from dataclasses import dataclass

from ..models import Alert, ViolationCounters

logger = logging.getLogger(__name__)

NO_PERSON_MESSAGE = "No person detected in frame"
MULTIPLE_PERSON_MESSAGE = "Multiple persons detected ({count})"
COMPLIANT_MESSAGE = "Single person detected - compliant"


@dataclass(frozen=True)
class Classification:
    """Result of classifying one tick."""

    person_count: int
    counters: ViolationCounters
    alert: Alert | None = None


class ViolationClassifier:
    """Turns a sequence of person counts into violation events and alerts."""

    def __init__(self):
        self._previous_count: int | None = None
        self._counters = ViolationCounters()

    @property
    def previous_count(self) -> int | None:
        return self._previous_count

    @property
    def counters(self) -> ViolationCounters:
        return self._counters

    def observe(self, person_count: int) -> Classification:
        """
        Classify the person count of one tick and update state.

        Args:
            person_count: Number of persons detected on this tick

        Returns:
            Classification with the updated counters and an optional alert
        """
        if person_count < 0:
            raise ValueError("person_count must be non-negative")

        previous = self._previous_count
        alert = None

        if person_count == 0 and previous != 0:
            self._counters = self._counters.record_no_person()
            alert = Alert.error(NO_PERSON_MESSAGE)
        elif person_count > 1 and (previous is None or previous <= 1):
            self._counters = self._counters.record_multiple_person()
            alert = Alert.warning(MULTIPLE_PERSON_MESSAGE.format(count=person_count))
        elif person_count == 1 and previous != 1:
            alert = Alert.success(COMPLIANT_MESSAGE)

        if alert is not None:
            logger.debug(f"Transition {previous} -> {person_count}: {alert.message}")

        self._previous_count = person_count
        return Classification(person_count, self._counters, alert)

    def reset(self) -> None:
        """Forget the previous count and zero the counters."""
        self._previous_count = None
        self._counters = ViolationCounters()
