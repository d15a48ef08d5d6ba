"""
Tests for the edge-triggered violation classifier
"""

import unittest

from presence_monitor.core.classifier import (
    COMPLIANT_MESSAGE,
    NO_PERSON_MESSAGE,
    ViolationClassifier,
)
from presence_monitor.models import AlertKind


class TestViolationClassifier(unittest.TestCase):
    """Test transition rules and counter updates."""

    def setUp(self):
        self.classifier = ViolationClassifier()

    def _alerts_for(self, counts):
        alerts = []
        for count in counts:
            result = self.classifier.observe(count)
            if result.alert is not None:
                alerts.append(result.alert)
        return alerts

    def test_mixed_sequence(self):
        """[1,1,0,0,2,1] yields one violation of each kind."""
        alerts = self._alerts_for([1, 1, 0, 0, 2, 1])

        counters = self.classifier.counters
        self.assertEqual(counters.no_person, 1)
        self.assertEqual(counters.multiple_person, 1)
        self.assertEqual(counters.total, 2)

        self.assertEqual(
            [(a.kind, a.message) for a in alerts],
            [
                (AlertKind.SUCCESS, COMPLIANT_MESSAGE),
                (AlertKind.ERROR, NO_PERSON_MESSAGE),
                (AlertKind.WARNING, "Multiple persons detected (2)"),
                (AlertKind.SUCCESS, COMPLIANT_MESSAGE),
            ],
        )

    def test_sustained_condition_alerts_once(self):
        alerts = self._alerts_for([0, 0, 0, 0])
        self.assertEqual(len(alerts), 1)
        self.assertEqual(self.classifier.counters.no_person, 1)

    def test_first_tick_without_person_is_violation(self):
        result = self.classifier.observe(0)
        self.assertIs(result.alert.kind, AlertKind.ERROR)
        self.assertEqual(result.counters.no_person, 1)

    def test_growing_crowd_is_one_violation(self):
        """2 -> 3 is not a new transition; previous count was already > 1."""
        self._alerts_for([1, 2, 3])
        self.assertEqual(self.classifier.counters.multiple_person, 1)

    def test_zero_to_many_is_multiple_violation(self):
        alerts = self._alerts_for([0, 3])
        self.assertEqual(alerts[-1].message, "Multiple persons detected (3)")
        self.assertEqual(self.classifier.counters.total, 2)

    def test_many_to_zero_is_no_person_violation(self):
        self._alerts_for([2, 0])
        counters = self.classifier.counters
        self.assertEqual((counters.multiple_person, counters.no_person), (1, 1))

    def test_steady_single_person_is_silent(self):
        alerts = self._alerts_for([1, 1, 1])
        self.assertEqual(len(alerts), 1)
        self.assertEqual(self.classifier.counters.total, 0)

    def test_previous_count_tracks_last_tick(self):
        self.assertIsNone(self.classifier.previous_count)
        self.classifier.observe(2)
        self.assertEqual(self.classifier.previous_count, 2)

    def test_negative_count_rejected(self):
        with self.assertRaises(ValueError):
            self.classifier.observe(-1)

    def test_reset_forgets_history(self):
        self._alerts_for([0, 2])
        self.classifier.reset()

        self.assertIsNone(self.classifier.previous_count)
        self.assertEqual(self.classifier.counters.total, 0)

        # After reset the next empty frame counts again
        self.assertIsNotNone(self.classifier.observe(0).alert)


if __name__ == "__main__":
    unittest.main()
