"""
Consolidated data models for presence monitoring.

This package contains the value types shared by the scheduler, classifier,
session aggregator and overlay renderer.
"""

from .alerts import Alert, AlertKind
from .detection import Detection, TickResult, count_persons
from .detector import Detector
from .status import Session, StatusSnapshot, ViolationCounters

__all__ = [
    # Alerts
    "Alert",
    "AlertKind",
    # Detections
    "Detection",
    # Protocols
    "Detector",
    "Session",
    "StatusSnapshot",
    "TickResult",
    "ViolationCounters",
    "count_persons",
]
