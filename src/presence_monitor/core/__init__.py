"""
Core monitoring components.

The YOLO adapter lives in core.yolo_detector and is imported explicitly by
the CLI so that the rest of the core works without torch installed.
"""

from .alert_log import AlertLog
from .camera import CameraConstraints, CameraSource, CameraStream, PermissionState
from .classifier import Classification, ViolationClassifier
from .engine import ProctoringEngine
from .errors import CameraError, CameraFailure
from .frame_saver import save_annotated_frame
from .overlay import OverlayRenderer, OverlaySurface, SourceGeometry, composite
from .scheduler import DetectionScheduler
from .session import SessionAggregator

__all__ = [
    "AlertLog",
    "CameraConstraints",
    "CameraError",
    "CameraFailure",
    "CameraSource",
    "CameraStream",
    "Classification",
    "DetectionScheduler",
    "OverlayRenderer",
    "OverlaySurface",
    "PermissionState",
    "ProctoringEngine",
    "SessionAggregator",
    "SourceGeometry",
    "ViolationClassifier",
    "composite",
    "save_annotated_frame",
]
