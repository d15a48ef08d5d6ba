"""
Presence Monitor

Camera-based proctoring monitor: samples frames at a fixed cadence, counts
persons with an object detector and records edge-triggered violations when
nobody or more than one person is in view.

Package structure:
  core/       - Scheduler, classifier, session aggregator, camera, overlay, engine
  models/     - Detection, alert and status value types
  config/     - Configuration loading and validation
  utils/      - Constants
"""

__version__ = "1.0.0"

from .config import (
    Config,
    ConfigValidationError,
    ValidationResult,
    validate_config_full,
)
from .core import (
    CameraError,
    CameraSource,
    OverlayRenderer,
    OverlaySurface,
    ProctoringEngine,
)
from .models import (
    Alert,
    AlertKind,
    Detection,
    StatusSnapshot,
    ViolationCounters,
)

__all__ = [
    "Alert",
    "AlertKind",
    "CameraError",
    "CameraSource",
    # Config
    "Config",
    "ConfigValidationError",
    "Detection",
    "OverlayRenderer",
    "OverlaySurface",
    # Core
    "ProctoringEngine",
    "StatusSnapshot",
    "ValidationResult",
    "ViolationCounters",
    "validate_config_full",
]
