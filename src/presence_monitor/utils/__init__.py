"""
Utility modules for constants.
"""

from .constants import (
    DEFAULT_SAMPLE_INTERVAL,
    ENV_CAMERA_URL,
    ENV_MODEL_FILE,
    MAX_ALERTS,
    PERSON_LABEL,
)

__all__ = [
    "DEFAULT_SAMPLE_INTERVAL",
    "ENV_CAMERA_URL",
    "ENV_MODEL_FILE",
    "MAX_ALERTS",
    "PERSON_LABEL",
]
