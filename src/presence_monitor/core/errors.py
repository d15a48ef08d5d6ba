"""
Exception types raised by the core.
"""

from enum import Enum


class CameraFailure(Enum):
    """Reason a camera could not be started."""

    UNSUPPORTED = "unsupported"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    DEVICE_BUSY = "device_busy"
    CONSTRAINTS_UNSATISFIABLE = "constraints_unsatisfiable"


CAMERA_FAILURE_MESSAGES = {
    CameraFailure.UNSUPPORTED: "This system does not support camera access.",
    CameraFailure.PERMISSION_DENIED: (
        "Camera access was denied. Please allow camera access to continue."
    ),
    CameraFailure.NOT_FOUND: "No camera found on this device.",
    CameraFailure.DEVICE_BUSY: "Camera is already in use by another application.",
    CameraFailure.CONSTRAINTS_UNSATISFIABLE: (
        "The requested camera resolution is not supported."
    ),
}

GENERIC_CAMERA_MESSAGE = "Failed to access camera"


class CameraError(Exception):
    """Raised when the camera cannot be started."""

    def __init__(self, reason: CameraFailure, detail: str | None = None):
        self.reason = reason
        self.detail = detail
        super().__init__(detail or self.message)

    @property
    def message(self) -> str:
        """User-facing message for this failure."""
        return CAMERA_FAILURE_MESSAGES.get(self.reason, GENERIC_CAMERA_MESSAGE)
