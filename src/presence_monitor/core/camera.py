"""
Camera source - owns the capture device handle.
"""

import logging
import os
import sys
import threading
import time
from dataclasses import dataclass
from enum import Enum

import cv2
import numpy as np

from ..utils.constants import (
    CAMERA_RECONNECT_DELAY,
    DEFAULT_CAMERA_HEIGHT,
    DEFAULT_CAMERA_WIDTH,
    MAX_CAMERA_RECONNECT_ATTEMPTS,
)
from .errors import CameraError, CameraFailure

logger = logging.getLogger(__name__)


class PermissionState(Enum):
    """Access state of the capture device."""

    GRANTED = "granted"
    DENIED = "denied"
    PROMPT = "prompt"  # Unknown until the device is opened


@dataclass(frozen=True)
class CameraConstraints:
    """Requested capture settings."""

    width: int = DEFAULT_CAMERA_WIDTH
    height: int = DEFAULT_CAMERA_HEIGHT
    exact: bool = False  # Fail instead of accepting a different resolution
    backend: str | None = None  # OpenCV backend name, e.g. "v4l2"


@dataclass(frozen=True)
class CameraStream:
    """Handle describing an open stream."""

    source: str | int
    width: int
    height: int


def parse_source(url: str | int) -> str | int:
    """Device indices may arrive as strings from YAML or the environment."""
    if isinstance(url, str) and url.strip().isdigit():
        return int(url)
    return url


def _backend_id(name: str) -> int | None:
    return getattr(cv2, f"CAP_{name.upper()}", None)


class CameraSource:
    """
    OpenCV capture wrapper.

    start() and stop() are called from the host thread while read_frame()
    is called from the scheduler thread; a lock keeps a frame read from
    racing a release.
    """

    def __init__(
        self,
        source: str | int,
        reconnect_attempts: int = MAX_CAMERA_RECONNECT_ATTEMPTS,
        reconnect_delay: float = CAMERA_RECONNECT_DELAY,
    ):
        self._source = parse_source(source)
        self._reconnect_attempts = reconnect_attempts
        self._reconnect_delay = reconnect_delay

        self._lock = threading.Lock()
        self._capture: cv2.VideoCapture | None = None
        self._stream: CameraStream | None = None
        self._frame: np.ndarray | None = None

    @property
    def source(self) -> str | int:
        return self._source

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._stream is not None

    @property
    def stream(self) -> CameraStream | None:
        with self._lock:
            return self._stream

    @property
    def latest_frame(self) -> np.ndarray | None:
        """Most recently read frame, without touching the device."""
        with self._lock:
            return self._frame

    def is_supported(self, backend: str | None = None) -> bool:
        """Check that OpenCV can capture video with the requested backend."""
        if not hasattr(cv2, "VideoCapture"):
            return False
        if backend is None:
            return True
        api = _backend_id(backend)
        if api is None:
            return False
        return cv2.videoio_registry.hasBackend(api)

    def permission_state(self) -> PermissionState:
        """
        Query access to the device without opening it.

        Local device nodes and files are checked with os.access; network
        streams report granted.
        """
        path = self._local_path()
        if path is None:
            return PermissionState.GRANTED
        if not os.path.exists(path):
            return PermissionState.PROMPT
        if os.access(path, os.R_OK):
            return PermissionState.GRANTED
        return PermissionState.DENIED

    def start(self, constraints: CameraConstraints | None = None) -> CameraStream:
        """
        Open the camera.

        Args:
            constraints: Requested resolution and backend

        Returns:
            Handle for the open stream (the existing one if already started)

        Raises:
            CameraError: With the reason the camera could not be opened
        """
        constraints = constraints or CameraConstraints()

        with self._lock:
            if self._stream is not None:
                return self._stream

        if not self.is_supported(constraints.backend):
            raise CameraError(
                CameraFailure.UNSUPPORTED,
                f"Capture backend not available: {constraints.backend or 'default'}",
            )

        if self.permission_state() is PermissionState.DENIED:
            raise CameraError(
                CameraFailure.PERMISSION_DENIED, f"No read access to {self._source}"
            )

        capture = self._open(constraints)
        try:
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, constraints.width)
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, constraints.height)

            ret, frame = capture.read()
            if not ret or frame is None:
                raise CameraError(
                    CameraFailure.DEVICE_BUSY,
                    f"Camera opened but no frame could be read: {self._source}",
                )

            height, width = frame.shape[:2]
            if constraints.exact and (width, height) != (
                constraints.width,
                constraints.height,
            ):
                raise CameraError(
                    CameraFailure.CONSTRAINTS_UNSATISFIABLE,
                    f"Requested {constraints.width}x{constraints.height}, got {width}x{height}",
                )
        except CameraError:
            capture.release()
            raise

        stream = CameraStream(source=self._source, width=width, height=height)
        with self._lock:
            self._capture = capture
            self._frame = frame
            self._stream = stream

        logger.info(f"Camera stream active: {width}x{height}")
        return stream

    def read_frame(self) -> np.ndarray | None:
        """
        Grab the current frame.

        Returns:
            BGR frame, or None if the stream is stopped or the read failed
        """
        with self._lock:
            if self._capture is None:
                return None
            ret, frame = self._capture.read()
            if not ret or frame is None:
                logger.warning("Failed to read frame")
                return None
            self._frame = frame
            return frame

    def stop(self) -> None:
        """Release the device and drop the frame reference. Safe to call repeatedly."""
        with self._lock:
            capture, self._capture = self._capture, None
            self._stream = None
            self._frame = None

        if capture is not None:
            capture.release()
            logger.info("Camera released")

    def _open(self, constraints: CameraConstraints) -> cv2.VideoCapture:
        """Open the capture with retry logic."""
        api = _backend_id(constraints.backend) if constraints.backend else None

        for attempt in range(self._reconnect_attempts + 1):
            logger.info(f"Connecting to camera: {self._source} (attempt {attempt + 1})")
            if api is None:
                capture = cv2.VideoCapture(self._source)
            else:
                capture = cv2.VideoCapture(self._source, api)

            if capture.isOpened():
                logger.info("Camera connected successfully")
                return capture

            capture.release()
            if attempt < self._reconnect_attempts:
                logger.warning(
                    f"Failed to connect, retrying in {self._reconnect_delay}s..."
                )
                time.sleep(self._reconnect_delay)

        logger.error(
            f"Failed to connect to camera after {self._reconnect_attempts + 1} attempts"
        )
        raise CameraError(
            CameraFailure.NOT_FOUND, f"Cannot connect to camera: {self._source}"
        )

    def _local_path(self) -> str | None:
        if isinstance(self._source, int):
            if sys.platform.startswith("linux"):
                return f"/dev/video{self._source}"
            return None
        if "://" in self._source:
            return None
        return self._source
