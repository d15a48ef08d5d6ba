"""
Proctoring Engine - host-facing facade over the monitoring core.

Wires the camera source, detector, detection scheduler, session aggregator
and overlay renderer together and exposes the commands and queries a host
surface (CLI, web handler, GUI) needs.
"""

import logging
import threading
from collections.abc import Callable

import numpy as np

from ..config import Config
from ..models import Alert, AlertKind, Detection, Detector, StatusSnapshot, TickResult
from ..utils.constants import DEFAULT_SAMPLE_INTERVAL
from .camera import CameraConstraints, CameraSource
from .errors import GENERIC_CAMERA_MESSAGE, CameraError
from .overlay import OverlayRenderer, OverlaySurface, SourceGeometry
from .scheduler import DetectionScheduler
from .session import SessionAggregator

logger = logging.getLogger(__name__)

DetectionListener = Callable[[tuple[Detection, ...], bool], None]


class ProctoringEngine:
    """
    Presence-violation monitor for a single camera and detector.

    Commands never raise for expected failures; they return a boolean and
    record an alert instead.
    """

    def __init__(
        self,
        camera: CameraSource,
        detector: Detector,
        constraints: CameraConstraints | None = None,
        interval_seconds: float = DEFAULT_SAMPLE_INTERVAL,
        renderer: OverlayRenderer | None = None,
        session: SessionAggregator | None = None,
    ):
        self._camera = camera
        self._detector = detector
        self._constraints = constraints or CameraConstraints()
        self._renderer = renderer or OverlayRenderer()
        self._session = session or SessionAggregator()
        self._scheduler = DetectionScheduler(
            frame_source=self._next_frame,
            detector=detector,
            on_result=self._on_tick,
            interval_seconds=interval_seconds,
        )

        self._lock = threading.Lock()
        self._detections: tuple[Detection, ...] = ()
        self._listeners: list[DetectionListener] = []

    @classmethod
    def from_config(cls, config: Config, detector: Detector) -> "ProctoringEngine":
        """Build an engine from validated settings."""
        camera = CameraSource(
            config.camera.url,
            reconnect_attempts=config.camera.reconnect_attempts,
        )
        constraints = CameraConstraints(
            width=config.camera.width,
            height=config.camera.height,
            exact=config.camera.exact_resolution,
            backend=config.camera.backend,
        )
        renderer = OverlayRenderer(
            low_confidence_threshold=config.overlay.low_confidence_threshold,
            default_size=(config.overlay.default_width, config.overlay.default_height),
        )
        return cls(
            camera,
            detector,
            constraints=constraints,
            interval_seconds=config.detection.interval_seconds,
            renderer=renderer,
        )

    # --- State queries ---

    @property
    def scheduler(self) -> DetectionScheduler:
        return self._scheduler

    @property
    def renderer(self) -> OverlayRenderer:
        return self._renderer

    @property
    def is_stream_active(self) -> bool:
        return self._camera.is_active

    @property
    def is_proctoring_active(self) -> bool:
        return self._session.is_active

    @property
    def latest_frame(self) -> np.ndarray | None:
        """Most recent camera frame, or None when the stream is stopped."""
        return self._camera.latest_frame

    @property
    def detections(self) -> tuple[Detection, ...]:
        """Detections from the last applied tick."""
        with self._lock:
            return self._detections

    def get_status_snapshot(self) -> StatusSnapshot:
        return self._session.snapshot()

    def get_alerts(self) -> list[Alert]:
        """Alert log, most recent last."""
        return self._session.alerts()

    def latest_alert(self) -> Alert | None:
        return self._session.latest_alert()

    # --- Camera lifecycle ---

    def start_camera(self) -> bool:
        """
        Open the camera stream.

        Returns:
            True if the stream is active (already or newly started)
        """
        if self._camera.is_active:
            return True

        try:
            self._camera.start(self._constraints)
        except CameraError as e:
            logger.error(f"Camera access error ({e.reason.value}): {e}")
            self._session.add_alert(AlertKind.ERROR, e.message)
            return False
        except Exception as e:
            logger.error(f"Camera access error: {e}", exc_info=True)
            self._session.add_alert(AlertKind.ERROR, GENERIC_CAMERA_MESSAGE)
            return False

        self._session.add_alert(AlertKind.SUCCESS, "Camera started successfully")
        return True

    def stop_camera(self) -> None:
        """Stop proctoring and release the camera. Safe to call repeatedly."""
        self.stop_proctoring()
        self._camera.stop()
        with self._lock:
            self._detections = ()
        self._session.add_alert(AlertKind.INFO, "Camera stopped")
        self._publish()

    # --- Proctoring commands ---

    def start_proctoring(self) -> bool:
        """
        Begin sampling.

        Requires an active stream and a ready detector; otherwise returns
        False without changing any state.
        """
        if not self._camera.is_active:
            logger.warning("Cannot start proctoring: camera stream is not active")
            return False
        if not self._detector.ready:
            logger.warning("Cannot start proctoring: detector is not ready")
            return False
        if self._session.is_active:
            return True

        self._session.begin()
        self._session.add_alert(AlertKind.SUCCESS, "Proctoring session started")
        self._scheduler.start()
        self._publish()
        return True

    def stop_proctoring(self) -> None:
        """Stop sampling. No tick result is applied after this returns."""
        self._scheduler.stop()
        if self._session.end():
            self._session.add_alert(AlertKind.WARNING, "Proctoring session stopped")
            self._publish()

    def reset_session(self) -> None:
        """Clear alerts, counters and detections; a running session keeps running."""
        with self._lock:
            self._session.reset()
            self._detections = ()
        self._publish()

    # --- Rendering ---

    def add_listener(self, listener: DetectionListener) -> None:
        """
        Register a callback for detection-set and activity changes.

        Called with (detections, is_active) after every applied tick and
        after stop, reset and camera release.
        """
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: DetectionListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def render_overlay(
        self,
        surface: OverlaySurface,
        geometry: SourceGeometry | None = None,
        pixel_density: float = 1.0,
    ) -> OverlaySurface:
        """Render the current detections, sized to the latest camera frame."""
        if geometry is None:
            geometry = SourceGeometry.from_frame(
                self._camera.latest_frame, self._renderer.default_size
            )
        return self._renderer.render(
            surface,
            self.detections,
            self.is_proctoring_active,
            geometry,
            pixel_density,
        )

    # --- Internals ---

    def _next_frame(self) -> np.ndarray | None:
        if not self._session.is_active:
            return None
        return self._camera.read_frame()

    def _on_tick(self, result: TickResult) -> None:
        # Held across apply so a concurrent reset cannot interleave
        with self._lock:
            if not self._session.is_current(result):
                return
            self._session.apply(result)
            if result.failed:
                return
            self._detections = result.detections
        self._publish()

    def _publish(self) -> None:
        with self._lock:
            detections = self._detections
            listeners = list(self._listeners)
        active = self._session.is_active

        for listener in listeners:
            try:
                listener(detections, active)
            except Exception as e:
                logger.error(f"Detection listener failed: {e}", exc_info=True)

    def __enter__(self) -> "ProctoringEngine":
        return self

    def __exit__(self, *_exc) -> None:
        self.stop_camera()
