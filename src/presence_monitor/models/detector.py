"""
Detector Protocol - Common interface for person detection backends.

Any detection method (YOLO, a remote inference service, a test fake)
can implement this protocol to be driven by the detection scheduler.
"""

from typing import Protocol, runtime_checkable

import numpy as np

from .detection import Detection


@runtime_checkable
class Detector(Protocol):
    """
    Protocol for detection backends.

    The engine only starts a session when ``ready`` is true; the scheduler treats
    any exception raised by ``detect`` as a failed tick.

    Example:
        detector = YoloPersonDetector("yolov8n.pt")
        detector.load()
        if detector.ready:
            detections = detector.detect(frame)
    """

    @property
    def ready(self) -> bool:
        """True once the model is loaded and able to run inference."""
        ...

    def detect(self, frame: np.ndarray) -> list[Detection]:
        """
        Run inference on a single frame.

        Args:
            frame: BGR frame from the camera (numpy array)

        Returns:
            Detections in source-frame pixel coordinates
        """
        ...
