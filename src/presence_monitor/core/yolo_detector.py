"""
YOLO person detector - Detector implementation backed by ultralytics.
"""

import logging

import numpy as np
import torch
from ultralytics import YOLO

from ..models import Detection
from ..utils.constants import PERSON_LABEL

logger = logging.getLogger(__name__)


class YoloPersonDetector:
    """
    Runs a YOLO model on each frame and returns labelled boxes.

    Only classes listed in ``track_classes`` are returned (persons by
    default). The detector is not ready until load() succeeds.
    """

    def __init__(
        self,
        model_file: str,
        confidence_threshold: float = 0.5,
        track_classes: list[str] | None = None,
    ):
        self.model_file = model_file
        self.confidence_threshold = confidence_threshold
        self.track_classes = [c.lower() for c in (track_classes or [PERSON_LABEL])]

        self._model: YOLO | None = None
        self._device = "cpu"
        self._class_ids: list[int] | None = None

    @property
    def ready(self) -> bool:
        return self._model is not None

    @property
    def class_names(self) -> dict[int, str]:
        return dict(self._model.names) if self._model is not None else {}

    def load(self) -> None:
        """Load the model with GPU if available."""
        self._device = "cuda" if torch.cuda.is_available() else "cpu"
        model = YOLO(self.model_file)
        model.to(self._device)

        logger.info(f"Model initialized: {self.model_file}")
        logger.info(f"Device: {self._device}")
        if self._device == "cuda":
            logger.info(f"GPU: {torch.cuda.get_device_name(0)}")
        else:
            logger.warning("Running on CPU - performance will be slow")

        name_to_id = {name.lower(): class_id for class_id, name in model.names.items()}
        class_ids = []
        for name in self.track_classes:
            if name in name_to_id:
                class_ids.append(name_to_id[name])
            else:
                logger.warning(f"Unknown class '{name}' (not in model)")
        self._class_ids = sorted(class_ids) or None
        self._model = model

    def unload(self) -> None:
        self._model = None

    def detect(self, frame: np.ndarray) -> list[Detection]:
        """Run inference and convert boxes to source-frame detections."""
        if self._model is None:
            raise RuntimeError("Detector model is not loaded")

        results = self._model.predict(
            source=frame,
            conf=self.confidence_threshold,
            classes=self._class_ids,
            device=self._device,
            verbose=False,
        )

        boxes = results[0].boxes
        if boxes is None or boxes.cls is None or len(boxes.cls) == 0:
            return []

        names = self._model.names
        classes = boxes.cls.int().cpu().tolist()
        xyxy = boxes.xyxy.cpu().numpy()
        confs = boxes.conf.cpu().tolist()

        return [
            Detection.from_xyxy(names[obj_class], conf, *map(float, box))
            for obj_class, box, conf in zip(classes, xyxy, confs)
        ]
