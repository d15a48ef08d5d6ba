"""
Detection data models - boxes emitted by the detector for one frame.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..utils.constants import PERSON_LABEL


@dataclass(frozen=True)
class Detection:
    """
    One bounding box produced by the detector for a single frame.

    Detections carry no identity across ticks; each tick produces a fresh set.

    Attributes:
        label: Class name reported by the detector (e.g. "person")
        score: Confidence in [0, 1], clamped on creation (NaN becomes 0)
        box: (x, y, width, height) in source-frame pixels
    """

    label: str
    score: float
    box: tuple[float, float, float, float]

    def __post_init__(self) -> None:
        score = float(self.score)
        if math.isnan(score):
            score = 0.0
        object.__setattr__(self, "score", max(0.0, min(1.0, score)))
        object.__setattr__(self, "box", tuple(float(v) for v in self.box))

    @classmethod
    def from_xyxy(
        cls, label: str, score: float, x1: float, y1: float, x2: float, y2: float
    ) -> "Detection":
        """Build a detection from corner coordinates (YOLO xyxy format)."""
        return cls(label=label, score=score, box=(x1, y1, x2 - x1, y2 - y1))

    @property
    def is_person(self) -> bool:
        return self.label == PERSON_LABEL

    def to_dict(self) -> dict:
        return {"label": self.label, "score": self.score, "box": list(self.box)}


def count_persons(detections: Iterable[Detection]) -> int:
    """Number of detections labelled as a person."""
    return sum(1 for detection in detections if detection.is_person)


@dataclass(frozen=True)
class TickResult:
    """
    Outcome of one scheduler tick, published to the session.

    A failed tick carries the detector error text and no detections.
    """

    index: int
    detections: tuple[Detection, ...] = ()
    error: str | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def failed(self) -> bool:
        return self.error is not None
