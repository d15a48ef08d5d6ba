"""
Overlay rendering - detection boxes and labels drawn on a transparent surface.

The surface is a BGRA buffer sized to the source frame times the display
pixel density. Callers pass coordinates in source-frame pixels; the surface
scale maps them onto the buffer.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import cv2
import numpy as np

from ..models import Detection
from ..utils.constants import (
    DEFAULT_FRAME_HEIGHT,
    DEFAULT_FRAME_WIDTH,
    LOW_CONFIDENCE_THRESHOLD,
)

logger = logging.getLogger(__name__)

# BGRA
NORMAL_COLOR = (129, 185, 16, 255)  # green
WARNING_COLOR = (11, 158, 245, 255)  # amber
TEXT_COLOR = (255, 255, 255, 255)

FONT = cv2.FONT_HERSHEY_SIMPLEX


@dataclass(frozen=True)
class SourceGeometry:
    """Intrinsic resolution of the source frame."""

    width: int
    height: int

    @classmethod
    def from_frame(
        cls,
        frame: np.ndarray | None,
        default: tuple[int, int] = (DEFAULT_FRAME_WIDTH, DEFAULT_FRAME_HEIGHT),
    ) -> "SourceGeometry":
        """Geometry of a frame, or the default when the frame is missing or empty."""
        if frame is None or frame.ndim < 2 or 0 in frame.shape[:2]:
            return cls(*default)
        height, width = frame.shape[:2]
        return cls(width, height)


class OverlaySurface:
    """
    Transparent drawing surface.

    Attributes:
        pixels: BGRA uint8 buffer, shape (height, width, 4)
        scale: Uniform transform from source-frame pixels to buffer pixels
    """

    def __init__(self, width: int = 0, height: int = 0):
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)
        self.scale = 1.0

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def resize(self, width: int, height: int) -> None:
        """Reallocate the buffer if the size changed (contents are discarded)."""
        if (width, height) != (self.width, self.height):
            self.pixels = np.zeros((height, width, 4), dtype=np.uint8)

    def clear(self) -> None:
        self.pixels[:] = 0

    def is_blank(self) -> bool:
        return not self.pixels.any()

    def to_surface(self, value: float) -> int:
        """Map a source-frame coordinate onto the buffer."""
        return int(round(value * self.scale))


def format_label(detection: Detection) -> str:
    """Label text, e.g. 'person 87%'."""
    return f"{detection.label} {round(detection.score * 100)}%"


class OverlayRenderer:
    """
    Draws detections onto an OverlaySurface.

    Rendering is a pure function of its inputs: the surface is always
    cleared first, so repeated calls never accumulate.
    """

    def __init__(
        self,
        low_confidence_threshold: float = LOW_CONFIDENCE_THRESHOLD,
        default_size: tuple[int, int] = (DEFAULT_FRAME_WIDTH, DEFAULT_FRAME_HEIGHT),
        line_width: int = 3,
        font_scale: float = 0.5,
        label_padding: int = 5,
    ):
        self.low_confidence_threshold = low_confidence_threshold
        self.default_size = default_size
        self.line_width = line_width
        self.font_scale = font_scale
        self.label_padding = label_padding

    def accent_color(self, score: float) -> tuple[int, int, int, int]:
        return WARNING_COLOR if score < self.low_confidence_threshold else NORMAL_COLOR

    def render(
        self,
        surface: OverlaySurface,
        detections: Sequence[Detection],
        active: bool,
        geometry: SourceGeometry | None = None,
        pixel_density: float = 1.0,
    ) -> OverlaySurface:
        """
        Render detections for one frame.

        Args:
            surface: Surface to draw on (resized as needed)
            detections: Detections in source-frame pixels
            active: Whether proctoring is running; inactive leaves it blank
            geometry: Source frame size (default size if None)
            pixel_density: Display pixels per source pixel

        Returns:
            The same surface, for chaining
        """
        geometry = geometry or SourceGeometry(*self.default_size)
        density = pixel_density if pixel_density > 0 else 1.0

        surface.resize(
            int(round(geometry.width * density)), int(round(geometry.height * density))
        )
        surface.scale = density
        surface.clear()

        if not active or not detections:
            return surface

        for detection in detections:
            self._draw_detection(surface, detection)

        return surface

    def _draw_detection(self, surface: OverlaySurface, detection: Detection) -> None:
        x, y, width, height = detection.box
        color = self.accent_color(detection.score)

        top_left = (surface.to_surface(x), surface.to_surface(y))
        bottom_right = (surface.to_surface(x + width), surface.to_surface(y + height))
        thickness = max(1, surface.to_surface(self.line_width))
        cv2.rectangle(surface.pixels, top_left, bottom_right, color, thickness)

        # Label background sits directly above the box, clamped to the top edge
        label = format_label(detection)
        font_scale = self.font_scale * surface.scale
        font_thickness = max(1, surface.to_surface(1))
        (text_width, text_height), baseline = cv2.getTextSize(
            label, FONT, font_scale, font_thickness
        )
        padding = surface.to_surface(self.label_padding)
        label_height = text_height + baseline + 2 * padding
        label_top = max(top_left[1] - label_height, 0)

        cv2.rectangle(
            surface.pixels,
            (top_left[0], label_top),
            (top_left[0] + text_width + 2 * padding, label_top + label_height),
            color,
            cv2.FILLED,
        )
        cv2.putText(
            surface.pixels,
            label,
            (top_left[0] + padding, label_top + padding + text_height),
            FONT,
            font_scale,
            TEXT_COLOR,
            font_thickness,
        )


def composite(frame: np.ndarray, surface: OverlaySurface) -> np.ndarray:
    """
    Alpha-blend an overlay onto a BGR frame.

    The overlay is resampled to the frame size first, undoing the pixel
    density scale.

    Returns:
        New BGR frame with the overlay applied
    """
    frame_height, frame_width = frame.shape[:2]
    if surface.width == 0 or surface.height == 0:
        return frame.copy()

    overlay = surface.pixels
    if (surface.width, surface.height) != (frame_width, frame_height):
        overlay = cv2.resize(
            overlay, (frame_width, frame_height), interpolation=cv2.INTER_AREA
        )

    alpha = overlay[:, :, 3:4].astype(np.float32) / 255.0
    blended = frame.astype(np.float32) * (1.0 - alpha) + overlay[:, :, :3] * alpha
    return blended.astype(np.uint8)
