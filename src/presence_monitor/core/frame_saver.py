"""
Frame saving utilities - annotated frames.
"""

import logging
import os

import cv2
import numpy as np

from .overlay import OverlaySurface, composite

logger = logging.getLogger(__name__)


def save_annotated_frame(
    frame: np.ndarray, surface: OverlaySurface, path: str
) -> bool:
    """
    Composite the overlay onto a frame and write it to disk.

    Args:
        frame: Raw BGR frame
        surface: Rendered overlay (blank overlays write the plain frame)
        path: Output image path; the extension selects the encoder

    Returns:
        True if the image was written
    """
    annotated_frame = composite(frame, surface)

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    if not cv2.imwrite(path, annotated_frame):
        logger.warning(f"Could not write annotated frame to {path}")
        return False
    return True
