"""
Configuration Validator - Validates config syntax and semantic correctness.

Provides comprehensive validation with detailed error messages.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..utils.constants import PERSON_LABEL

logger = logging.getLogger(__name__)

KNOWN_SECTIONS = ("camera", "detection", "overlay", "runtime", "output")


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    derived: dict[str, Any] = field(default_factory=dict)


def validate_config_full(
    config: dict, model_names: dict[int, str] | None = None
) -> ValidationResult:
    """
    Comprehensive config validation with detailed error messages.

    Args:
        config: Configuration dictionary to validate
        model_names: Optional mapping of class ID -> class name from loaded model.
                     If provided, track_classes are validated against the model.

    Returns:
        ValidationResult with errors, warnings, and derived configuration.
    """
    result = ValidationResult(valid=True)

    if not isinstance(config, dict):
        result.errors.append("Configuration must be a mapping")
        result.valid = False
        return result

    for section in config:
        if section not in KNOWN_SECTIONS:
            result.errors.append(f"Unknown section: '{section}'")

    _validate_camera(config.get("camera") or {}, result)
    _validate_detection(config.get("detection") or {}, result, model_names)
    _validate_overlay(config.get("overlay") or {}, result)
    _validate_runtime(config.get("runtime") or {}, result)
    _validate_output(config.get("output") or {}, result)

    if result.errors:
        result.valid = False

    return result


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_camera(camera: dict, result: ValidationResult) -> None:
    """Validate camera settings."""
    url = camera.get("url", 0)
    if isinstance(url, str) and not url.strip():
        result.errors.append("camera.url must not be empty")
    elif not isinstance(url, (str, int)) or isinstance(url, bool):
        result.errors.append("camera.url must be a device index or URL")
    else:
        result.derived["camera_source"] = url

    for key in ("width", "height"):
        value = camera.get(key)
        if value is not None and (not isinstance(value, int) or value <= 0):
            result.errors.append(f"camera.{key} must be a positive integer")

    attempts = camera.get("reconnect_attempts")
    if attempts is not None and (not isinstance(attempts, int) or attempts < 0):
        result.errors.append("camera.reconnect_attempts must be >= 0")

    if camera.get("exact_resolution") and not (
        camera.get("width") and camera.get("height")
    ):
        result.warnings.append(
            "camera.exact_resolution is set without an explicit width/height"
        )


def _validate_detection(
    detection: dict, result: ValidationResult, model_names: dict[int, str] | None
) -> None:
    """Validate detection configuration."""
    model_file = detection.get("model_file")
    if model_file is not None:
        if not str(model_file).endswith(".pt"):
            result.errors.append(f"Model file must be .pt format: {model_file}")
        elif not Path(model_file).exists():
            result.warnings.append(
                f"Model file not found: {model_file} (will be downloaded if valid)"
            )

    conf = detection.get("confidence_threshold")
    if conf is not None and (not _is_number(conf) or not 0.0 <= conf <= 1.0):
        result.errors.append(
            "detection.confidence_threshold must be between 0.0 and 1.0"
        )

    interval = detection.get("interval_seconds")
    if interval is not None and (not _is_number(interval) or interval <= 0):
        result.errors.append("detection.interval_seconds must be positive")

    track_classes = detection.get("track_classes", [PERSON_LABEL])
    if not isinstance(track_classes, list) or not track_classes:
        result.errors.append("detection.track_classes must be a non-empty list")
        return

    names = [str(name).lower() for name in track_classes]
    if PERSON_LABEL not in names:
        result.warnings.append(
            f"detection.track_classes does not include '{PERSON_LABEL}' - "
            "every tick will report no person"
        )

    if model_names is not None:
        known = {name.lower() for name in model_names.values()}
        for name in names:
            if name not in known:
                result.errors.append(f"Unknown class '{name}' (not in model)")
    result.derived["track_classes"] = names


def _validate_overlay(overlay: dict, result: ValidationResult) -> None:
    """Validate overlay settings."""
    density = overlay.get("pixel_density")
    if density is not None and (not _is_number(density) or density <= 0):
        result.errors.append("overlay.pixel_density must be positive")

    threshold = overlay.get("low_confidence_threshold")
    if threshold is not None and (
        not _is_number(threshold) or not 0.0 <= threshold <= 1.0
    ):
        result.errors.append(
            "overlay.low_confidence_threshold must be between 0.0 and 1.0"
        )

    for key in ("default_width", "default_height"):
        value = overlay.get(key)
        if value is not None and (not isinstance(value, int) or value <= 0):
            result.errors.append(f"overlay.{key} must be a positive integer")


def _validate_runtime(runtime: dict, result: ValidationResult) -> None:
    """Validate runtime settings."""
    for key in ("default_duration_hours", "status_interval_seconds"):
        value = runtime.get(key)
        if value is not None and (not _is_number(value) or value <= 0):
            result.errors.append(f"runtime.{key} must be positive")


def _validate_output(output: dict, result: ValidationResult) -> None:
    """Validate output settings."""
    path = output.get("annotated_frame")
    if not path:
        return

    suffix = Path(path).suffix.lower()
    if suffix not in (".jpg", ".jpeg", ".png", ".bmp"):
        result.errors.append(
            f"output.annotated_frame must be a .jpg, .png or .bmp path: {path}"
        )
    result.derived["annotated_frame"] = path
