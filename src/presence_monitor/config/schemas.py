"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.constants import (
    DEFAULT_CAMERA_HEIGHT,
    DEFAULT_CAMERA_WIDTH,
    DEFAULT_FRAME_HEIGHT,
    DEFAULT_FRAME_WIDTH,
    DEFAULT_SAMPLE_INTERVAL,
    LOW_CONFIDENCE_THRESHOLD,
    MAX_CAMERA_RECONNECT_ATTEMPTS,
    PERSON_LABEL,
    STATUS_REPORT_INTERVAL,
)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class CameraConfig(StrictModel):
    """Camera configuration."""

    url: str | int = Field(default=0, description="Device index or stream URL")
    width: int = Field(default=DEFAULT_CAMERA_WIDTH, gt=0)
    height: int = Field(default=DEFAULT_CAMERA_HEIGHT, gt=0)
    exact_resolution: bool = False
    backend: str | None = Field(default=None, description="OpenCV backend, e.g. v4l2")
    reconnect_attempts: int = Field(default=MAX_CAMERA_RECONNECT_ATTEMPTS, ge=0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | int) -> str | int:
        if isinstance(v, str) and not v.strip():
            raise ValueError("Camera url must not be empty")
        if isinstance(v, int) and v < 0:
            raise ValueError("Camera device index must be >= 0")
        return v


class DetectionConfig(StrictModel):
    """Detection settings."""

    model_file: str = Field(default="yolov8n.pt", description="YOLO model file (.pt)")
    confidence_threshold: float = Field(
        default=0.5, ge=0.0, le=1.0, description="Detection confidence threshold"
    )
    track_classes: list[str] = Field(default_factory=lambda: [PERSON_LABEL])
    interval_seconds: float = Field(
        default=DEFAULT_SAMPLE_INTERVAL, gt=0, description="Seconds between samples"
    )

    @field_validator("model_file")
    @classmethod
    def validate_model_file(cls, v: str) -> str:
        if not v.endswith(".pt"):
            raise ValueError("Model file must be .pt format")
        return v


class OverlayConfig(StrictModel):
    """Overlay rendering settings."""

    pixel_density: float = Field(default=1.0, gt=0)
    low_confidence_threshold: float = Field(
        default=LOW_CONFIDENCE_THRESHOLD, ge=0.0, le=1.0
    )
    default_width: int = Field(default=DEFAULT_FRAME_WIDTH, gt=0)
    default_height: int = Field(default=DEFAULT_FRAME_HEIGHT, gt=0)


class RuntimeConfig(StrictModel):
    """Runtime configuration."""

    default_duration_hours: float = Field(default=1.0, gt=0)
    status_interval_seconds: float = Field(default=STATUS_REPORT_INTERVAL, gt=0)


class OutputConfig(StrictModel):
    """Output configuration."""

    annotated_frame: str | None = Field(
        default=None, description="Path rewritten with the annotated frame each tick"
    )


class Config(StrictModel):
    """Complete configuration schema."""

    camera: CameraConfig = Field(default_factory=CameraConfig)
    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    overlay: OverlayConfig = Field(default_factory=OverlayConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate configuration using Pydantic.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated Config object

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config(**config)
