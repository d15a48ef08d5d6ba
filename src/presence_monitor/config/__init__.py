"""
Configuration loading and validation.

- load_config / load_config_with_env: YAML file plus environment overrides
- validate_config_full: Comprehensive validation with errors/warnings
- build_settings: Typed Config object consumed by the engine and CLI

Pydantic schemas available for type-safe validation:
- Config: Complete configuration schema
- validate_config_pydantic: Validate and parse config to Pydantic model
"""

from .loader import (
    # Exception
    ConfigValidationError,
    build_settings,
    find_config_file,
    load_config,
    load_config_with_env,
    # Display
    print_validation_result,
)
from .schemas import (
    CameraConfig,
    Config,
    DetectionConfig,
    OutputConfig,
    OverlayConfig,
    RuntimeConfig,
    validate_config_pydantic,
)
from .validator import (
    ValidationResult,
    validate_config_full,
)

__all__ = [
    "CameraConfig",
    # Pydantic validation
    "Config",
    # Exception
    "ConfigValidationError",
    "DetectionConfig",
    "OutputConfig",
    "OverlayConfig",
    "RuntimeConfig",
    "ValidationResult",
    "build_settings",
    # Config loading
    "find_config_file",
    "load_config",
    "load_config_with_env",
    # Display
    "print_validation_result",
    # Validation
    "validate_config_full",
    "validate_config_pydantic",
]
