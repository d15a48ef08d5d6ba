"""
Configuration Loader - file discovery, pointer files and environment overrides.

Provides:
- find_config_file: Locate config.yaml in the standard locations
- load_config: Read YAML (following pointer files) and apply env overrides
- load_config_with_env: Apply environment variable overrides
- build_settings: Turn a raw config into the typed Config object
- print_validation_result: Terminal report for --validate
"""

import logging
import os
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..utils.constants import ENV_CAMERA_URL, ENV_MODEL_FILE
from .schemas import Config, validate_config_pydantic
from .validator import ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"


class ConfigValidationError(Exception):
    """Raised when config validation fails."""


# ANSI color codes for terminal output
class Colors:
    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls):
        """Disable colors for non-TTY output."""
        cls.GREEN = cls.RED = cls.YELLOW = ""
        cls.CYAN = cls.BOLD = cls.RESET = ""


# Disable colors if not a TTY
if not sys.stdout.isatty():
    Colors.disable()


def config_search_paths() -> list[Path]:
    """Standard config locations, in search order."""
    return [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "presence-monitor" / DEFAULT_CONFIG_NAME,
    ]


def find_config_file(config_path: str | None = None) -> Path | None:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (if provided)
    2. Current directory (config.yaml)
    3. ~/.config/presence-monitor/config.yaml

    Args:
        config_path: User-specified config path

    Returns:
        Path to config file, or None when no standard location has one

    Raises:
        FileNotFoundError: If an explicitly specified file does not exist
    """
    if config_path:
        specified = Path(config_path)
        if not specified.exists():
            raise FileNotFoundError(f"Specified config file not found: {config_path}")
        return specified

    for path in config_search_paths():
        if path.exists():
            logger.info(f"Using config: {path}")
            return path

    return None


def load_config(config_path: str | None = None) -> dict:
    """
    Load configuration file and apply environment overrides.

    Supports pointer files: if config only contains `use: path/to/config.yaml`,
    that file is loaded instead. With no file anywhere the built-in defaults
    are used.

    Raises:
        ConfigValidationError: If the file is not valid YAML or not a mapping
    """
    config_file = find_config_file(config_path)

    if config_file is None:
        logger.warning("No config file found - using built-in defaults")
        return load_config_with_env({})

    try:
        with open(config_file, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}

        # Support pointer files: { use: "path/to/actual/config.yaml" }
        if isinstance(config, dict) and list(config.keys()) == ["use"]:
            pointer_target = config["use"]
            # Resolve relative to the pointer file's directory
            pointer_path = Path(config_file).parent / pointer_target
            logger.info(f"Config pointer: {config_file} -> {pointer_target}")
            with open(pointer_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
            config_file = pointer_path

    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigValidationError(f"Config must be a mapping: {config_file}")

    logger.info(f"Configuration loaded from {config_file}")
    return load_config_with_env(config)


def load_config_with_env(config: dict) -> dict:
    """
    Apply environment variable overrides to config.

    Args:
        config: Base configuration dictionary

    Returns:
        Configuration with environment variables applied
    """
    if ENV_CAMERA_URL in os.environ:
        logger.info(f"Using camera URL from environment: {ENV_CAMERA_URL}")
        config.setdefault("camera", {})["url"] = os.environ[ENV_CAMERA_URL]

    if ENV_MODEL_FILE in os.environ:
        logger.info(f"Using model file from environment: {ENV_MODEL_FILE}")
        config.setdefault("detection", {})["model_file"] = os.environ[ENV_MODEL_FILE]

    return config


def build_settings(config: dict) -> Config:
    """
    Convert a raw configuration into typed settings.

    Raises:
        ConfigValidationError: With the pydantic error summary
    """
    # Sections left empty in YAML load as None
    sections = {key: value for key, value in config.items() if value is not None}
    try:
        return validate_config_pydantic(sections)
    except ValidationError as e:
        raise ConfigValidationError(str(e)) from e


def print_validation_result(result: ValidationResult) -> None:
    """Print validation result."""
    print()
    print(f"{Colors.BOLD}Configuration Validation{Colors.RESET}")
    print("=" * 60)

    if result.valid:
        print(f"\n{Colors.GREEN}✓ Configuration is valid{Colors.RESET}")
    else:
        print(f"\n{Colors.RED}✗ Configuration has errors{Colors.RESET}")

    if result.errors:
        print(f"\n{Colors.RED}Errors:{Colors.RESET}")
        for error in result.errors:
            print(f"  {Colors.RED}✗{Colors.RESET} {error}")

    if result.warnings:
        print(f"\n{Colors.YELLOW}Warnings:{Colors.RESET}")
        for warning in result.warnings:
            print(f"  {Colors.YELLOW}!{Colors.RESET} {warning}")

    if result.valid and result.derived:
        print(f"\n{Colors.CYAN}Derived Configuration:{Colors.RESET}")

        if "camera_source" in result.derived:
            print(f"  Camera: {result.derived['camera_source']}")

        track_classes = result.derived.get("track_classes", [])
        if track_classes:
            print(f"  Track classes: {', '.join(track_classes)}")

        if result.derived.get("annotated_frame"):
            print(f"  Annotated frame: {result.derived['annotated_frame']}")

    print()
