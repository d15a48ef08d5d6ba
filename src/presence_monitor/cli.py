"""
Presence Monitor CLI
Main entry point for running a proctoring session against a local camera.

  --validate  Check configuration validity
"""

import argparse
import logging
import signal
import sys
import time
from pathlib import Path
from threading import Event as ThreadEvent

from .config import (
    Config,
    ConfigValidationError,
    build_settings,
    load_config,
    print_validation_result,
    validate_config_full,
)
from .core import OverlaySurface, ProctoringEngine, save_annotated_frame
from .models import Detection

logger = logging.getLogger(__name__)

# Module-level shutdown signal for SIGTERM/SIGINT handling
_shutdown_signal = ThreadEvent()

SUMMARY_ALERT_COUNT = 5


def _handle_shutdown_signal(signum, _frame):
    """Handle SIGTERM/SIGINT for graceful shutdown."""
    signal_name = "SIGTERM" if signum == signal.SIGTERM else "SIGINT"
    # Note: print is safer than logger in signal handlers
    print(f"\nReceived {signal_name}, initiating graceful shutdown...")
    _shutdown_signal.set()


def _setup_signal_handlers():
    """Register signal handlers for graceful shutdown."""
    signal.signal(signal.SIGTERM, _handle_shutdown_signal)
    signal.signal(signal.SIGINT, _handle_shutdown_signal)


def setup_logging(quiet: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
    """
    level = logging.WARNING if quiet else logging.INFO

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("presence_monitor.", "pm.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Presence Monitor - Flag missing or extra persons in front of a camera",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m presence_monitor 1             # Proctor for 1 hour
  python -m presence_monitor 0.5           # Proctor for 30 minutes
  python -m presence_monitor 1 --quiet     # Minimal logs
  python -m presence_monitor --validate    # Check config validity

Environment Variables:
  CAMERA_URL - Override camera URL from config
  MODEL_FILE - Override detector model file from config
        """,
    )

    parser.add_argument(
        "duration",
        type=float,
        nargs="?",
        help="Duration in hours (default: from config.yaml)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )

    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to config file (default: ./config.yaml or ~/.config/presence-monitor/)",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and show derived settings",
    )

    return parser.parse_args(argv)


def parse_duration(duration_arg: float | None, settings: Config) -> float:
    """
    Parse duration from command line argument or config.

    Raises:
        SystemExit: If duration is invalid
    """
    if duration_arg is not None:
        if duration_arg <= 0:
            logger.error(f"Invalid duration '{duration_arg}' - must be positive")
            logger.error("Usage: python -m presence_monitor [hours]")
            sys.exit(1)
        return duration_arg
    return settings.runtime.default_duration_hours


def load_settings(config_path: str | None) -> tuple[dict, Config]:
    """
    Load, validate and type the configuration.

    Raises:
        SystemExit: If config cannot be loaded or is invalid
    """
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ConfigValidationError) as e:
        logger.error(str(e))
        sys.exit(1)

    result = validate_config_full(config)
    if not result.valid:
        print_validation_result(result)
        sys.exit(1)

    try:
        settings = build_settings(config)
    except ConfigValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logger.info("Configuration validated")
    return config, settings


def print_banner(settings: Config, duration_hours: float) -> None:
    """Print system startup banner."""
    duration_seconds = int(duration_hours * 3600)

    print("\n" + "=" * 70)
    print("PRESENCE MONITOR")
    print("=" * 70)

    print(f"\nModel: {settings.detection.model_file}")
    print(f"Sample interval: {settings.detection.interval_seconds:.1f}s")
    if settings.output.annotated_frame:
        print(f"Annotated frame: {settings.output.annotated_frame}")

    print("\nRuntime:")
    print(f"  Duration: {duration_hours} hour(s) ({duration_seconds / 60:.0f} minutes)")
    print(f"  Camera: {settings.camera.url}")
    print("  Press Ctrl+C to stop early")
    print("=" * 70)
    print()


class AnnotatedFrameWriter:
    """Detection listener that rewrites one image with the latest annotated frame."""

    def __init__(self, engine: ProctoringEngine, path: str, pixel_density: float = 1.0):
        self.engine = engine
        self.path = path
        self.pixel_density = pixel_density
        self.surface = OverlaySurface()

    def __call__(self, detections: tuple[Detection, ...], active: bool) -> None:
        frame = self.engine.latest_frame
        if frame is None:
            return
        self.engine.render_overlay(self.surface, pixel_density=self.pixel_density)
        save_annotated_frame(frame, self.surface, self.path)


def format_status_line(engine: ProctoringEngine) -> str:
    """One-line session summary for periodic console output."""
    snapshot = engine.get_status_snapshot()
    violations = snapshot.violations
    return (
        f"[{snapshot.format_duration()}] {snapshot.status_message()} | "
        f"violations: {violations.total} "
        f"(no person: {violations.no_person}, multiple: {violations.multiple_person})"
    )


def monitor_session(
    engine: ProctoringEngine,
    duration_seconds: float,
    status_interval: float,
    start_time: float,
) -> str:
    """
    Block until the session should end.

    Returns:
        Reason for stopping ('duration', 'signal', 'interrupted', 'stopped')
    """
    next_status = start_time + status_interval
    try:
        while True:
            if _shutdown_signal.wait(timeout=1):
                return "signal"

            now = time.time()
            if now - start_time >= duration_seconds:
                return "duration"

            if not engine.is_proctoring_active:
                return "stopped"

            if now >= next_status:
                print(format_status_line(engine))
                next_status = now + status_interval

    except KeyboardInterrupt:
        return "interrupted"


def print_final_status(engine: ProctoringEngine, reason: str, elapsed: float) -> None:
    """Print final session summary."""
    print(f"\n{'=' * 70}")

    if reason == "duration":
        print(f"Duration reached - stopped after {elapsed / 60:.1f} minutes")
    elif reason == "interrupted":
        print("Interrupted by user (Ctrl+C)")
    elif reason == "signal":
        print("Shutdown signal received (SIGTERM/SIGINT)")
    elif reason == "stopped":
        print("Proctoring session ended")

    snapshot = engine.get_status_snapshot()
    violations = snapshot.violations

    print("=" * 70)
    print("SESSION SUMMARY")
    print("=" * 70)
    print(f"  Duration: {snapshot.format_duration()}")
    print(f"  Total violations: {violations.total}")
    print(f"    No person: {violations.no_person}")
    print(f"    Multiple persons: {violations.multiple_person}")

    alerts = engine.get_alerts()[-SUMMARY_ALERT_COUNT:]
    if alerts:
        print("\nRecent alerts:")
        for alert in alerts:
            print(f"  {alert}")
    print(f"{'=' * 70}\n")


def get_model_class_names(model_path: str) -> dict[int, str] | None:
    """
    Load the YOLO model and extract its class names.

    Returns:
        Mapping of class ID -> class name, or None if the model cannot be loaded
    """
    # Deferred so config handling works without torch installed
    from .core.yolo_detector import YoloPersonDetector

    detector = YoloPersonDetector(model_path)
    try:
        logger.info("Loading model to extract class names...")
        detector.load()
    except Exception as e:
        logger.error(f"Failed to load model: {e}")
        return None

    class_names = detector.class_names
    logger.info(f"Model loaded: {len(class_names)} classes")
    detector.unload()
    return class_names


def run_validate(config_path: str | None) -> None:
    """Run validation mode."""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ConfigValidationError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    # Load model to get class names for validation
    model_path = (config.get("detection") or {}).get("model_file")
    model_names = None
    if model_path and Path(model_path).exists():
        model_names = get_model_class_names(model_path)
        if model_names is None:
            print("Warning: Could not load model, class names will not be validated")

    result = validate_config_full(config, model_names)
    print_validation_result(result)
    sys.exit(0 if result.valid else 1)


def main(argv: list[str] | None = None) -> None:
    """Main orchestrator function."""
    args = parse_args(argv)
    setup_logging(quiet=args.quiet or args.validate)

    if args.validate:
        run_validate(args.config)
        return

    config, settings = load_settings(args.config)
    duration_hours = parse_duration(args.duration, settings)

    # Deferred so config handling works without torch installed
    from .core.yolo_detector import YoloPersonDetector

    detector = YoloPersonDetector(
        settings.detection.model_file,
        confidence_threshold=settings.detection.confidence_threshold,
        track_classes=settings.detection.track_classes,
    )
    try:
        detector.load()
    except Exception as e:
        logger.error(f"Failed to load model: {e}")
        sys.exit(1)

    # Now validate config against actual model classes
    result = validate_config_full(config, detector.class_names)
    if not result.valid:
        print_validation_result(result)
        sys.exit(1)
    logger.info("Configuration validated against model")

    print_banner(settings, duration_hours)
    _setup_signal_handlers()

    engine = ProctoringEngine.from_config(settings, detector)
    if settings.output.annotated_frame:
        engine.add_listener(
            AnnotatedFrameWriter(
                engine,
                settings.output.annotated_frame,
                settings.overlay.pixel_density,
            )
        )

    with engine:
        if not engine.start_camera():
            alert = engine.latest_alert()
            print(f"Error: {alert.message if alert else 'Failed to access camera'}")
            sys.exit(1)

        if not engine.start_proctoring():
            print("Error: Proctoring could not be started")
            sys.exit(1)

        print("\n" + "=" * 70)
        print("PROCTORING ACTIVE")
        print("=" * 70 + "\n")

        start_time = time.time()
        reason = monitor_session(
            engine,
            duration_hours * 3600,
            settings.runtime.status_interval_seconds,
            start_time,
        )
        elapsed = time.time() - start_time

        logger.info("Shutting down...")
        engine.stop_proctoring()
        print_final_status(engine, reason, elapsed)

    detector.unload()


if __name__ == "__main__":
    main()
