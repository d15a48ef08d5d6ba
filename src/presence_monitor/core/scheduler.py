"""
Detection Scheduler

Fixed-cadence sampling loop: pull a frame, run the detector, publish the
result. Uses threading.Event as the cancellation token so stop() wakes the
worker immediately instead of waiting out the interval.

Ordering guarantees:
- Single-flight: a tick never starts while a previous detector call is
  still outstanding, so results are applied in tick order.
- Results are published under the scheduler lock and only when the run that
  produced them is still current; after stop() returns nothing is published.
"""

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime, timezone

import numpy as np

from ..models import Detector, TickResult
from ..utils.constants import DEFAULT_SAMPLE_INTERVAL, SCHEDULER_STOP_TIMEOUT

logger = logging.getLogger(__name__)

FrameSource = Callable[[], "np.ndarray | None"]
ResultCallback = Callable[[TickResult], None]


class DetectionScheduler:
    """
    Drives the detector at a fixed cadence on a worker thread.

    The scheduler owns its thread and cancellation token; the frame source
    and detector are passed in by the owner.
    """

    def __init__(
        self,
        frame_source: FrameSource,
        detector: Detector,
        on_result: ResultCallback,
        interval_seconds: float = DEFAULT_SAMPLE_INTERVAL,
    ):
        """
        Initialize the scheduler.

        Args:
            frame_source: Returns the current frame, or None if unavailable
            detector: Detector invoked once per tick
            on_result: Called with each published TickResult
            interval_seconds: Seconds between tick starts
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        self._frame_source = frame_source
        self._detector = detector
        self._on_result = on_result
        self._interval = interval_seconds

        self._lock = threading.RLock()
        self._generation = 0
        self._busy = False
        self._tick_count = 0

        self._shutdown = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._thread is not None

    @property
    def busy(self) -> bool:
        """True while a detector call is outstanding."""
        with self._lock:
            return self._busy

    def start(self) -> None:
        """Start the sampling thread. No-op if already running."""
        with self._lock:
            if self._thread is not None:
                return

            self._generation += 1
            self._shutdown = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._generation, self._shutdown),
                name="DetectionScheduler",
                daemon=True,
            )
            self._thread.start()

        logger.info(f"Detection scheduler started ({self._interval:.2f}s interval)")

    def stop(self) -> None:
        """
        Stop sampling.

        Invalidates the current run before returning, so a detector call
        still in flight has its result discarded.
        """
        with self._lock:
            self._generation += 1
            self._shutdown.set()
            thread, self._thread = self._thread, None

        if thread is None:
            return

        if thread is not threading.current_thread():
            thread.join(timeout=SCHEDULER_STOP_TIMEOUT)
            if thread.is_alive():
                logger.warning(
                    "Detector call still running after stop - its result will be discarded"
                )
        logger.info("Detection scheduler stopped")

    def run_once(self) -> bool:
        """
        Run a single tick synchronously on the calling thread.

        Returns:
            True if a result was published
        """
        with self._lock:
            generation = self._generation
        return self._tick(generation)

    def _run(self, generation: int, shutdown: threading.Event) -> None:
        """
        Worker loop.

        The first tick fires one interval after start. Ticks are scheduled
        on fixed deadlines; a tick slower than the interval delays the next
        one rather than overlapping it, and missed deadlines are dropped.
        """
        next_tick = time.monotonic() + self._interval
        while not shutdown.wait(max(next_tick - time.monotonic(), 0.0)):
            self._tick(generation)
            next_tick = max(next_tick + self._interval, time.monotonic())

    def _tick(self, generation: int) -> bool:
        with self._lock:
            if self._busy:
                logger.debug("Previous detection still running, skipping tick")
                return False
            self._busy = True
            self._tick_count += 1
            index = self._tick_count

        started_at = datetime.now(timezone.utc)
        try:
            try:
                frame = self._frame_source()
            except Exception as e:
                logger.warning(f"Frame unavailable on tick {index}: {e}")
                return False
            if frame is None:
                return False

            try:
                detections = tuple(self._detector.detect(frame))
                result = TickResult(
                    index=index, detections=detections, started_at=started_at
                )
            except Exception as e:
                logger.error(f"Detection failed on tick {index}: {e}", exc_info=True)
                result = TickResult(
                    index=index, error=str(e) or type(e).__name__, started_at=started_at
                )

            with self._lock:
                if generation != self._generation:
                    logger.debug(f"Discarding result of tick {index} from a stopped run")
                    return False
                try:
                    self._on_result(result)
                except Exception as e:
                    logger.error(f"Error publishing tick {index}: {e}", exc_info=True)
            return True
        finally:
            with self._lock:
                self._busy = False
