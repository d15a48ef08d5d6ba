"""
Tests for the camera source (OpenCV capture mocked)
"""

import unittest
from unittest import mock

import numpy as np

from presence_monitor.core.camera import (
    CameraConstraints,
    CameraSource,
    PermissionState,
    parse_source,
)
from presence_monitor.core.errors import CameraError, CameraFailure

STREAM_URL = "rtsp://camera.local/stream"


def make_capture(opened=True, frame=None, read_ok=True):
    capture = mock.MagicMock()
    capture.isOpened.return_value = opened
    if frame is None:
        frame = np.zeros((720, 1280, 3), dtype=np.uint8)
    capture.read.return_value = (read_ok, frame if read_ok else None)
    return capture


class TestCameraSource(unittest.TestCase):
    """Test start/stop and failure classification."""

    def setUp(self):
        patcher = mock.patch("presence_monitor.core.camera.cv2.VideoCapture")
        self.video_capture = patcher.start()
        self.addCleanup(patcher.stop)

    def test_start_opens_stream(self):
        capture = make_capture()
        self.video_capture.return_value = capture

        camera = CameraSource(STREAM_URL, reconnect_attempts=0)
        stream = camera.start(CameraConstraints(1280, 720))

        self.assertTrue(camera.is_active)
        self.assertEqual((stream.width, stream.height), (1280, 720))
        self.assertIsNotNone(camera.latest_frame)
        self.video_capture.assert_called_once_with(STREAM_URL)

    def test_start_twice_returns_existing_stream(self):
        self.video_capture.return_value = make_capture()
        camera = CameraSource(STREAM_URL, reconnect_attempts=0)
        first = camera.start()
        second = camera.start()
        self.assertIs(first, second)
        self.assertEqual(self.video_capture.call_count, 1)

    def test_permission_denied_fails_without_opening(self):
        camera = CameraSource("/dev/video7")
        with mock.patch("presence_monitor.core.camera.os.path.exists", return_value=True), \
                mock.patch("presence_monitor.core.camera.os.access", return_value=False):
            self.assertIs(camera.permission_state(), PermissionState.DENIED)
            with self.assertRaises(CameraError) as ctx:
                camera.start()

        self.assertIs(ctx.exception.reason, CameraFailure.PERMISSION_DENIED)
        self.assertEqual(
            ctx.exception.message,
            "Camera access was denied. Please allow camera access to continue.",
        )
        self.video_capture.assert_not_called()
        self.assertFalse(camera.is_active)

    def test_not_found_after_retries(self):
        self.video_capture.return_value = make_capture(opened=False)
        camera = CameraSource(STREAM_URL, reconnect_attempts=1, reconnect_delay=0)

        with self.assertRaises(CameraError) as ctx:
            camera.start()

        self.assertIs(ctx.exception.reason, CameraFailure.NOT_FOUND)
        self.assertEqual(self.video_capture.call_count, 2)
        self.assertFalse(camera.is_active)

    def test_unreadable_device_is_busy(self):
        capture = make_capture(read_ok=False)
        self.video_capture.return_value = capture
        camera = CameraSource(STREAM_URL, reconnect_attempts=0)

        with self.assertRaises(CameraError) as ctx:
            camera.start()

        self.assertIs(ctx.exception.reason, CameraFailure.DEVICE_BUSY)
        capture.release.assert_called_once()

    def test_exact_resolution_mismatch(self):
        capture = make_capture(frame=np.zeros((480, 640, 3), dtype=np.uint8))
        self.video_capture.return_value = capture
        camera = CameraSource(STREAM_URL, reconnect_attempts=0)

        with self.assertRaises(CameraError) as ctx:
            camera.start(CameraConstraints(1280, 720, exact=True))

        self.assertIs(ctx.exception.reason, CameraFailure.CONSTRAINTS_UNSATISFIABLE)
        capture.release.assert_called_once()
        self.assertFalse(camera.is_active)

    def test_non_exact_accepts_other_resolution(self):
        self.video_capture.return_value = make_capture(
            frame=np.zeros((480, 640, 3), dtype=np.uint8)
        )
        camera = CameraSource(STREAM_URL, reconnect_attempts=0)
        stream = camera.start(CameraConstraints(1280, 720))
        self.assertEqual((stream.width, stream.height), (640, 480))

    def test_unknown_backend_unsupported(self):
        camera = CameraSource(STREAM_URL)
        with self.assertRaises(CameraError) as ctx:
            camera.start(CameraConstraints(backend="no_such_backend"))
        self.assertIs(ctx.exception.reason, CameraFailure.UNSUPPORTED)
        self.video_capture.assert_not_called()

    def test_stop_is_idempotent(self):
        capture = make_capture()
        self.video_capture.return_value = capture
        camera = CameraSource(STREAM_URL, reconnect_attempts=0)
        camera.start()

        camera.stop()
        camera.stop()

        capture.release.assert_called_once()
        self.assertFalse(camera.is_active)
        self.assertIsNone(camera.latest_frame)
        self.assertIsNone(camera.read_frame())

    def test_read_frame_updates_latest(self):
        capture = make_capture()
        self.video_capture.return_value = capture
        camera = CameraSource(STREAM_URL, reconnect_attempts=0)
        camera.start()

        new_frame = np.ones((720, 1280, 3), dtype=np.uint8)
        capture.read.return_value = (True, new_frame)
        self.assertIs(camera.read_frame(), new_frame)
        self.assertIs(camera.latest_frame, new_frame)

    def test_network_stream_permission_granted(self):
        self.assertIs(CameraSource(STREAM_URL).permission_state(), PermissionState.GRANTED)


class TestParseSource(unittest.TestCase):
    def test_digit_strings_become_indices(self):
        self.assertEqual(parse_source("0"), 0)
        self.assertEqual(parse_source(" 2 "), 2)
        self.assertEqual(parse_source(STREAM_URL), STREAM_URL)
        self.assertEqual(parse_source(1), 1)


if __name__ == "__main__":
    unittest.main()
