"""
Tests for CLI helpers
"""

import os
import tempfile
import unittest
from unittest import mock

import yaml

from presence_monitor import cli
from presence_monitor.config import validate_config_pydantic


class TestArgs(unittest.TestCase):
    def test_defaults(self):
        args = cli.parse_args([])
        self.assertIsNone(args.duration)
        self.assertIsNone(args.config)
        self.assertFalse(args.quiet)
        self.assertFalse(args.validate)

    def test_duration_and_flags(self):
        args = cli.parse_args(["0.5", "-q", "-c", "exam.yaml"])
        self.assertEqual(args.duration, 0.5)
        self.assertTrue(args.quiet)
        self.assertEqual(args.config, "exam.yaml")

    def test_parse_duration(self):
        settings = validate_config_pydantic({"runtime": {"default_duration_hours": 2}})
        self.assertEqual(cli.parse_duration(None, settings), 2)
        self.assertEqual(cli.parse_duration(0.25, settings), 0.25)
        with self.assertRaises(SystemExit):
            cli.parse_duration(-1, settings)


class TestStatusOutput(unittest.TestCase):
    def test_status_line(self):
        engine = mock.MagicMock()
        snapshot = engine.get_status_snapshot.return_value
        snapshot.format_duration.return_value = "1:05"
        snapshot.status_message.return_value = "2 persons detected"
        snapshot.violations.total = 3
        snapshot.violations.no_person = 1
        snapshot.violations.multiple_person = 2

        line = cli.format_status_line(engine)

        self.assertEqual(
            line,
            "[1:05] 2 persons detected | violations: 3 (no person: 1, multiple: 2)",
        )

    def test_monitor_stops_when_session_ends(self):
        engine = mock.MagicMock()
        engine.is_proctoring_active = False
        with mock.patch.object(cli._shutdown_signal, "wait", return_value=False):
            reason = cli.monitor_session(engine, 3600, 10, start_time=cli.time.time())
        self.assertEqual(reason, "stopped")


class TestValidateMode(unittest.TestCase):
    """Test --validate against the classes of a model on disk."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.model_path = os.path.join(self.tmp.name, "yolo.pt")
        with open(self.model_path, "wb") as f:
            f.write(b"weights")

    def _write_config(self, track_classes):
        path = os.path.join(self.tmp.name, "config.yaml")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                {"detection": {"model_file": self.model_path, "track_classes": track_classes}},
                f,
            )
        return path

    def _validate(self, config_path, model_names):
        with mock.patch.object(
            cli, "get_model_class_names", return_value=model_names
        ) as get_names, mock.patch.object(cli, "print_validation_result") as report:
            with self.assertRaises(SystemExit) as ctx:
                cli.run_validate(config_path)
        return ctx.exception.code, get_names, report.call_args[0][0]

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_unknown_class_fails(self):
        path = self._write_config(["person", "unicorn"])

        code, get_names, result = self._validate(path, {0: "person"})

        self.assertEqual(code, 1)
        get_names.assert_called_once_with(self.model_path)
        self.assertIn("Unknown class 'unicorn' (not in model)", result.errors)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_known_classes_pass(self):
        path = self._write_config(["person"])

        code, _, result = self._validate(path, {0: "person", 1: "bicycle"})

        self.assertEqual(code, 0)
        self.assertTrue(result.valid)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_unloadable_model_skips_class_check(self):
        path = self._write_config(["person", "unicorn"])

        with mock.patch("builtins.print") as printed:
            code, _, result = self._validate(path, None)

        self.assertEqual(code, 0)
        self.assertNotIn("Unknown class 'unicorn' (not in model)", result.errors)
        printed.assert_any_call("Warning: Could not load model, class names will not be validated")


if __name__ == "__main__":
    unittest.main()
