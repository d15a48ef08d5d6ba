"""
Tests for configuration loading and validation.
"""

import os
import tempfile
import unittest
from unittest import mock

from pydantic import ValidationError

from presence_monitor.config import (
    ConfigValidationError,
    build_settings,
    find_config_file,
    load_config,
    load_config_with_env,
    validate_config_full,
    validate_config_pydantic,
)
from presence_monitor.utils.constants import ENV_CAMERA_URL, ENV_MODEL_FILE


class TestConfigValidation(unittest.TestCase):
    """Test configuration validation logic."""

    def setUp(self):
        """Create a temporary model file for testing."""
        self.temp_model = tempfile.NamedTemporaryFile(suffix=".pt", delete=False)
        self.temp_model.close()
        self.model_path = self.temp_model.name

    def tearDown(self):
        """Clean up temporary files."""
        if os.path.exists(self.model_path):
            os.unlink(self.model_path)

    def get_valid_config(self):
        """Return a minimal valid configuration."""
        return {
            "camera": {"url": "http://test:4747/video", "width": 640, "height": 480},
            "detection": {
                "model_file": self.model_path,
                "confidence_threshold": 0.4,
                "interval_seconds": 0.5,
            },
            "overlay": {"pixel_density": 2.0},
            "runtime": {"default_duration_hours": 1.0},
        }

    def test_valid_config_passes(self):
        result = validate_config_full(self.get_valid_config())
        self.assertTrue(result.valid, result.errors)
        self.assertEqual(result.warnings, [])
        self.assertEqual(result.derived["track_classes"], ["person"])

    def test_empty_config_is_valid(self):
        """Every section has defaults."""
        result = validate_config_full({})
        self.assertTrue(result.valid, result.errors)

    def test_unknown_section(self):
        config = self.get_valid_config()
        config["events"] = []
        result = validate_config_full(config)
        self.assertFalse(result.valid)
        self.assertIn("Unknown section: 'events'", result.errors)

    def test_invalid_confidence_threshold(self):
        config = self.get_valid_config()
        config["detection"]["confidence_threshold"] = 1.5
        result = validate_config_full(config)
        self.assertFalse(result.valid)
        self.assertTrue(any("confidence_threshold" in e for e in result.errors))

    def test_invalid_interval(self):
        config = self.get_valid_config()
        config["detection"]["interval_seconds"] = 0
        result = validate_config_full(config)
        self.assertFalse(result.valid)
        self.assertIn("detection.interval_seconds must be positive", result.errors)

    def test_wrong_model_format(self):
        config = self.get_valid_config()
        config["detection"]["model_file"] = "model.onnx"
        result = validate_config_full(config)
        self.assertFalse(result.valid)

    def test_missing_model_is_warning(self):
        config = self.get_valid_config()
        config["detection"]["model_file"] = "does-not-exist.pt"
        result = validate_config_full(config)
        self.assertTrue(result.valid)
        self.assertEqual(len(result.warnings), 1)

    def test_track_classes_without_person_warns(self):
        config = self.get_valid_config()
        config["detection"]["track_classes"] = ["dog"]
        result = validate_config_full(config)
        self.assertTrue(result.valid)
        self.assertTrue(any("person" in w for w in result.warnings))

    def test_track_classes_checked_against_model(self):
        config = self.get_valid_config()
        config["detection"]["track_classes"] = ["person", "unicorn"]
        result = validate_config_full(config, model_names={0: "person", 1: "bicycle"})
        self.assertFalse(result.valid)
        self.assertIn("Unknown class 'unicorn' (not in model)", result.errors)

    def test_annotated_frame_extension(self):
        config = self.get_valid_config()
        config["output"] = {"annotated_frame": "out/latest.txt"}
        self.assertFalse(validate_config_full(config).valid)
        config["output"] = {"annotated_frame": "out/latest.jpg"}
        self.assertTrue(validate_config_full(config).valid)


class TestPydanticSchemas(unittest.TestCase):
    """Test typed settings."""

    def test_defaults(self):
        settings = validate_config_pydantic({})
        self.assertEqual(settings.camera.url, 0)
        self.assertEqual((settings.camera.width, settings.camera.height), (1280, 720))
        self.assertEqual(settings.detection.track_classes, ["person"])
        self.assertEqual(settings.detection.interval_seconds, 1.0)
        self.assertEqual(settings.overlay.low_confidence_threshold, 0.5)
        self.assertIsNone(settings.output.annotated_frame)

    def test_unknown_field_rejected(self):
        with self.assertRaises(ValidationError):
            validate_config_pydantic({"camera": {"facing": "user"}})

    def test_model_file_must_be_pt(self):
        with self.assertRaises(ValidationError):
            validate_config_pydantic({"detection": {"model_file": "model.onnx"}})

    def test_build_settings_wraps_errors(self):
        with self.assertRaises(ConfigValidationError):
            build_settings({"detection": {"interval_seconds": -1}})

    def test_build_settings_ignores_empty_sections(self):
        settings = build_settings({"output": None, "camera": {"url": "1"}})
        self.assertEqual(settings.camera.url, "1")


class TestConfigLoading(unittest.TestCase):
    """Test file discovery, pointer files and env overrides."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def _write(self, name, content):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_load_yaml(self):
        path = self._write("config.yaml", "camera:\n  url: 2\n")
        config = load_config(path)
        self.assertEqual(config["camera"]["url"], 2)

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_pointer_file(self):
        self._write("real.yaml", "detection:\n  interval_seconds: 2.5\n")
        pointer = self._write("config.yaml", "use: real.yaml\n")
        config = load_config(pointer)
        self.assertEqual(config["detection"]["interval_seconds"], 2.5)

    def test_invalid_yaml(self):
        path = self._write("config.yaml", "camera: [unclosed\n")
        with self.assertRaises(ConfigValidationError):
            load_config(path)

    def test_non_mapping_rejected(self):
        path = self._write("config.yaml", "- just\n- a list\n")
        with self.assertRaises(ConfigValidationError):
            load_config(path)

    def test_missing_explicit_file(self):
        with self.assertRaises(FileNotFoundError):
            find_config_file(os.path.join(self.tmp.name, "nope.yaml"))

    def test_no_config_anywhere_uses_defaults(self):
        with mock.patch(
            "presence_monitor.config.loader.config_search_paths", return_value=[]
        ), mock.patch.dict(os.environ, {}, clear=True):
            self.assertIsNone(find_config_file())
            self.assertEqual(load_config(), {})

    def test_env_override_camera_url(self):
        with mock.patch.dict(os.environ, {ENV_CAMERA_URL: "rtsp://env/cam"}):
            config = load_config_with_env({"camera": {"url": 0}})
        self.assertEqual(config["camera"]["url"], "rtsp://env/cam")

    def test_env_override_model_file(self):
        with mock.patch.dict(os.environ, {ENV_MODEL_FILE: "custom.pt"}):
            config = load_config_with_env({})
        self.assertEqual(config["detection"]["model_file"], "custom.pt")


if __name__ == "__main__":
    unittest.main()
