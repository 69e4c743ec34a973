from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from ssdnode.config.loader import build_model_spec, load_runtime_config


class ConfigLoaderTests(unittest.TestCase):
    def test_defaults_resolve_model_paths_against_repo_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()

            config = load_runtime_config(repo_root=root)

            self.assertEqual(config.detection.confidence, 0.5)
            self.assertEqual(config.detection.nms_threshold, 0.4)
            self.assertEqual(config.model.input_size, 300)
            self.assertAlmostEqual(config.model.scale_factor, 1.0 / 127.5)
            self.assertEqual(config.model.mean, 127.5)
            self.assertEqual(
                config.model.labels_path,
                str(root / "models/mobilenet_ssd/pascal_voc_names.txt"),
            )

    def test_file_values_and_cli_overrides_merge(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()
            config_file = root / "ssdnode.json"
            config_file.write_text(
                """
{
  "model": {
    "device": "opencl",
    "weights_path": "/opt/models/ssd.caffemodel"
  },
  "detection": {
    "confidence": 0.7,
    "nms_threshold": 0.3
  },
  "output": {
    "sink": "objects"
  }
}
""".strip(),
                encoding="utf-8",
            )

            config = load_runtime_config(
                repo_root=root,
                config_path=str(config_file),
                cli_overrides={"detection": {"confidence": 0.8}},
            )

            self.assertEqual(config.model.device, "opencl")
            self.assertEqual(config.model.weights_path, "/opt/models/ssd.caffemodel")
            self.assertEqual(config.detection.confidence, 0.8)
            self.assertEqual(config.detection.nms_threshold, 0.3)
            self.assertEqual(config.output.sink, "objects")

    def test_environment_overrides_detection_settings(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with mock.patch.dict(os.environ, {"SSDNODE_DETECTION__CONFIDENCE": "0.65"}):
                config = load_runtime_config(repo_root=Path(tmpdir))

            self.assertEqual(config.detection.confidence, 0.65)

    def test_unknown_sink_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(RuntimeError):
                load_runtime_config(
                    repo_root=Path(tmpdir),
                    cli_overrides={"output": {"sink": "printer"}},
                )

    def test_missing_explicit_config_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(FileNotFoundError):
                load_runtime_config(repo_root=Path(tmpdir), config_path=str(Path(tmpdir) / "nope.toml"))

    def test_model_spec_mirrors_model_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_runtime_config(
                repo_root=Path(tmpdir),
                cli_overrides={"model": {"device": "cuda", "cuda_size_jitter": True}},
            )

            spec = build_model_spec(config)

            self.assertEqual(spec.device, "cuda")
            self.assertTrue(spec.cuda_size_jitter)
            self.assertEqual(spec.preprocess().input_size, 300)
            self.assertEqual(spec.framework, "caffe")


if __name__ == "__main__":
    unittest.main()
