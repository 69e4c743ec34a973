from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

import cv2
import numpy as np

from fakes import FakeSession, ssd_tensor
from ssdnode.config.models import RuntimeConfig
from ssdnode.detector.errors import ResourceUnavailable
from ssdnode.io.output import MeasuresSink, ObjectDetectionSink
from ssdnode.monitoring.metrics import RuntimeMetrics
from ssdnode.pipeline.runtime import DetectionRuntime


class DetectionRuntimeTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self._tmpdir.name)
        self.images = self.root / "images"
        self.images.mkdir()
        for name in ("a.png", "b.png"):
            cv2.imwrite(str(self.images / name), np.full((48, 64, 3), 90, dtype=np.uint8))

    def tearDown(self) -> None:
        self._tmpdir.cleanup()

    def _config(self) -> RuntimeConfig:
        config = RuntimeConfig()
        config.monitoring.event_stdout = False
        config.monitoring.event_file = str(self.root / "events.jsonl")
        config.output.annotate_dir = str(self.root / "annotated")
        return config

    def test_every_image_is_processed_and_recorded(self) -> None:
        session = FakeSession(outputs=[ssd_tensor([[8, 0.9, 0.0, 0.0, 0.5, 0.5]])])
        metrics = RuntimeMetrics()
        runtime = DetectionRuntime(config=self._config(), session=session, metrics=metrics)

        exit_code = runtime.run(str(self.images))

        self.assertEqual(exit_code, 0)
        self.assertEqual(len(session.forward_images), 2)
        self.assertEqual(metrics.snapshot().frames, 2)
        self.assertIsInstance(runtime.result_sink, MeasuresSink)
        self.assertEqual(len(runtime.result_sink.layer.rectangles), 1)

        rows = [
            json.loads(line)
            for line in (self.root / "events.jsonl").read_text(encoding="utf-8").splitlines()
        ]
        self.assertEqual([row["frame"] for row in rows], [1, 2])
        self.assertEqual(rows[0]["label"], "cat")
        self.assertTrue(rows[0]["source"].endswith("a.png"))
        self.assertTrue((self.root / "annotated" / "a.jpg").is_file())
        self.assertTrue((self.root / "annotated" / "b.jpg").is_file())

    def test_objects_sink_selected_from_config(self) -> None:
        config = self._config()
        config.output.sink = "objects"
        runtime = DetectionRuntime(config=config, session=FakeSession())

        self.assertIsInstance(runtime.result_sink, ObjectDetectionSink)

    def test_model_load_failure_stops_with_error_code(self) -> None:
        session = FakeSession()
        session.load_error = ResourceUnavailable("Model weights missing")
        runtime = DetectionRuntime(config=self._config(), session=session)

        self.assertEqual(runtime.run(str(self.images)), 1)
        self.assertEqual(session.forward_images, [])

    def test_grayscale_images_reach_the_session_single_channel(self) -> None:
        session = FakeSession()
        runtime = DetectionRuntime(config=self._config(), session=session)

        runtime.run(str(self.images / "a.png"), grayscale=True)

        self.assertEqual(session.forward_images[0].ndim, 2)


if __name__ == "__main__":
    unittest.main()
