from __future__ import annotations

import unittest

import numpy as np

from fakes import FakeSession, model_spec, ssd_tensor
from ssdnode.config.params import NodeParameters
from ssdnode.detector.errors import InferenceFailure, InvalidInput, ModelLoadFailure
from ssdnode.io.ingest import MemoryImageSource
from ssdnode.io.output import DetectionSink, ObjectDetectionSink
from ssdnode.monitoring.metrics import RuntimeMetrics
from ssdnode.pipeline.task import PROGRESS_STEPS, MobileNetSSDTask, ProgressStep
from ssdnode.types import Detection


class _RecordingSink(DetectionSink):
    def __init__(self) -> None:
        self.calls: list[tuple[str, Detection | None]] = []

    def clear(self) -> None:
        self.calls.append(("clear", None))

    def add_detection(self, detection: Detection) -> None:
        self.calls.append(("add", detection))

    def name(self) -> str:
        return "recording"


def _scenario_tensor() -> np.ndarray:
    return ssd_tensor(
        [
            [7, 0.9, 0.0, 0.0, 0.5, 0.5],
            [2, 0.3, 0.1, 0.1, 0.4, 0.4],
        ]
    )


class MobileNetSSDTaskTests(unittest.TestCase):
    def _task(self, session: FakeSession, sink: DetectionSink, **kwargs) -> MobileNetSSDTask:
        source = kwargs.pop("source", MemoryImageSource(np.zeros((480, 640, 3), dtype=np.uint8)))
        return MobileNetSSDTask(
            source=source,
            sink=sink,
            model_spec=kwargs.pop("spec", model_spec()),
            session=session,
            **kwargs,
        )

    def test_run_emits_filtered_detections_to_sink(self) -> None:
        session = FakeSession(outputs=[_scenario_tensor()])
        sink = ObjectDetectionSink()
        steps: list[ProgressStep] = []

        detections = self._task(session, sink, progress=steps.append).run()

        self.assertEqual(len(detections), 1)
        self.assertEqual(len(sink.objects), 1)
        obj = sink.objects[0]
        self.assertEqual(obj.id, 0)
        self.assertEqual(obj.label, "car")
        self.assertEqual(obj.box.width, 321.0)
        self.assertEqual(obj.box.height, 241.0)
        self.assertEqual(obj.color, session.colors.resolve(7))
        self.assertEqual(
            steps,
            [ProgressStep.PRE_INFERENCE, ProgressStep.POST_INFERENCE, ProgressStep.POST_DECODE],
        )
        self.assertEqual(len(steps), PROGRESS_STEPS)

    def test_sink_is_cleared_before_detections(self) -> None:
        session = FakeSession(outputs=[_scenario_tensor()])
        sink = _RecordingSink()

        self._task(session, sink).run()

        self.assertEqual([name for name, _ in sink.calls], ["clear", "add"])

    def test_inference_failure_emits_nothing(self) -> None:
        session = FakeSession(outputs=[_scenario_tensor()])
        session.forward_error = InferenceFailure("engine exploded")
        sink = _RecordingSink()
        steps: list[ProgressStep] = []
        metrics = RuntimeMetrics()

        with self.assertRaises(InferenceFailure):
            self._task(session, sink, progress=steps.append, metrics=metrics).run()

        self.assertEqual(sink.calls, [])
        self.assertEqual(steps, [ProgressStep.PRE_INFERENCE])
        self.assertEqual(metrics.snapshot().failures, 1)

    def test_model_load_failure_propagates_and_retries_next_run(self) -> None:
        session = FakeSession(outputs=[_scenario_tensor()])
        session.load_error = ModelLoadFailure("cannot read caffemodel")
        sink = _RecordingSink()
        task = self._task(session, sink)

        with self.assertRaises(ModelLoadFailure):
            task.run()

        session.load_error = None
        self.assertEqual(len(task.run()), 1)

    def test_missing_image_is_invalid_input(self) -> None:
        session = FakeSession()
        sink = _RecordingSink()

        with self.assertRaises(InvalidInput):
            self._task(session, sink, source=MemoryImageSource()).run()

        self.assertEqual(session.loaded_specs, [])
        self.assertEqual(sink.calls, [])

    def test_empty_image_is_invalid_input(self) -> None:
        session = FakeSession()
        source = MemoryImageSource(np.zeros((0, 0, 3), dtype=np.uint8))

        with self.assertRaises(InvalidInput):
            self._task(session, _RecordingSink(), source=source).run()

    def test_colors_can_be_left_off(self) -> None:
        session = FakeSession(outputs=[_scenario_tensor()])
        sink = ObjectDetectionSink()

        self._task(session, sink, attach_colors=False).run()

        self.assertIsNone(sink.objects[0].color)

    def test_confidence_parameter_controls_filter(self) -> None:
        session = FakeSession(outputs=[_scenario_tensor()])
        sink = ObjectDetectionSink()

        task = self._task(session, sink, params=NodeParameters(confidence=0.25))
        self.assertEqual([det.index for det in task.run()], [0, 1])

        task.update_parameters(NodeParameters(confidence=0.95))
        self.assertEqual(task.run(), [])
        self.assertEqual(sink.objects, [])

    def test_nms_threshold_alone_does_not_change_output(self) -> None:
        tensor = ssd_tensor(
            [
                [15, 0.9, 0.10, 0.10, 0.50, 0.50],
                [15, 0.8, 0.11, 0.11, 0.51, 0.51],
            ]
        )
        session = FakeSession(outputs=[tensor])

        detections = self._task(
            session,
            ObjectDetectionSink(),
            params=NodeParameters(confidence=0.5, nms_threshold=0.1),
        ).run()

        self.assertEqual([det.index for det in detections], [0, 1])

    def test_suppress_overlaps_keeps_best_box(self) -> None:
        tensor = ssd_tensor(
            [
                [15, 0.8, 0.10, 0.10, 0.50, 0.50],
                [15, 0.9, 0.11, 0.11, 0.51, 0.51],
            ]
        )
        session = FakeSession(outputs=[tensor])

        detections = self._task(
            session,
            ObjectDetectionSink(),
            params=NodeParameters(confidence=0.5, nms_threshold=0.4, suppress_overlaps=True),
        ).run()

        self.assertEqual([det.index for det in detections], [1])

    def test_reconfigure_reloads_on_next_run(self) -> None:
        session = FakeSession(outputs=[_scenario_tensor()])
        metrics = RuntimeMetrics()
        task = self._task(session, ObjectDetectionSink(), metrics=metrics)

        task.run()
        task.run()
        task.reconfigure(model_spec(name="other", input_size=512))
        task.run()

        self.assertEqual([spec.name for spec in session.loaded_specs], ["test-ssd", "other"])
        self.assertEqual(metrics.snapshot().model_loads, 2)
        self.assertEqual(metrics.snapshot().frames, 3)

    def test_ports_are_checked_at_construction(self) -> None:
        with self.assertRaises(TypeError):
            MobileNetSSDTask(
                source=object(),  # type: ignore[arg-type]
                sink=ObjectDetectionSink(),
                model_spec=model_spec(),
                session=FakeSession(),
            )


if __name__ == "__main__":
    unittest.main()
