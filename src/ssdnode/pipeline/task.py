from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from ssdnode.config.params import NodeParameters
from ssdnode.detector.decoder import decode_detections
from ssdnode.detector.errors import InferenceFailure, InvalidInput, SSDNodeError
from ssdnode.detector.models.model_spec import ModelSpec
from ssdnode.detector.network import NetworkSession
from ssdnode.detector.suppression import suppress_overlaps
from ssdnode.io.ingest.base import ImageSource
from ssdnode.io.output.base import DetectionSink
from ssdnode.monitoring.metrics import RuntimeMetrics
from ssdnode.types import Detection, ImageFrame

PROGRESS_STEPS = 3


class ProgressStep(str, Enum):
    PRE_INFERENCE = "pre-inference"
    POST_INFERENCE = "post-inference"
    POST_DECODE = "post-decode"


class MobileNetSSDTask:
    """One MobileNet-SSD node: image port in, detections out to a sink.

    A run either emits every decoded detection or nothing at all: the sink is
    only cleared and fed after the forward pass and decoding both succeed.
    """

    def __init__(
        self,
        source: ImageSource,
        sink: DetectionSink,
        model_spec: ModelSpec,
        params: NodeParameters | None = None,
        session: NetworkSession | None = None,
        progress: Callable[[ProgressStep], None] | None = None,
        metrics: RuntimeMetrics | None = None,
        attach_colors: bool = True,
    ) -> None:
        if not isinstance(source, ImageSource):
            raise TypeError(f"source must be an ImageSource, got {type(source).__name__}")
        if not isinstance(sink, DetectionSink):
            raise TypeError(f"sink must be a DetectionSink, got {type(sink).__name__}")

        self._source = source
        self._sink = sink
        self._model_spec = model_spec
        self._params = params or NodeParameters()
        self._session = session or NetworkSession()
        self._progress = progress
        self._metrics = metrics
        self._attach_colors = attach_colors
        self._logger = logging.getLogger("ssdnode.task")
        self.last_frame: ImageFrame | None = None

    @property
    def session(self) -> NetworkSession:
        return self._session

    @property
    def params(self) -> NodeParameters:
        return self._params

    def update_parameters(self, params: NodeParameters) -> None:
        self._params = params

    def reconfigure(self, model_spec: ModelSpec) -> None:
        """Swap the model; the session reloads at the start of the next run."""
        self._model_spec = model_spec

    def run(self) -> list[Detection]:
        try:
            return self._run()
        except SSDNodeError as exc:
            if self._metrics is not None:
                self._metrics.mark_failure(type(exc).__name__)
            raise

    def _run(self) -> list[Detection]:
        frame = self._source.read()
        if frame is None or frame.image is None or getattr(frame.image, "size", 0) == 0:
            raise InvalidInput("Empty image")
        self._notify(ProgressStep.PRE_INFERENCE)

        previous = self._session.handle
        handle = self._session.ensure_loaded(self._model_spec)
        if handle is not previous and self._metrics is not None:
            self._metrics.mark_model_load()

        started = time.perf_counter()
        outputs = self._session.forward(frame.image)
        infer_seconds = time.perf_counter() - started
        if not outputs:
            raise InferenceFailure("Network returned no output")
        self._notify(ProgressStep.POST_INFERENCE)

        detections = decode_detections(
            outputs[0],
            frame.width,
            frame.height,
            self._params.confidence,
            self._session.labels,
            self._session.colors if self._attach_colors else None,
        )
        if self._params.suppress_overlaps:
            detections = suppress_overlaps(
                detections,
                self._params.confidence,
                self._params.nms_threshold,
            )

        self._sink.clear()
        for detection in detections:
            self._sink.add_detection(detection)
        self._notify(ProgressStep.POST_DECODE)

        if self._metrics is not None:
            self._metrics.mark_frame(infer_seconds, len(detections))
        self._logger.debug(
            "frame=%d source=%s detections=%d infer_ms=%.1f",
            frame.frame_id,
            frame.source,
            len(detections),
            infer_seconds * 1000.0,
        )
        self.last_frame = frame
        return detections

    def _notify(self, step: ProgressStep) -> None:
        if self._progress is not None:
            self._progress(step)
