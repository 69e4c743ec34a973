from __future__ import annotations

import logging
from pathlib import Path

import cv2

from ssdnode.config.loader import build_model_spec
from ssdnode.config.models import RuntimeConfig
from ssdnode.config.params import NodeParameters
from ssdnode.detector.errors import ModelLoadFailure, SSDNodeError
from ssdnode.detector.network import NetworkSession
from ssdnode.io.ingest import ImageFileSource, MemoryImageSource
from ssdnode.io.output import (
    DetectionSink,
    FanOutSink,
    JsonEventSink,
    MeasuresSink,
    ObjectDetectionSink,
)
from ssdnode.monitoring import PeriodicStatsLogger, RuntimeMetrics
from ssdnode.pipeline.annotate import draw_detections
from ssdnode.pipeline.task import MobileNetSSDTask


def _build_result_sink(kind: str) -> DetectionSink:
    if kind == "objects":
        return ObjectDetectionSink()
    return MeasuresSink()


class DetectionRuntime:
    """Runs every image of a file or directory through one MobileNet-SSD task."""

    def __init__(
        self,
        config: RuntimeConfig,
        session: NetworkSession | None = None,
        metrics: RuntimeMetrics | None = None,
    ) -> None:
        self._config = config
        self._session = session or NetworkSession()
        self._metrics = metrics or RuntimeMetrics()
        self._logger = logging.getLogger("ssdnode.runtime")
        self.result_sink = _build_result_sink(config.output.sink)

    def _build_params(self) -> NodeParameters:
        detection = self._config.detection
        return NodeParameters(
            confidence=detection.confidence,
            nms_threshold=detection.nms_threshold,
            suppress_overlaps=detection.suppress_overlaps,
        )

    def run(self, input_uri: str, grayscale: bool = False) -> int:
        monitoring = self._config.monitoring
        if monitoring.prometheus_enabled:
            self._metrics.enable_prometheus(monitoring.prometheus_host, monitoring.prometheus_port)
            self._logger.info(
                "prometheus enabled host=%s port=%d",
                monitoring.prometheus_host,
                monitoring.prometheus_port,
            )

        files = ImageFileSource(input_uri, grayscale=grayscale)
        port = MemoryImageSource()
        events = JsonEventSink(stdout_enabled=monitoring.event_stdout, file_path=monitoring.event_file)
        sinks = [self.result_sink]
        if events.enabled():
            sinks.append(events)
        sink = FanOutSink(sinks)

        spec = build_model_spec(self._config)
        task = MobileNetSSDTask(
            source=port,
            sink=sink,
            model_spec=spec,
            params=self._build_params(),
            session=self._session,
            metrics=self._metrics,
        )
        stats = PeriodicStatsLogger(
            self._metrics,
            model_name=spec.name,
            device=spec.device,
            interval_seconds=monitoring.stats_interval_seconds,
        )
        annotate_dir = Path(self._config.output.annotate_dir) if self._config.output.annotate_dir else None
        if annotate_dir is not None:
            annotate_dir.mkdir(parents=True, exist_ok=True)

        self._logger.info("processing images=%d source=%s sink=%s", len(files), input_uri, sink.name())
        failures = 0
        try:
            while True:
                frame = files.read()
                if frame is None:
                    break
                port.set_image(frame.image, frame.source)
                events.set_context(source=frame.source)

                try:
                    detections = task.run()
                except ModelLoadFailure as exc:
                    self._logger.error("model load failed model=%s error=%s", spec.name, exc)
                    return 1
                except SSDNodeError as exc:
                    failures += 1
                    self._logger.error("frame failed source=%s error=%s", frame.source, exc)
                    continue

                self._logger.info(
                    "frame source=%s detections=%d labels=%s",
                    frame.source,
                    len(detections),
                    ",".join(det.label for det in detections),
                    extra={"context": {"source": frame.source, "detections": len(detections)}},
                )
                if annotate_dir is not None:
                    target = annotate_dir / f"{Path(frame.source).stem}.jpg"
                    cv2.imwrite(str(target), draw_detections(frame.image, detections))
                stats.maybe_emit()
        finally:
            sink.close()
            files.close()

        stats.maybe_emit(force=True)
        return 1 if failures else 0
