from __future__ import annotations

import threading
import time
from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, start_http_server


@dataclass
class MetricsSnapshot:
    fps_infer: float
    frames: int
    detections: int
    failures: int
    last_infer_ms: float
    model_loads: int


class RuntimeMetrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._lock = threading.Lock()
        self._start = time.monotonic()
        self._frames = 0
        self._detections = 0
        self._failures = 0
        self._model_loads = 0
        self._last_infer_ms = 0.0

        self._registry = registry
        self._prometheus_started = False
        self._prometheus: dict | None = None

    def enable_prometheus(self, host: str, port: int) -> bool:
        if self._prometheus_started:
            return True

        registry = self._registry or CollectorRegistry()
        self._prometheus = {
            "frames": Counter("ssdnode_frames_total", "Frames run through the detector", registry=registry),
            "detections": Counter("ssdnode_detections_total", "Detections emitted to the sink", registry=registry),
            "failures": Counter(
                "ssdnode_failures_total",
                "Frames aborted by an error",
                ["kind"],
                registry=registry,
            ),
            "model_loads": Counter("ssdnode_model_loads_total", "Network (re)loads", registry=registry),
            "infer_seconds": Histogram(
                "ssdnode_inference_seconds",
                "Forward pass latency",
                registry=registry,
            ),
            "last_detections": Gauge(
                "ssdnode_last_frame_detections",
                "Detections in the most recent frame",
                registry=registry,
            ),
        }
        if port > 0:
            start_http_server(port, addr=host, registry=registry)
        self._prometheus_started = True
        return True

    def mark_frame(self, infer_seconds: float, detections: int) -> None:
        with self._lock:
            self._frames += 1
            self._detections += detections
            self._last_infer_ms = max(0.0, infer_seconds * 1000.0)
            if self._prometheus:
                self._prometheus["frames"].inc()
                self._prometheus["detections"].inc(detections)
                self._prometheus["infer_seconds"].observe(max(0.0, infer_seconds))
                self._prometheus["last_detections"].set(detections)

    def mark_failure(self, kind: str) -> None:
        with self._lock:
            self._failures += 1
            if self._prometheus:
                self._prometheus["failures"].labels(kind=kind).inc()

    def mark_model_load(self) -> None:
        with self._lock:
            self._model_loads += 1
            if self._prometheus:
                self._prometheus["model_loads"].inc()

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            elapsed = max(1e-6, time.monotonic() - self._start)
            return MetricsSnapshot(
                fps_infer=self._frames / elapsed,
                frames=self._frames,
                detections=self._detections,
                failures=self._failures,
                last_infer_ms=self._last_infer_ms,
                model_loads=self._model_loads,
            )
