from __future__ import annotations

import logging
import time

from ssdnode.monitoring.metrics import RuntimeMetrics


class PeriodicStatsLogger:
    def __init__(
        self,
        metrics: RuntimeMetrics,
        model_name: str,
        device: str,
        interval_seconds: float = 5.0,
    ) -> None:
        self._metrics = metrics
        self._model_name = model_name
        self._device = device
        self._interval_seconds = max(0.5, interval_seconds)
        self._next_emit = time.monotonic() + self._interval_seconds
        self._logger = logging.getLogger("ssdnode.stats")

    def maybe_emit(self, force: bool = False) -> None:
        now = time.monotonic()
        if not force and now < self._next_emit:
            return

        snapshot = self._metrics.snapshot()
        self._logger.info(
            "stats frames=%d detections=%d failures=%d fps_infer=%.2f last_infer_ms=%.1f model_loads=%d model=%s device=%s",
            snapshot.frames,
            snapshot.detections,
            snapshot.failures,
            snapshot.fps_infer,
            snapshot.last_infer_ms,
            snapshot.model_loads,
            self._model_name,
            self._device,
        )
        self._next_emit = now + self._interval_seconds
