from __future__ import annotations

from abc import ABC, abstractmethod

from ssdnode.types import Detection


class DetectionSink(ABC):
    @abstractmethod
    def clear(self) -> None:
        """Drop results of the previous frame; called once per frame before any detection."""

    @abstractmethod
    def add_detection(self, detection: Detection) -> None:
        """Store or render one decoded detection."""

    @abstractmethod
    def name(self) -> str:
        """Stable sink name for logging."""

    def close(self) -> None:
        """Release sink resources."""


class FanOutSink(DetectionSink):
    def __init__(self, sinks: list[DetectionSink]) -> None:
        self._sinks = list(sinks)

    def clear(self) -> None:
        for sink in self._sinks:
            sink.clear()

    def add_detection(self, detection: Detection) -> None:
        for sink in self._sinks:
            sink.add_detection(detection)

    def close(self) -> None:
        for sink in self._sinks:
            sink.close()

    def name(self) -> str:
        return "+".join(sink.name() for sink in self._sinks)
