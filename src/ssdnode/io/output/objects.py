from __future__ import annotations

from dataclasses import dataclass

from ssdnode.io.output.base import DetectionSink
from ssdnode.types import BoundingBox, Detection


@dataclass(frozen=True)
class DetectedObject:
    id: int
    label: str
    confidence: float
    box: BoundingBox
    color: tuple[int, int, int] | None


class ObjectDetectionSink(DetectionSink):
    def __init__(self) -> None:
        self._objects: list[DetectedObject] = []

    def clear(self) -> None:
        self._objects = []

    def add_detection(self, detection: Detection) -> None:
        self._objects.append(
            DetectedObject(
                id=detection.index,
                label=detection.label,
                confidence=detection.confidence,
                box=detection.box,
                color=detection.color,
            )
        )

    @property
    def objects(self) -> list[DetectedObject]:
        return list(self._objects)

    def name(self) -> str:
        return "objects"
