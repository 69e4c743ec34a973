from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class BoundingBox:
    """Pixel box using the inclusive extent convention (width = right - left + 1)."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width - 1

    @property
    def bottom(self) -> float:
        return self.top + self.height - 1

    def as_list(self) -> list[float]:
        return [self.left, self.top, self.width, self.height]


@dataclass(frozen=True)
class Detection:
    """One decoded object instance from a single frame."""

    index: int
    class_id: int
    label: str
    confidence: float
    box: BoundingBox
    color: tuple[int, int, int] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "class_id": self.class_id,
            "label": self.label,
            "confidence": self.confidence,
            "box": {
                "left": self.box.left,
                "top": self.box.top,
                "width": self.box.width,
                "height": self.box.height,
            },
            "color": list(self.color) if self.color is not None else None,
        }


@dataclass
class ImageFrame:
    """Image moved from an image source into the detection task."""

    frame_id: int
    image: Any
    source: str
    timestamp: datetime

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    @property
    def width(self) -> int:
        return int(self.image.shape[1])
