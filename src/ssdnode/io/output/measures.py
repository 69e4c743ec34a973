from __future__ import annotations

from dataclasses import dataclass, field

from ssdnode.io.output.base import DetectionSink
from ssdnode.types import Detection

CONFIDENCE_MEASURE = "Confidence"
BBOX_MEASURE = "BBox"
TEXT_OFFSET = 5


@dataclass
class RectangleGraphic:
    id: int
    left: float
    top: float
    width: float
    height: float
    color: tuple[int, int, int] | None = None


@dataclass
class TextGraphic:
    id: int
    text: str
    x: float
    y: float
    color: tuple[int, int, int] | None = None


@dataclass
class MeasureRow:
    name: str
    values: list[float]
    graphic_id: int
    label: str


@dataclass
class GraphicsLayer:
    name: str
    image_index: int = 0
    rectangles: list[RectangleGraphic] = field(default_factory=list)
    texts: list[TextGraphic] = field(default_factory=list)


def format_caption(detection: Detection) -> str:
    return f"{detection.label} : {detection.confidence:.6f}"


class MeasuresSink(DetectionSink):
    """Graphics overlay plus a measurements table, one box and two rows per detection."""

    def __init__(self, layer_name: str = "MobileNet SSD") -> None:
        self._layer_name = layer_name
        self._next_graphic_id = 0
        self.layer = GraphicsLayer(name=layer_name)
        self.measures: list[MeasureRow] = []

    def clear(self) -> None:
        self.layer = GraphicsLayer(name=self._layer_name)
        self.measures = []

    def add_detection(self, detection: Detection) -> None:
        box = detection.box
        rect = RectangleGraphic(
            id=self._new_graphic_id(),
            left=box.left,
            top=box.top,
            width=box.width,
            height=box.height,
            color=detection.color,
        )
        self.layer.rectangles.append(rect)
        self.layer.texts.append(
            TextGraphic(
                id=self._new_graphic_id(),
                text=format_caption(detection),
                x=box.left + TEXT_OFFSET,
                y=box.top + TEXT_OFFSET,
                color=detection.color,
            )
        )
        self.measures.append(
            MeasureRow(CONFIDENCE_MEASURE, [detection.confidence], rect.id, detection.label)
        )
        self.measures.append(MeasureRow(BBOX_MEASURE, box.as_list(), rect.id, detection.label))

    def _new_graphic_id(self) -> int:
        graphic_id = self._next_graphic_id
        self._next_graphic_id += 1
        return graphic_id

    def name(self) -> str:
        return "measures"
