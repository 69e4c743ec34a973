from __future__ import annotations

from typing import Any

import cv2
import numpy as np

from ssdnode.detector.colors import FALLBACK_COLOR
from ssdnode.detector.network import ensure_color_image
from ssdnode.io.output.measures import TEXT_OFFSET, format_caption
from ssdnode.types import Detection


def _bgr(color: tuple[int, int, int] | None) -> tuple[int, int, int]:
    r, g, b = color if color is not None else FALLBACK_COLOR
    return int(b), int(g), int(r)


def draw_detections(image: Any, detections: list[Detection]) -> np.ndarray:
    """Return a BGR copy of ``image`` with boxes and captions drawn on it."""
    canvas = ensure_color_image(image).copy()
    for detection in detections:
        box = detection.box
        color = _bgr(detection.color)
        top_left = (int(round(box.left)), int(round(box.top)))
        bottom_right = (int(round(box.right)), int(round(box.bottom)))
        cv2.rectangle(canvas, top_left, bottom_right, color, 2)
        cv2.putText(
            canvas,
            format_caption(detection),
            (top_left[0] + TEXT_OFFSET, top_left[1] + TEXT_OFFSET + 12),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            color,
            1,
            cv2.LINE_AA,
        )
    return canvas
