from __future__ import annotations

from typing import Any

import numpy as np

from ssdnode.detector.colors import ColorTable
from ssdnode.detector.errors import InvalidInput, InvalidTensorShape
from ssdnode.detector.labels import LabelTable
from ssdnode.types import BoundingBox, Detection

# Row layout: [batch_id, class_id, confidence, left, top, right, bottom]
_ROW_WIDTH = 7
_CLASS_ID = 1
_CONFIDENCE = 2
_LEFT, _TOP, _RIGHT, _BOTTOM = 3, 4, 5, 6


def validate_output_shape(tensor: Any) -> np.ndarray:
    array = np.asarray(tensor)
    if array.ndim != 4:
        raise InvalidTensorShape(f"expected a 4-d output tensor, got shape {array.shape}")
    if array.shape[0] != 1 or array.shape[1] != 1 or array.shape[3] != _ROW_WIDTH:
        raise InvalidTensorShape(
            f"expected output shape [1, 1, N, {_ROW_WIDTH}], got {list(array.shape)}"
        )
    return array


def decode_detections(
    tensor: Any,
    image_width: int,
    image_height: int,
    confidence_threshold: float,
    labels: LabelTable,
    colors: ColorTable | None = None,
) -> list[Detection]:
    """Decode an SSD ``DetectionOutput`` blob into pixel-space detections.

    Rows are visited in tensor order and kept only when their confidence is
    strictly above ``confidence_threshold``. Normalized corners are scaled by
    the source image size and the box extent is inclusive of both corners.
    ``Detection.index`` is the row position, so filtered rows leave gaps.
    """
    array = validate_output_shape(tensor)
    if image_width <= 0 or image_height <= 0:
        raise InvalidInput(f"image dimensions must be positive, got {image_width}x{image_height}")

    rows = array[0, 0]
    detections: list[Detection] = []
    for i in range(rows.shape[0]):
        row = rows[i]
        confidence = float(row[_CONFIDENCE])
        # Written as a negated ">" so NaN confidences are dropped.
        if not confidence > confidence_threshold:
            continue

        class_id = int(round(float(row[_CLASS_ID])))
        left = float(row[_LEFT]) * image_width
        top = float(row[_TOP]) * image_height
        right = float(row[_RIGHT]) * image_width
        bottom = float(row[_BOTTOM]) * image_height

        detections.append(
            Detection(
                index=i,
                class_id=class_id,
                label=labels.resolve(class_id),
                confidence=confidence,
                box=BoundingBox(
                    left=left,
                    top=top,
                    width=right - left + 1,
                    height=bottom - top + 1,
                ),
                color=colors.resolve(class_id) if colors is not None else None,
            )
        )

    return detections

