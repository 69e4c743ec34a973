from __future__ import annotations

import cv2
import numpy as np

from ssdnode.types import Detection


def suppress_overlaps(
    detections: list[Detection],
    confidence_threshold: float,
    nms_threshold: float,
) -> list[Detection]:
    """Drop overlapping boxes with ``cv2.dnn.NMSBoxes``, keeping tensor row order."""
    if not detections:
        return []

    boxes = [
        [det.box.left, det.box.top, det.box.width, det.box.height]
        for det in detections
    ]
    scores = [det.confidence for det in detections]
    idxs = cv2.dnn.NMSBoxes(boxes, scores, confidence_threshold, nms_threshold)
    if len(idxs) == 0:
        return []

    keep = set(np.array(idxs).flatten().tolist())
    return [det for position, det in enumerate(detections) if position in keep]
