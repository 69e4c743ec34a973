from ssdnode.io.output.base import DetectionSink, FanOutSink
from ssdnode.io.output.events import JsonEventSink
from ssdnode.io.output.measures import MeasuresSink
from ssdnode.io.output.objects import ObjectDetectionSink

__all__ = [
    "DetectionSink",
    "FanOutSink",
    "JsonEventSink",
    "MeasuresSink",
    "ObjectDetectionSink",
]
