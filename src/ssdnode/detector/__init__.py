from ssdnode.detector.colors import FALLBACK_COLOR, ColorTable
from ssdnode.detector.decoder import decode_detections, validate_output_shape
from ssdnode.detector.errors import (
    InferenceFailure,
    InvalidInput,
    InvalidTensorShape,
    ModelLoadFailure,
    ResourceUnavailable,
    SSDNodeError,
)
from ssdnode.detector.labels import LabelTable
from ssdnode.detector.network import NetworkHandle, NetworkSession, SessionState

__all__ = [
    "FALLBACK_COLOR",
    "ColorTable",
    "LabelTable",
    "NetworkHandle",
    "NetworkSession",
    "SessionState",
    "decode_detections",
    "validate_output_shape",
    "SSDNodeError",
    "InvalidInput",
    "ModelLoadFailure",
    "ResourceUnavailable",
    "InferenceFailure",
    "InvalidTensorShape",
]
