from __future__ import annotations

from dataclasses import dataclass

from ssdnode.detector.errors import InvalidInput


def _unit_interval(name: str, value: float) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise InvalidInput(f"{name} must be within [0, 1], got {value}")
    return value


@dataclass
class NodeParameters:
    """User-facing node parameters exchanged with the host as a string map.

    ``nms_threshold`` is carried for hosts that expose it, but the decoder
    does not apply it. Overlap suppression only runs when
    ``suppress_overlaps`` is switched on.
    """

    confidence: float = 0.5
    nms_threshold: float = 0.4
    suppress_overlaps: bool = False

    def __post_init__(self) -> None:
        self.confidence = _unit_interval("confidence", self.confidence)
        self.nms_threshold = _unit_interval("nmsThreshold", self.nms_threshold)

    def to_param_map(self) -> dict[str, str]:
        return {
            "confidence": str(self.confidence),
            "nmsThreshold": str(self.nms_threshold),
            "suppressOverlaps": str(self.suppress_overlaps),
        }

    @classmethod
    def from_param_map(cls, param_map: dict[str, str]) -> NodeParameters:
        try:
            confidence = float(param_map["confidence"])
            nms_threshold = float(param_map["nmsThreshold"])
        except KeyError as exc:
            raise InvalidInput(f"Missing parameter: {exc.args[0]}") from exc
        except ValueError as exc:
            raise InvalidInput(f"Invalid parameter value: {exc}") from exc

        suppress = str(param_map.get("suppressOverlaps", "False")).strip().lower()
        return cls(
            confidence=confidence,
            nms_threshold=nms_threshold,
            suppress_overlaps=suppress in {"1", "true", "yes", "on"},
        )
