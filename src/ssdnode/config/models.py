from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ModelConfig:
    name: str = "mobilenet-ssd"
    structure_path: str = "models/mobilenet_ssd/mobilenet_ssd.prototxt"
    weights_path: str = "models/mobilenet_ssd/mobilenet_ssd.caffemodel"
    labels_path: str = "models/mobilenet_ssd/pascal_voc_names.txt"
    weights_url: str | None = None
    framework: str = "caffe"
    device: str = "cpu"
    input_size: int = 300
    scale_factor: float = 1.0 / 127.5
    mean: float = 127.5
    cuda_size_jitter: bool = False


@dataclass
class DetectionConfig:
    confidence: float = 0.5
    nms_threshold: float = 0.4
    suppress_overlaps: bool = False


@dataclass
class OutputConfig:
    sink: str = "measures"
    annotate_dir: str | None = None


@dataclass
class MonitoringConfig:
    json_logs: bool = False
    log_level: str = "INFO"
    stats_interval_seconds: float = 5.0
    prometheus_enabled: bool = False
    prometheus_host: str = "0.0.0.0"
    prometheus_port: int = 9108
    event_stdout: bool = True
    event_file: str | None = None


@dataclass
class RuntimeConfig:
    model: ModelConfig = field(default_factory=ModelConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def as_log_context(self) -> dict[str, Any]:
        return {
            "model": self.model.name,
            "device": self.model.device,
            "input_size": self.model.input_size,
            "confidence": self.detection.confidence,
            "nms_threshold": self.detection.nms_threshold,
            "suppress_overlaps": self.detection.suppress_overlaps,
            "sink": self.output.sink,
            "json_logs": self.monitoring.json_logs,
        }
