from __future__ import annotations


DEFAULT_CONFIG: dict = {
    "model": {
        "name": "mobilenet-ssd",
        "structure_path": "models/mobilenet_ssd/mobilenet_ssd.prototxt",
        "weights_path": "models/mobilenet_ssd/mobilenet_ssd.caffemodel",
        "labels_path": "models/mobilenet_ssd/pascal_voc_names.txt",
        "weights_url": None,
        "framework": "caffe",
        "device": "cpu",
        "input_size": 300,
        "scale_factor": 1.0 / 127.5,
        "mean": 127.5,
        "cuda_size_jitter": False,
    },
    "detection": {
        "confidence": 0.5,
        "nms_threshold": 0.4,
        "suppress_overlaps": False,
    },
    "output": {
        "sink": "measures",
        "annotate_dir": None,
    },
    "monitoring": {
        "json_logs": False,
        "log_level": "INFO",
        "stats_interval_seconds": 5.0,
        "prometheus_enabled": False,
        "prometheus_host": "0.0.0.0",
        "prometheus_port": 9108,
        "event_stdout": True,
        "event_file": None,
    },
}
