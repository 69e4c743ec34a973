from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ssdnode.config import CONFIG_ERRORS, load_runtime_config, runtime_config_to_dict
from ssdnode.detector.errors import SSDNodeError
from ssdnode.monitoring import configure_logging


def _clean_overrides(payload: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in payload.items():
        if isinstance(value, dict):
            nested = _clean_overrides(value)
            if nested:
                cleaned[key] = nested
            continue
        if value is not None:
            cleaned[key] = value
    return cleaned


def build_detect_overrides(args: Any) -> dict[str, Any]:
    overrides = {
        "model": {
            "name": args.model_name,
            "structure_path": args.structure_path,
            "weights_path": args.weights_path,
            "labels_path": args.labels_path,
            "weights_url": args.weights_url,
            "device": args.device,
            "input_size": args.input_size,
            "cuda_size_jitter": (True if args.cuda_size_jitter else None),
        },
        "detection": {
            "confidence": args.confidence,
            "nms_threshold": args.nms,
            "suppress_overlaps": (True if args.suppress_overlaps else None),
        },
        "output": {
            "sink": args.sink,
            "annotate_dir": args.annotate_dir,
        },
        "monitoring": {
            "json_logs": (True if args.json_logs else None),
            "log_level": args.log_level,
            "prometheus_enabled": (True if args.prometheus else None),
            "prometheus_host": args.prometheus_host,
            "prometheus_port": args.prometheus_port,
            "event_stdout": (False if args.no_event_stdout else None),
            "event_file": args.event_file,
        },
    }
    return _clean_overrides(overrides)


def run_detect(args: Any, repo_root: Path) -> int:
    logger = logging.getLogger("ssdnode.detect")
    try:
        config = load_runtime_config(
            repo_root=repo_root,
            config_path=args.config,
            cli_overrides=build_detect_overrides(args),
        )
    except CONFIG_ERRORS as exc:
        logger.error("invalid configuration: %s", exc)
        return 2
    if args.quiet:
        config.monitoring.log_level = "WARNING"

    configure_logging(
        level=config.monitoring.log_level,
        json_logs=config.monitoring.json_logs,
    )

    logger.info("starting detect with config=%s", config.as_log_context())
    logger.debug("resolved config=%s", runtime_config_to_dict(config))

    try:
        from ssdnode.pipeline.runtime import DetectionRuntime

        runtime = DetectionRuntime(config=config)
        return runtime.run(args.input, grayscale=args.grayscale)
    except ModuleNotFoundError as exc:
        logger.error(
            "missing dependency: %s. Install requirements before running detect.",
            exc.name,
        )
        return 2
    except SSDNodeError as exc:
        logger.error("detect failed: %s", exc)
        return 1
