from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from dynaconf import Dynaconf

from ssdnode.config.defaults import DEFAULT_CONFIG
from ssdnode.config.models import (
    DetectionConfig,
    ModelConfig,
    MonitoringConfig,
    OutputConfig,
    RuntimeConfig,
)
from ssdnode.detector.models.model_spec import ModelSpec

SINK_CHOICES = ("measures", "objects")
DEVICE_CHOICES = ("cpu", "cuda", "opencl")
# Raised by load_runtime_config for a missing config file or bad values.
CONFIG_ERRORS = (FileNotFoundError, RuntimeError, ValueError)
_CONFIG_NAMES = (
    "ssdnode.toml",
    "ssdnode.yaml",
    "ssdnode.yml",
    "ssdnode.json",
    "settings.toml",
    "settings.yaml",
    "settings.yml",
    "settings.json",
)


def _merge_dict(base: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value
    return base


def _lower_keys(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_lower_keys(item) for item in obj]
    return obj


def _load_with_dynaconf(config_paths: list[Path]) -> dict[str, Any]:
    settings = Dynaconf(
        envvar_prefix="SSDNODE",
        settings_files=[str(path) for path in config_paths],
        merge_enabled=True,
        environments=False,
        load_dotenv=True,
    )
    return _lower_keys(settings.as_dict())


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _resolve_repo_relative(path_value: str | None, repo_root: Path) -> str | None:
    if not path_value:
        return path_value
    p = Path(path_value).expanduser()
    if p.is_absolute():
        return str(p)
    return str((repo_root / p).resolve())


def _choice(value: Any, choices: tuple[str, ...], name: str) -> str:
    normalized = str(value).strip().lower()
    if normalized not in choices:
        raise RuntimeError(f"Unsupported {name}: {value!r} (expected one of {', '.join(choices)})")
    return normalized


def _normalize(data: dict[str, Any], repo_root: Path) -> RuntimeConfig:
    model_data = data.get("model", {})
    detection_data = data.get("detection", {})
    output_data = data.get("output", {})
    monitoring_data = data.get("monitoring", {})
    model_defaults = DEFAULT_CONFIG["model"]

    return RuntimeConfig(
        model=ModelConfig(
            name=str(model_data.get("name", model_defaults["name"])),
            structure_path=_resolve_repo_relative(
                model_data.get("structure_path", model_defaults["structure_path"]),
                repo_root,
            ),
            weights_path=_resolve_repo_relative(
                model_data.get("weights_path", model_defaults["weights_path"]),
                repo_root,
            ),
            labels_path=_resolve_repo_relative(
                model_data.get("labels_path", model_defaults["labels_path"]),
                repo_root,
            ),
            weights_url=model_data.get("weights_url") or None,
            framework=str(model_data.get("framework", "caffe")).lower(),
            device=_choice(model_data.get("device", "cpu"), DEVICE_CHOICES, "device"),
            input_size=int(model_data.get("input_size", 300)),
            scale_factor=float(model_data.get("scale_factor", 1.0 / 127.5)),
            mean=float(model_data.get("mean", 127.5)),
            cuda_size_jitter=_coerce_bool(model_data.get("cuda_size_jitter", False)),
        ),
        detection=DetectionConfig(
            confidence=float(detection_data.get("confidence", 0.5)),
            nms_threshold=float(detection_data.get("nms_threshold", 0.4)),
            suppress_overlaps=_coerce_bool(detection_data.get("suppress_overlaps", False)),
        ),
        output=OutputConfig(
            sink=_choice(output_data.get("sink", "measures"), SINK_CHOICES, "sink"),
            annotate_dir=_resolve_repo_relative(output_data.get("annotate_dir"), repo_root),
        ),
        monitoring=MonitoringConfig(
            json_logs=_coerce_bool(monitoring_data.get("json_logs", False)),
            log_level=str(monitoring_data.get("log_level", "INFO")).upper(),
            stats_interval_seconds=float(monitoring_data.get("stats_interval_seconds", 5.0)),
            prometheus_enabled=_coerce_bool(monitoring_data.get("prometheus_enabled", False)),
            prometheus_host=str(monitoring_data.get("prometheus_host", "0.0.0.0")),
            prometheus_port=int(monitoring_data.get("prometheus_port", 9108)),
            event_stdout=_coerce_bool(monitoring_data.get("event_stdout", True)),
            event_file=_resolve_repo_relative(monitoring_data.get("event_file"), repo_root),
        ),
    )


def _default_config_copy() -> dict[str, Any]:
    return json.loads(json.dumps(DEFAULT_CONFIG))


def load_runtime_config(
    repo_root: Path,
    config_path: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> RuntimeConfig:
    config_paths: list[Path] = []
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        config_paths.append(path)
    else:
        config_paths.extend(
            repo_root / name for name in _CONFIG_NAMES if (repo_root / name).exists()
        )

    merged = _default_config_copy()
    _merge_dict(merged, _load_with_dynaconf(config_paths))

    if cli_overrides:
        _merge_dict(merged, _lower_keys(cli_overrides))

    return _normalize(merged, repo_root)


def build_model_spec(config: RuntimeConfig) -> ModelSpec:
    model = config.model
    return ModelSpec(
        name=model.name,
        structure_path=model.structure_path,
        weights_path=model.weights_path,
        labels_path=model.labels_path,
        weights_url=model.weights_url,
        framework=model.framework,
        device=model.device,
        input_size=model.input_size,
        scale_factor=model.scale_factor,
        mean=model.mean,
        cuda_size_jitter=model.cuda_size_jitter,
    )


def runtime_config_to_dict(config: RuntimeConfig) -> dict[str, Any]:
    return asdict(config)
