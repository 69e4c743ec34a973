from ssdnode.config.loader import (
    CONFIG_ERRORS,
    build_model_spec,
    load_runtime_config,
    runtime_config_to_dict,
)
from ssdnode.config.models import RuntimeConfig
from ssdnode.config.params import NodeParameters

__all__ = [
    "CONFIG_ERRORS",
    "NodeParameters",
    "RuntimeConfig",
    "build_model_spec",
    "load_runtime_config",
    "runtime_config_to_dict",
]
