from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ssdnode.config import CONFIG_ERRORS, load_runtime_config
from ssdnode.detector.errors import ResourceUnavailable
from ssdnode.detector.labels import LabelTable


def run_labels(args: Any, repo_root: Path) -> int:
    overrides = {"model": {"labels_path": args.labels_path}} if args.labels_path else None
    try:
        config = load_runtime_config(repo_root=repo_root, config_path=args.config, cli_overrides=overrides)
    except CONFIG_ERRORS as exc:
        logging.getLogger("ssdnode.labels").error("invalid configuration: %s", exc)
        return 2

    try:
        table = LabelTable.from_file(config.model.labels_path)
    except ResourceUnavailable as exc:
        print(str(exc))
        return 1

    if args.json:
        print(json.dumps({"labels_path": config.model.labels_path, "labels": list(table)}, indent=2))
        return 0

    for class_id, label in enumerate(table):
        print(f"{class_id:3d}  {label}")
    return 0
