from __future__ import annotations

import logging
from pathlib import Path

import requests

from ssdnode.detector.errors import ResourceUnavailable

_CHUNK_SIZE = 1 << 20


def ensure_weights(path: str | Path, url: str | None, timeout: float = 60.0) -> Path:
    """Return ``path``, downloading it from ``url`` first if the file is missing."""
    target = Path(path)
    if target.is_file():
        return target
    if not url:
        raise ResourceUnavailable(f"Model weights missing: {target}")

    logger = logging.getLogger("ssdnode.download")
    logger.info("downloading weights url=%s target=%s", url, target)

    target.parent.mkdir(parents=True, exist_ok=True)
    partial = target.with_name(target.name + ".part")
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with partial.open("wb") as handle:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if chunk:
                        handle.write(chunk)
    except requests.RequestException as exc:
        partial.unlink(missing_ok=True)
        raise ResourceUnavailable(f"Failed to download model weights from {url}: {exc}") from exc

    partial.replace(target)
    logger.info("weights downloaded target=%s bytes=%d", target, target.stat().st_size)
    return target
