from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ssdnode.io.ingest.base import ImageSource
from ssdnode.types import ImageFrame


class MemoryImageSource(ImageSource):
    """Input port fed directly by the host with one image per run."""

    def __init__(self, image: Any = None, source: str = "memory") -> None:
        self._image = image
        self._source = source
        self._frame_id = 0

    def set_image(self, image: Any, source: str | None = None) -> None:
        self._image = image
        if source is not None:
            self._source = source

    def read(self) -> ImageFrame | None:
        if self._image is None:
            return None
        self._frame_id += 1
        return ImageFrame(
            frame_id=self._frame_id,
            image=self._image,
            source=self._source,
            timestamp=datetime.now(timezone.utc),
        )

    def name(self) -> str:
        return "memory"
