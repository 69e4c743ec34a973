from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import cv2

from ssdnode.detector.errors import InvalidInput
from ssdnode.io.ingest.base import ImageSource
from ssdnode.types import ImageFrame

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".tif", ".tiff", ".webp"}


class ImageFileSource(ImageSource):
    """Reads a single image file or every image under a directory, in sorted order."""

    def __init__(self, uri: str | Path, grayscale: bool = False) -> None:
        path = Path(uri)
        if path.is_dir():
            self._entries = sorted(
                p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
            )
        elif path.is_file():
            self._entries = [path]
        else:
            raise InvalidInput(f"Input not found: {path}")

        self._flags = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
        self._index = 0
        self._frame_id = 0
        self._logger = logging.getLogger("ssdnode.ingest")

    def __len__(self) -> int:
        return len(self._entries)

    def read(self) -> ImageFrame | None:
        while self._index < len(self._entries):
            path = self._entries[self._index]
            self._index += 1
            image = cv2.imread(str(path), self._flags)
            if image is None:
                self._logger.warning("skipping unreadable image path=%s", path)
                continue
            self._frame_id += 1
            return ImageFrame(
                frame_id=self._frame_id,
                image=image,
                source=str(path),
                timestamp=datetime.now(timezone.utc),
            )
        return None

    def name(self) -> str:
        return "files"
