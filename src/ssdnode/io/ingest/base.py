from __future__ import annotations

from abc import ABC, abstractmethod

from ssdnode.types import ImageFrame


class ImageSource(ABC):
    @abstractmethod
    def read(self) -> ImageFrame | None:
        """Return the next image, or None once the source is exhausted."""

    @abstractmethod
    def name(self) -> str:
        """Stable source name for logging."""

    def close(self) -> None:
        """Release source resources."""
