from ssdnode.types import BoundingBox, Detection, ImageFrame

__all__ = ["BoundingBox", "Detection", "ImageFrame"]

__version__ = "1.0.0"
