from ssdnode.io.ingest.base import ImageSource
from ssdnode.io.ingest.files import ImageFileSource
from ssdnode.io.ingest.memory import MemoryImageSource

__all__ = ["ImageSource", "ImageFileSource", "MemoryImageSource"]
