"""Random wallpaper sources behind one asynchronous contract."""

from .adapters import NullAdapter, SourceAdapter, deliver, get_adapter, get_available_adapters
from .models import AdapterError, ImageRecord, SourceMetadata

__all__ = [
    "AdapterError",
    "ImageRecord",
    "NullAdapter",
    "SourceAdapter",
    "SourceMetadata",
    "deliver",
    "get_adapter",
    "get_available_adapters",
]
