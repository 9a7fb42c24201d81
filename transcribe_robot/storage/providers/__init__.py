"""
Storage provider implementations
"""

from .gcs import GCSStorageProvider
from .local import LocalStorageProvider
from .memory import MemoryStorageProvider

__all__ = [
    "GCSStorageProvider",
    "LocalStorageProvider",
    "MemoryStorageProvider",
]
