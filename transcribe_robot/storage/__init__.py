"""
Durable storage backends for subscription state and token caches
"""

from .providers import GCSStorageProvider, LocalStorageProvider, MemoryStorageProvider

__all__ = [
    "GCSStorageProvider",
    "LocalStorageProvider",
    "MemoryStorageProvider",
]
