"""
In-process implementation of StorageProvider
"""

import asyncio
from typing import Optional

from ...core.interfaces import StorageProvider


class MemoryStorageProvider(StorageProvider):
    """Dictionary-backed storage for tests and dry runs"""

    def __init__(self, initial: Optional[dict[str, bytes]] = None):
        self._data: dict[str, bytes] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def read(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    async def write(self, key: str, data: bytes) -> None:
        async with self._lock:
            self._data[key] = bytes(data)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._data.pop(key, None) is not None

    async def list_keys(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))
