"""
Local filesystem implementation of StorageProvider
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Optional

from ...core.exceptions import StorageError
from ...core.interfaces import StorageProvider
from ...core.logging import get_logger

logger = get_logger(__name__)


class LocalStorageProvider(StorageProvider):
    """
    Local filesystem implementation of storage provider
    Each key is stored as one file under the base directory
    """

    def __init__(self, base_path: Optional[str] = None):
        """
        Initialize local storage provider

        Args:
            base_path: Base directory for stored keys
        """
        self.base_path = Path(base_path) if base_path else Path.cwd() / "local_storage"
        self.base_path.mkdir(parents=True, exist_ok=True)

        logger.info(f"Initialized LocalStorageProvider: {self.base_path}")

    def _resolve_path(self, key: str) -> Path:
        """
        Resolve a key to a path within the base directory

        Args:
            key: Storage key

        Returns:
            Absolute Path object
        """
        clean_key = key.lstrip("/")
        if not clean_key:
            raise StorageError("Empty storage key")

        resolved = self.base_path / clean_key

        # Ensure path is within base directory
        try:
            resolved.resolve().relative_to(self.base_path.resolve())
        except ValueError:
            raise StorageError(f"Path outside base directory not allowed: {key}")

        return resolved

    async def read(self, key: str) -> Optional[bytes]:
        path = self._resolve_path(key)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Local read failed for {key}: {str(e)}")

    async def write(self, key: str, data: bytes) -> None:
        path = self._resolve_path(key)

        def _write():
            path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then atomically swap it in
            fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=path.suffix)
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(temp_path, path)
            except BaseException:
                Path(temp_path).unlink(missing_ok=True)
                raise

        try:
            await asyncio.to_thread(_write)
            logger.debug(f"Stored {len(data)} bytes at {path}")
        except OSError as e:
            raise StorageError(f"Local write failed for {key}: {str(e)}")

    async def delete(self, key: str) -> bool:
        path = self._resolve_path(key)
        try:
            await asyncio.to_thread(path.unlink)
            logger.info(f"Deleted local key: {key}")
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Local delete failed for {key}: {str(e)}")

    async def list_keys(self, prefix: str = "") -> list[str]:
        def _list():
            keys = []
            for path in self.base_path.rglob("*"):
                if not path.is_file() or path.name.startswith(".tmp-"):
                    continue
                key = path.relative_to(self.base_path).as_posix()
                if key.startswith(prefix.lstrip("/")):
                    keys.append(key)
            return sorted(keys)

        return await asyncio.to_thread(_list)
