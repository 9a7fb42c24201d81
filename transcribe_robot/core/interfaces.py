"""
Abstract interfaces for all service providers
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from .models import ChangeFeedPage


class StorageProvider(ABC):
    """Abstract interface for durable key/blob storage"""

    @abstractmethod
    async def read(self, key: str) -> Optional[bytes]:
        """
        Read the blob stored under a key

        Args:
            key: Storage key

        Returns:
            Blob contents, or None if the key does not exist
        """
        pass

    @abstractmethod
    async def write(self, key: str, data: bytes) -> None:
        """
        Store a blob under a key, replacing any previous value

        Args:
            key: Storage key
            data: Blob contents
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a key

        Returns:
            True if the key existed and was deleted
        """
        pass

    @abstractmethod
    async def list_keys(self, prefix: str = "") -> list[str]:
        """
        List keys starting with a prefix

        Args:
            prefix: Key prefix to match

        Returns:
            Sorted list of keys
        """
        pass

    async def exists(self, key: str) -> bool:
        """Check if a key exists"""
        return await self.read(key) is not None


class DriveClient(ABC):
    """Abstract interface for the remote drive that owns the change feed"""

    @abstractmethod
    def latest_delta_url(self, resource_id: str) -> str:
        """
        Build the synthesized "latest" delta token for a resource

        Args:
            resource_id: Drive identifier

        Returns:
            Delta URL that starts from the current end of the feed
        """
        pass

    @abstractmethod
    async def fetch_delta_page(self, url: str) -> ChangeFeedPage:
        """
        Fetch one page of the delta feed

        Raises:
            CursorExpiredError: the remote service rejected the token
            DriveError: transport or remote failure
        """
        pass

    @abstractmethod
    async def get_item_fields(self, container_id: str, item_id: str) -> dict[str, Any]:
        """Read the custom metadata fields of an item"""
        pass

    @abstractmethod
    async def download_content(self, container_id: str, item_id: str) -> bytes:
        """Download the full byte content of an item"""
        pass

    @abstractmethod
    async def update_item_fields(
        self, container_id: str, item_id: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Write custom metadata fields of an item in a single update"""
        pass

    async def aclose(self) -> None:
        """Release any connections held by the client"""
        pass


class TranscriptionProvider(ABC):
    """Abstract interface for transcription providers"""

    @abstractmethod
    async def transcribe(self, audio: bytes, language_code: str) -> str:
        """
        Transcribe raw audio bytes

        Args:
            audio: Audio file contents
            language_code: Language code, e.g. "en-US"

        Returns:
            Transcript text

        Raises:
            TranscriptionError: non-successful response or missing result
        """
        pass

    @abstractmethod
    async def get_max_file_size(self) -> int:
        """
        Get maximum supported file size in bytes

        Returns:
            Maximum file size in bytes
        """
        pass


class TokenProvider(ABC):
    """Abstract interface for acquiring bearer tokens on behalf of an owner"""

    @abstractmethod
    async def get_access_token(self, owner_identity: str) -> str:
        """
        Get an access token for the given principal

        Raises:
            AuthenticationError: no usable credentials for the owner
        """
        pass
