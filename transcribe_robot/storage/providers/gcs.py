"""
Google Cloud Storage implementation of StorageProvider
"""

import asyncio
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ...core.exceptions import AuthenticationError, StorageError
from ...core.interfaces import StorageProvider
from ...core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for blocking GCS API calls
executor = ThreadPoolExecutor(max_workers=3)


class GCSStorageProvider(StorageProvider):
    """
    Google Cloud Storage implementation of storage provider
    Each key is stored as one blob in the bucket
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        bucket_name: Optional[str] = None,
        credentials_path: Optional[str] = None,
    ):
        """
        Initialize GCS storage provider

        Args:
            project_id: GCP project ID
            bucket_name: GCS bucket name
            credentials_path: Path to service account JSON file
        """
        self.project_id = project_id
        self.bucket_name = bucket_name
        self.credentials_path = credentials_path

        if not self.bucket_name:
            raise StorageError("Bucket name is required for GCS storage")

        self._initialize_client()

        logger.info(f"Initialized GCSStorageProvider: {self.project_id}/{self.bucket_name}")

    def _initialize_client(self):
        """Initialize Google Cloud Storage client"""
        try:
            from google.cloud import storage

            if self.credentials_path and os.path.exists(self.credentials_path):
                self.client = storage.Client.from_service_account_json(self.credentials_path)
            else:
                # Use default credentials (ADC)
                self.client = storage.Client(project=self.project_id)

            self.bucket = self.client.bucket(self.bucket_name)
            logger.info("GCS client initialized successfully")

        except Exception as e:
            raise AuthenticationError(f"Failed to initialize GCS client: {str(e)}")

    async def _run(self, func):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(executor, func)

    async def read(self, key: str) -> Optional[bytes]:
        from google.api_core.exceptions import NotFound

        def _read():
            try:
                return self.bucket.blob(key).download_as_bytes()
            except NotFound:
                return None

        try:
            return await self._run(_read)
        except Exception as e:
            raise StorageError(f"GCS read failed for {key}: {str(e)}")

    async def write(self, key: str, data: bytes) -> None:
        def _write():
            self.bucket.blob(key).upload_from_string(data, content_type="application/json")

        try:
            await self._run(_write)
            logger.debug(f"Uploaded {len(data)} bytes to gs://{self.bucket_name}/{key}")
        except Exception as e:
            raise StorageError(f"GCS write failed for {key}: {str(e)}")

    async def delete(self, key: str) -> bool:
        from google.api_core.exceptions import NotFound

        def _delete():
            try:
                self.bucket.blob(key).delete()
                return True
            except NotFound:
                return False

        try:
            deleted = await self._run(_delete)
        except Exception as e:
            raise StorageError(f"GCS delete failed for {key}: {str(e)}")

        if deleted:
            logger.info(f"Deleted gs://{self.bucket_name}/{key}")
        return deleted

    async def list_keys(self, prefix: str = "") -> list[str]:
        def _list():
            return sorted(blob.name for blob in self.client.list_blobs(self.bucket_name, prefix=prefix))

        try:
            return await self._run(_list)
        except Exception as e:
            raise StorageError(f"GCS list failed for {prefix}: {str(e)}")
