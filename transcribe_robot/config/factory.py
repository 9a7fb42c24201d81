"""
Service factory for creating configured service instances
"""

from functools import partial
from typing import Any, Optional

from ..core.exceptions import ConfigurationError
from ..core.interfaces import DriveClient, StorageProvider, TokenProvider, TranscriptionProvider
from ..core.logging import get_logger
from ..core.models import SubscriptionRecord
from ..drive.graph import GraphDriveClient
from ..pipeline.processor import FileProcessor
from ..security.token_cache import CachedTokenProvider, StaticTokenProvider
from ..storage.providers import GCSStorageProvider, LocalStorageProvider, MemoryStorageProvider
from ..transcription.languages import LanguageTable
from ..transcription.providers import OpenAITranscriptionProvider, SpeechServiceProvider
from ..transcription.service import TranscriptionService
from ..webhook.service import WebhookService
from ..webhook.state import SubscriptionStore
from ..webhook.walker import DeltaFeedWalker
from .settings import Settings

logger = get_logger(__name__)


class ServiceFactory:
    """
    Factory for creating configured service instances
    """

    # Registry of available providers
    STORAGE_PROVIDERS = {
        "gcs": GCSStorageProvider,
        "local": LocalStorageProvider,
        "memory": MemoryStorageProvider,
    }

    TRANSCRIPTION_PROVIDERS = {
        "speech": SpeechServiceProvider,
        "openai": OpenAITranscriptionProvider,
    }

    TOKEN_PROVIDERS = {
        "cached": CachedTokenProvider,
        "static": StaticTokenProvider,
    }

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize service factory

        Args:
            settings: Configuration settings, uses environment if None
        """
        self.settings = settings or Settings.from_env()
        self._storage: Optional[StorageProvider] = None
        self._token_provider: Optional[TokenProvider] = None
        logger.info(f"ServiceFactory initialized for environment {self.settings.environment}")

    def create_storage_provider(self, provider_name: Optional[str] = None) -> StorageProvider:
        """
        Create a storage provider instance

        Args:
            provider_name: Provider name, uses default from settings if None

        Returns:
            Configured StorageProvider instance
        """
        provider_name = provider_name or self.settings.storage_provider

        if provider_name not in self.STORAGE_PROVIDERS:
            available = ", ".join(self.STORAGE_PROVIDERS.keys())
            raise ConfigurationError(f"Unknown storage provider: {provider_name}. Available: {available}")

        config = self.settings.get_storage_config(provider_name)
        if not config.enabled:
            raise ConfigurationError(f"Storage provider '{provider_name}' is disabled")

        provider_class = self.STORAGE_PROVIDERS[provider_name]

        try:
            if provider_name == "gcs":
                return provider_class(
                    project_id=config.get("project_id"),
                    bucket_name=config.get("bucket_name"),
                    credentials_path=config.get("credentials_path"),
                )
            elif provider_name == "local":
                return provider_class(base_path=config.get("base_path"))
            else:
                return provider_class(**config.config)

        except Exception as e:
            logger.error(f"Failed to create storage provider '{provider_name}': {str(e)}")
            raise ConfigurationError(f"Storage provider creation failed: {str(e)}")

    def get_storage_provider(self) -> StorageProvider:
        """Shared storage provider for subscription state and token caches"""
        if self._storage is None:
            self._storage = self.create_storage_provider()
        return self._storage

    def create_transcription_provider(self, provider_name: Optional[str] = None) -> TranscriptionProvider:
        """
        Create a transcription provider instance

        Args:
            provider_name: Provider name, uses default from settings if None

        Returns:
            Configured TranscriptionProvider instance
        """
        provider_name = provider_name or self.settings.transcription_provider

        if provider_name not in self.TRANSCRIPTION_PROVIDERS:
            available = ", ".join(self.TRANSCRIPTION_PROVIDERS.keys())
            raise ConfigurationError(
                f"Unknown transcription provider: {provider_name}. Available: {available}"
            )

        config = self.settings.get_transcription_config(provider_name)
        if not config.enabled:
            raise ConfigurationError(f"Transcription provider '{provider_name}' is disabled")

        try:
            return self.TRANSCRIPTION_PROVIDERS[provider_name](**config.config)
        except Exception as e:
            logger.error(f"Failed to create transcription provider '{provider_name}': {str(e)}")
            raise ConfigurationError(f"Transcription provider creation failed: {str(e)}")

    def create_token_provider(self, provider_name: Optional[str] = None) -> TokenProvider:
        """
        Create the provider of access tokens for drive calls

        Args:
            provider_name: Provider name, uses default from settings if None

        Returns:
            Configured TokenProvider instance
        """
        provider_name = provider_name or self.settings.token_provider

        if provider_name not in self.TOKEN_PROVIDERS:
            available = ", ".join(self.TOKEN_PROVIDERS.keys())
            raise ConfigurationError(f"Unknown token provider: {provider_name}. Available: {available}")

        config = self.settings.get_token_config(provider_name)
        if not config.enabled:
            raise ConfigurationError(f"Token provider '{provider_name}' is disabled")

        try:
            if provider_name == "cached":
                return CachedTokenProvider(
                    storage_provider=self.get_storage_provider(),
                    token_endpoint=config.get("token_endpoint"),
                    client_id=config.get("client_id"),
                    client_secret=config.get("client_secret"),
                    timeout=self.settings.request_timeout,
                )
            return self.TOKEN_PROVIDERS[provider_name](**config.config)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Failed to create token provider '{provider_name}': {str(e)}")
            raise ConfigurationError(f"Token provider creation failed: {str(e)}")

    def get_token_provider(self) -> TokenProvider:
        if self._token_provider is None:
            self._token_provider = self.create_token_provider()
        return self._token_provider

    def create_subscription_store(self) -> SubscriptionStore:
        return SubscriptionStore(self.get_storage_provider())

    def create_drive_client(self, record: SubscriptionRecord) -> DriveClient:
        """Create a drive client authorized as the record's owner"""
        return GraphDriveClient(
            token_provider=self.get_token_provider(),
            owner_identity=record.owner_identity,
            base_url=self.settings.graph_base_url,
            timeout=self.settings.request_timeout,
        )

    def create_walker(self, drive_client: DriveClient) -> DeltaFeedWalker:
        return DeltaFeedWalker(
            drive_client,
            max_pages=self.settings.max_delta_pages,
            audio_extension=self.settings.audio_extension,
        )

    def create_file_processor(
        self, drive_client: DriveClient, transcription_service: TranscriptionService
    ) -> FileProcessor:
        return FileProcessor(
            drive_client,
            transcription_service,
            languages=LanguageTable(),
            max_file_size=self.settings.max_file_size,
            language_field=self.settings.language_field,
            transcript_field=self.settings.transcript_field,
        )

    def create_webhook_service(self) -> WebhookService:
        """
        Create the webhook service with all collaborators wired from settings

        Returns:
            Configured WebhookService instance
        """
        transcription_service = TranscriptionService(self.create_transcription_provider())

        return WebhookService(
            store=self.create_subscription_store(),
            drive_client_factory=self.create_drive_client,
            walker_factory=self.create_walker,
            processor_factory=partial(
                self.create_file_processor, transcription_service=transcription_service
            ),
            client_state=self.settings.client_state,
        )

    def get_available_providers(self) -> dict[str, Any]:
        """
        Get information about all available providers

        Returns:
            Dictionary with provider information
        """
        return {
            "storage": {
                "available": list(self.STORAGE_PROVIDERS.keys()),
                "default": self.settings.storage_provider,
                "enabled": list(self.settings.get_enabled_providers("storage").keys()),
            },
            "transcription": {
                "available": list(self.TRANSCRIPTION_PROVIDERS.keys()),
                "default": self.settings.transcription_provider,
                "enabled": list(self.settings.get_enabled_providers("transcription").keys()),
            },
            "token": {
                "available": list(self.TOKEN_PROVIDERS.keys()),
                "default": self.settings.token_provider,
                "enabled": list(self.settings.get_enabled_providers("token").keys()),
            },
        }

    def validate_configuration(self) -> dict[str, Any]:
        """
        Validate current configuration and return status

        Returns:
            Dictionary with validation results
        """
        results = {"valid": True, "errors": [], "warnings": [], "provider_status": {}}

        checks = {
            "storage": (self.settings.storage_provider, self.get_storage_provider),
            "transcription": (self.settings.transcription_provider, self.create_transcription_provider),
            "token": (self.settings.token_provider, self.get_token_provider),
        }

        for provider_type, (name, create) in checks.items():
            try:
                create()
                results["provider_status"][provider_type] = {"name": name, "status": "valid"}
            except Exception as e:
                results["valid"] = False
                results["errors"].append(f"{provider_type}: {str(e)}")
                results["provider_status"][provider_type] = {
                    "name": name,
                    "status": "error",
                    "error": str(e),
                }

        for provider_type in checks:
            if not self.settings.get_enabled_providers(provider_type):
                results["warnings"].append(f"No enabled {provider_type} providers")

        return results
