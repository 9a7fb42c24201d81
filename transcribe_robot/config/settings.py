"""
Configuration settings for services
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ProviderConfig:
    """Configuration for a service provider"""

    provider_type: str
    enabled: bool = True
    config: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with default"""
        return self.config.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        return {"provider_type": self.provider_type, "enabled": self.enabled, "config": self.config}


@dataclass
class Settings:
    """
    Central configuration for the transcription robot

    Built once at startup and handed to the factory. Providers are constructed
    from its configs and never read the environment themselves.
    """

    # State storage settings
    storage_provider: str = "local"
    storage_configs: dict[str, ProviderConfig] = field(default_factory=dict)

    # Transcription settings
    transcription_provider: str = "speech"
    transcription_configs: dict[str, ProviderConfig] = field(default_factory=dict)

    # Credentials used for drive calls on behalf of subscription owners
    token_provider: str = "cached"
    token_configs: dict[str, ProviderConfig] = field(default_factory=dict)

    # Drive and feed settings
    graph_base_url: str = "https://graph.microsoft.com/v1.0"
    request_timeout: float = 30.0
    max_delta_pages: int = 50
    audio_extension: str = ".wav"
    client_state: Optional[str] = None

    # Pipeline settings
    max_file_size: int = 4 * 1024 * 1024
    language_field: str = "Language"
    transcript_field: str = "Transcription"

    # General settings
    environment: str = "production"
    log_level: str = "INFO"
    log_format: str = "json"
    service_name: str = "transcribe-robot"

    def __post_init__(self):
        """Initialize default configurations"""
        if not self.storage_configs:
            self.storage_configs = self._get_default_storage_configs()

        if not self.transcription_configs:
            self.transcription_configs = self._get_default_transcription_configs()

        if not self.token_configs:
            self.token_configs = self._get_default_token_configs()

    def _get_default_storage_configs(self) -> dict[str, ProviderConfig]:
        """Get default storage provider configurations"""
        return {
            "gcs": ProviderConfig(
                provider_type="gcs",
                enabled=bool(os.environ.get("GCS_BUCKET")),
                config={
                    "project_id": os.environ.get("PROJECT_ID"),
                    "bucket_name": os.environ.get("GCS_BUCKET"),
                    "credentials_path": os.environ.get("GOOGLE_APPLICATION_CREDENTIALS"),
                },
            ),
            "local": ProviderConfig(
                provider_type="local",
                enabled=True,
                config={
                    "base_path": os.environ.get("LOCAL_STORAGE_PATH", "./local_storage"),
                },
            ),
            "memory": ProviderConfig(provider_type="memory", enabled=True),
        }

    def _get_default_transcription_configs(self) -> dict[str, ProviderConfig]:
        """Get default transcription provider configurations"""
        return {
            "speech": ProviderConfig(
                provider_type="speech",
                enabled=bool(os.environ.get("SPEECH_API_KEY")),
                config={
                    "subscription_key": os.environ.get("SPEECH_API_KEY"),
                    "token_url": os.environ.get(
                        "SPEECH_TOKEN_URL",
                        "https://westus.api.cognitive.microsoft.com/sts/v1.0/issueToken",
                    ),
                    "recognition_url": os.environ.get(
                        "SPEECH_RECOGNITION_URL",
                        "https://westus.stt.speech.microsoft.com/speech/recognition/dictation/cognitiveservices/v1",
                    ),
                },
            ),
            "openai": ProviderConfig(
                provider_type="openai",
                enabled=bool(os.environ.get("OPENAI_API_KEY")),
                config={
                    "api_key": os.environ.get("OPENAI_API_KEY"),
                    "model": os.environ.get("WHISPER_MODEL", "whisper-1"),
                },
            ),
        }

    def _get_default_token_configs(self) -> dict[str, ProviderConfig]:
        """Get default token provider configurations"""
        return {
            "cached": ProviderConfig(
                provider_type="cached",
                enabled=bool(os.environ.get("GRAPH_CLIENT_ID")),
                config={
                    "token_endpoint": os.environ.get(
                        "GRAPH_TOKEN_ENDPOINT",
                        "https://login.microsoftonline.com/common/oauth2/v2.0/token",
                    ),
                    "client_id": os.environ.get("GRAPH_CLIENT_ID"),
                    "client_secret": os.environ.get("GRAPH_CLIENT_SECRET"),
                },
            ),
            "static": ProviderConfig(
                provider_type="static",
                enabled=bool(os.environ.get("GRAPH_ACCESS_TOKEN")),
                config={"token": os.environ.get("GRAPH_ACCESS_TOKEN")},
            ),
        }

    def _configs_for(self, provider_type: str) -> dict[str, ProviderConfig]:
        configs_map = {
            "storage": self.storage_configs,
            "transcription": self.transcription_configs,
            "token": self.token_configs,
        }
        return configs_map.get(provider_type, {})

    def get_storage_config(self, provider: Optional[str] = None) -> ProviderConfig:
        """
        Get storage provider configuration

        Args:
            provider: Provider name, uses default if None

        Returns:
            ProviderConfig for the storage provider
        """
        provider_name = provider or self.storage_provider
        if provider_name not in self.storage_configs:
            raise ValueError(f"Unknown storage provider: {provider_name}")
        return self.storage_configs[provider_name]

    def get_transcription_config(self, provider: Optional[str] = None) -> ProviderConfig:
        """
        Get transcription provider configuration

        Args:
            provider: Provider name, uses default if None

        Returns:
            ProviderConfig for the transcription provider
        """
        provider_name = provider or self.transcription_provider
        if provider_name not in self.transcription_configs:
            raise ValueError(f"Unknown transcription provider: {provider_name}")
        return self.transcription_configs[provider_name]

    def get_token_config(self, provider: Optional[str] = None) -> ProviderConfig:
        provider_name = provider or self.token_provider
        if provider_name not in self.token_configs:
            raise ValueError(f"Unknown token provider: {provider_name}")
        return self.token_configs[provider_name]

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Create settings from environment variables

        Returns:
            Settings instance configured from environment
        """
        return cls(
            # Provider selections
            storage_provider=os.environ.get("STORAGE_PROVIDER", "local"),
            transcription_provider=os.environ.get("TRANSCRIPTION_PROVIDER", "speech"),
            token_provider=os.environ.get("TOKEN_PROVIDER", "cached"),
            # Drive and feed settings
            graph_base_url=os.environ.get("GRAPH_BASE_URL", "https://graph.microsoft.com/v1.0"),
            request_timeout=float(os.environ.get("REQUEST_TIMEOUT", "30")),
            max_delta_pages=int(os.environ.get("MAX_DELTA_PAGES", "50")),
            audio_extension=os.environ.get("AUDIO_EXTENSION", ".wav"),
            client_state=os.environ.get("WEBHOOK_CLIENT_STATE") or None,
            # Pipeline settings
            max_file_size=int(os.environ.get("MAX_FILE_SIZE", str(4 * 1024 * 1024))),
            language_field=os.environ.get("LANGUAGE_FIELD", "Language"),
            transcript_field=os.environ.get("TRANSCRIPT_FIELD", "Transcription"),
            # General settings
            environment=os.environ.get("ENVIRONMENT", "production"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            log_format=os.environ.get("LOG_FORMAT", "json"),
            service_name=os.environ.get("SERVICE_NAME", "transcribe-robot"),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "Settings":
        """
        Load settings from JSON configuration file

        Args:
            config_path: Path to JSON configuration file

        Returns:
            Settings instance
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file) as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file: {e}")

        # Convert provider configs from dict to ProviderConfig objects
        for provider_type in ["storage_configs", "transcription_configs", "token_configs"]:
            if provider_type in config_data:
                config_data[provider_type] = {
                    name: ProviderConfig(
                        provider_type=config.get("provider_type", name),
                        enabled=config.get("enabled", True),
                        config=config.get("config", {}),
                    )
                    for name, config in config_data[provider_type].items()
                }

        try:
            return cls(**config_data)
        except TypeError as e:
            raise ValueError(f"Error loading configuration: {e}")

    def to_file(self, config_path: str):
        """
        Save settings to JSON configuration file

        Args:
            config_path: Path to save configuration file
        """
        config_data = {
            "storage_provider": self.storage_provider,
            "transcription_provider": self.transcription_provider,
            "token_provider": self.token_provider,
            "graph_base_url": self.graph_base_url,
            "request_timeout": self.request_timeout,
            "max_delta_pages": self.max_delta_pages,
            "audio_extension": self.audio_extension,
            "client_state": self.client_state,
            "max_file_size": self.max_file_size,
            "language_field": self.language_field,
            "transcript_field": self.transcript_field,
            "environment": self.environment,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "service_name": self.service_name,
            "storage_configs": {n: c.to_dict() for n, c in self.storage_configs.items()},
            "transcription_configs": {n: c.to_dict() for n, c in self.transcription_configs.items()},
            "token_configs": {n: c.to_dict() for n, c in self.token_configs.items()},
        }

        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w") as f:
            json.dump(config_data, f, indent=2)

        logger.info(f"Configuration saved to: {config_path}")

    def is_provider_enabled(self, provider_type: str, provider_name: str) -> bool:
        """
        Check if a provider is enabled

        Args:
            provider_type: Type of provider (storage, transcription, token)
            provider_name: Name of the provider

        Returns:
            True if provider is enabled
        """
        provider_config = self._configs_for(provider_type).get(provider_name)
        return provider_config.enabled if provider_config else False

    def get_enabled_providers(self, provider_type: str) -> dict[str, ProviderConfig]:
        """
        Get all enabled providers of a given type

        Args:
            provider_type: Type of provider

        Returns:
            Dictionary of enabled provider configurations
        """
        return {
            name: config
            for name, config in self._configs_for(provider_type).items()
            if config.enabled
        }
