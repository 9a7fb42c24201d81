"""
Unit tests for configuration system
"""

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from transcribe_robot.config.factory import ServiceFactory
from transcribe_robot.config.settings import ProviderConfig, Settings
from transcribe_robot.core.exceptions import ConfigurationError
from transcribe_robot.drive.graph import GraphDriveClient
from transcribe_robot.core.models import SubscriptionRecord
from transcribe_robot.security.token_cache import StaticTokenProvider
from transcribe_robot.storage.providers import MemoryStorageProvider
from transcribe_robot.webhook.service import WebhookService


class TestProviderConfig(unittest.TestCase):
    """Test ProviderConfig class"""

    def test_provider_config_creation(self):
        config = ProviderConfig(provider_type="test", enabled=True, config={"key": "value"})

        self.assertEqual(config.get("key"), "value")
        self.assertEqual(config.get("nonexistent", "default"), "default")
        self.assertEqual(config.to_dict(), {"provider_type": "test", "enabled": True, "config": {"key": "value"}})

    def test_provider_config_defaults(self):
        config = ProviderConfig(provider_type="test")
        self.assertTrue(config.enabled)
        self.assertEqual(config.config, {})


class TestSettings(unittest.TestCase):
    """Test Settings class"""

    @patch.dict(os.environ, {}, clear=True)
    def test_settings_defaults(self):
        settings = Settings()

        self.assertEqual(settings.storage_provider, "local")
        self.assertEqual(settings.transcription_provider, "speech")
        self.assertEqual(settings.max_delta_pages, 50)
        self.assertEqual(settings.max_file_size, 4 * 1024 * 1024)
        self.assertEqual(settings.audio_extension, ".wav")
        self.assertEqual(settings.language_field, "Language")
        self.assertEqual(settings.transcript_field, "Transcription")
        self.assertIsNone(settings.client_state)

        # Providers without credentials are disabled
        self.assertFalse(settings.is_provider_enabled("transcription", "speech"))
        self.assertFalse(settings.is_provider_enabled("storage", "gcs"))
        self.assertTrue(settings.is_provider_enabled("storage", "memory"))
        self.assertFalse(settings.is_provider_enabled("storage", "nonexistent"))

    @patch.dict(
        os.environ,
        {
            "STORAGE_PROVIDER": "memory",
            "TRANSCRIPTION_PROVIDER": "openai",
            "OPENAI_API_KEY": "sk-test",
            "MAX_DELTA_PAGES": "5",
            "WEBHOOK_CLIENT_STATE": "secret",
            "LOG_LEVEL": "DEBUG",
        },
        clear=True,
    )
    def test_settings_from_env(self):
        settings = Settings.from_env()

        self.assertEqual(settings.storage_provider, "memory")
        self.assertEqual(settings.transcription_provider, "openai")
        self.assertEqual(settings.max_delta_pages, 5)
        self.assertEqual(settings.client_state, "secret")
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertTrue(settings.is_provider_enabled("transcription", "openai"))
        self.assertEqual(settings.get_transcription_config().get("api_key"), "sk-test")

    def test_unknown_provider_config(self):
        with self.assertRaises(ValueError):
            Settings().get_storage_config("dropbox")

    def test_settings_file_round_trip(self):
        settings = Settings(storage_provider="memory", max_delta_pages=7, client_state="s3cret")

        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "config" / "settings.json"
            settings.to_file(str(path))

            data = json.loads(path.read_text())
            self.assertEqual(data["max_delta_pages"], 7)

            loaded = Settings.from_file(str(path))

        self.assertEqual(loaded.storage_provider, "memory")
        self.assertEqual(loaded.max_delta_pages, 7)
        self.assertEqual(loaded.client_state, "s3cret")
        self.assertIsInstance(loaded.storage_configs["memory"], ProviderConfig)

    def test_from_file_errors(self):
        with self.assertRaises(FileNotFoundError):
            Settings.from_file("/nonexistent/settings.json")

        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as f:
            f.write("{not json")
        try:
            with self.assertRaises(ValueError):
                Settings.from_file(f.name)
        finally:
            os.unlink(f.name)


class TestServiceFactory(unittest.TestCase):
    """Test ServiceFactory wiring"""

    def make_settings(self, **overrides):
        settings = Settings(storage_provider="memory", token_provider="static", **overrides)
        settings.token_configs["static"] = ProviderConfig("static", True, {"token": "t"})
        settings.transcription_configs["speech"] = ProviderConfig("speech", True, {"subscription_key": "k"})
        return settings

    def test_unknown_storage_provider(self):
        factory = ServiceFactory(self.make_settings())
        with self.assertRaises(ConfigurationError):
            factory.create_storage_provider("dropbox")

    def test_disabled_provider(self):
        settings = self.make_settings()
        settings.transcription_configs["openai"] = ProviderConfig("openai", False, {})
        with self.assertRaises(ConfigurationError):
            ServiceFactory(settings).create_transcription_provider("openai")

    def test_shared_storage_and_token_provider(self):
        factory = ServiceFactory(self.make_settings())

        self.assertIsInstance(factory.get_storage_provider(), MemoryStorageProvider)
        self.assertIs(factory.get_storage_provider(), factory.get_storage_provider())
        self.assertIsInstance(factory.get_token_provider(), StaticTokenProvider)
        self.assertIs(factory.create_subscription_store().storage, factory.get_storage_provider())

    def test_drive_client_and_walker(self):
        factory = ServiceFactory(self.make_settings(max_delta_pages=3, graph_base_url="https://graph.example.com/v1.0"))
        record = SubscriptionRecord("sub-1", "owner@example.com", "drive-1")

        drive = factory.create_drive_client(record)
        self.assertIsInstance(drive, GraphDriveClient)
        self.assertEqual(drive.owner_identity, "owner@example.com")
        self.assertTrue(drive.latest_delta_url("drive-1").startswith("https://graph.example.com/v1.0/"))

        walker = factory.create_walker(drive)
        self.assertEqual(walker.max_pages, 3)

    def test_create_webhook_service(self):
        factory = ServiceFactory(self.make_settings(client_state="secret"))
        service = factory.create_webhook_service()

        self.assertIsInstance(service, WebhookService)
        self.assertEqual(service.client_state, "secret")

    def test_validate_configuration(self):
        factory = ServiceFactory(self.make_settings())
        results = factory.validate_configuration()

        self.assertTrue(results["valid"], results["errors"])
        self.assertEqual(results["provider_status"]["storage"]["status"], "valid")

        providers = factory.get_available_providers()
        self.assertIn("gcs", providers["storage"]["available"])
        self.assertEqual(providers["transcription"]["default"], "speech")

    @patch.dict(os.environ, {}, clear=True)
    def test_validate_configuration_reports_errors(self):
        factory = ServiceFactory(Settings(storage_provider="memory", token_provider="static"))
        results = factory.validate_configuration()

        self.assertFalse(results["valid"])
        self.assertEqual(results["provider_status"]["transcription"]["status"], "error")


if __name__ == "__main__":
    unittest.main()
