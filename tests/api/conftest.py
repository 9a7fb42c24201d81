"""
Shared test fixtures for API testing
"""

import asyncio
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from transcribe_robot.api.dependencies import (
    get_service_factory,
    get_subscription_store,
    get_webhook_service,
    get_webhook_service_resolver,
)
from transcribe_robot.api.main import app
from transcribe_robot.core.models import SubscriptionRecord
from transcribe_robot.storage.providers import MemoryStorageProvider
from transcribe_robot.webhook.service import WebhookService
from transcribe_robot.webhook.state import SubscriptionStore


@pytest.fixture
def subscription_store():
    """Subscription store over in-memory storage"""
    return SubscriptionStore(MemoryStorageProvider())


@pytest.fixture
def drive_client_factory():
    """Drive factory that must not be reached for unknown subscriptions"""
    return Mock(side_effect=AssertionError("drive client should not be created"))


@pytest.fixture
def webhook_service(subscription_store, drive_client_factory):
    """Webhook service with no remote collaborators"""
    return WebhookService(
        store=subscription_store,
        drive_client_factory=drive_client_factory,
        walker_factory=Mock(),
        processor_factory=Mock(),
    )


@pytest.fixture
def mock_service_factory():
    """Mock service factory for the status endpoint"""
    factory = Mock()
    factory.settings.storage_provider = "memory"
    factory.settings.transcription_provider = "speech"
    factory.settings.max_delta_pages = 50
    factory.settings.environment = "test"
    factory.validate_configuration.return_value = {
        "valid": True,
        "errors": [],
        "warnings": [],
        "provider_status": {},
    }
    factory.get_available_providers.return_value = {
        "storage": {"available": ["gcs", "local", "memory"], "default": "memory", "enabled": ["memory"]},
    }
    return factory


@pytest.fixture
def webhook_client(webhook_service, subscription_store, mock_service_factory):
    """Test client with service dependencies overridden"""
    app.dependency_overrides[get_webhook_service] = lambda: webhook_service
    app.dependency_overrides[get_webhook_service_resolver] = lambda: lambda: webhook_service
    app.dependency_overrides[get_subscription_store] = lambda: subscription_store
    app.dependency_overrides[get_service_factory] = lambda: mock_service_factory

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client(monkeypatch):
    """Test client with no overrides and no transcription backend configured"""
    monkeypatch.setenv("STORAGE_PROVIDER", "memory")
    monkeypatch.setenv("TRANSCRIPTION_PROVIDER", "speech")
    for name in ("SPEECH_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    get_service_factory.cache_clear()
    get_webhook_service.cache_clear()

    yield TestClient(app)

    get_service_factory.cache_clear()
    get_webhook_service.cache_clear()


@pytest.fixture
def stored_subscription(subscription_store):
    """A subscription record already present in the store"""
    record = SubscriptionRecord(
        subscription_id="sub-1",
        owner_identity="owner@example.com",
        resource_id="drive-1",
        cursor="delta-1",
    )
    return asyncio.run(subscription_store.save(record))


@pytest.fixture
def sample_notification():
    """Sample change notification delivery"""
    return {
        "value": [
            {
                "subscriptionId": "sub-unknown",
                "clientState": None,
                "resource": "me/drive/root",
                "changeType": "updated",
                "tenantId": "tenant-1",
                "subscriptionExpirationDateTime": "2026-11-01T00:00:00Z",
            }
        ]
    }
