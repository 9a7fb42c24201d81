"""
Dependency injection for the webhook API
"""

from functools import lru_cache
from typing import Callable

from dotenv import load_dotenv

from ..config import ServiceFactory, Settings
from ..webhook import SubscriptionStore, WebhookService
from .config import APISettings
from .config import get_settings as load_settings


@lru_cache()
def get_settings() -> APISettings:
    """Get API settings"""
    return load_settings()


@lru_cache()
def get_service_factory() -> ServiceFactory:
    """Get service factory instance"""
    api_settings = get_settings()

    # Service settings read os.environ directly
    load_dotenv()
    service_settings = Settings.from_env()
    service_settings.log_level = api_settings.log_level
    service_settings.log_format = api_settings.log_format
    if api_settings.debug:
        service_settings.environment = "development"

    return ServiceFactory(service_settings)


@lru_cache()
def get_webhook_service() -> WebhookService:
    """Get webhook service instance"""
    return get_service_factory().create_webhook_service()


def get_webhook_service_resolver() -> Callable[[], WebhookService]:
    """
    Get a callable that builds the webhook service on first use

    Validation requests are answered without calling it.
    """
    return get_webhook_service


def get_subscription_store() -> SubscriptionStore:
    """Get subscription store instance"""
    return get_service_factory().create_subscription_store()
