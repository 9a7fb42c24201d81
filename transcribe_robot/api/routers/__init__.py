"""
Routers for the webhook API
"""

from .health import router as health_router
from .subscriptions import router as subscriptions_router
from .webhooks import router as webhooks_router

__all__ = [
    "health_router",
    "webhooks_router",
    "subscriptions_router",
]
