"""
Webhook dispatch and change feed synchronization
"""

from .filters import filter_candidates, is_candidate
from .service import WebhookService
from .state import SubscriptionStore
from .walker import DeltaFeedWalker

__all__ = [
    "WebhookService",
    "SubscriptionStore",
    "DeltaFeedWalker",
    "is_candidate",
    "filter_candidates",
]
