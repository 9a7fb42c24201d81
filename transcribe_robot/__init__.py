"""
Transcription robot: turns drive change notifications into transcribed audio metadata
"""

from .config import ProviderConfig, ServiceFactory, Settings
from .pipeline import FileProcessor
from .transcription import TranscriptionService
from .webhook import DeltaFeedWalker, SubscriptionStore, WebhookService

__version__ = "0.1.0"

__all__ = [
    "ServiceFactory",
    "Settings",
    "ProviderConfig",
    "WebhookService",
    "SubscriptionStore",
    "DeltaFeedWalker",
    "FileProcessor",
    "TranscriptionService",
]
