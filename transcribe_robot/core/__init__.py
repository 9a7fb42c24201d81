"""
Core interfaces and models for the transcription robot
"""

from .exceptions import (
    AuthenticationError,
    ConfigurationError,
    CursorExpiredError,
    DriveError,
    ServiceError,
    StorageError,
    TranscriptionError,
    WebhookPayloadError,
)
from .interfaces import (
    DriveClient,
    StorageProvider,
    TokenProvider,
    TranscriptionProvider,
)
from .logging import configure_logging, get_logger
from .models import (
    CandidateItem,
    ChangeFeedPage,
    DispatchResult,
    Disposition,
    FailureReason,
    NotificationEntry,
    OutcomeKind,
    ProcessingOutcome,
    SkipReason,
    SubscriptionRecord,
    WalkResult,
    WalkState,
)

__all__ = [
    # Interfaces
    "StorageProvider",
    "DriveClient",
    "TranscriptionProvider",
    "TokenProvider",
    # Models
    "SubscriptionRecord",
    "CandidateItem",
    "ChangeFeedPage",
    "ProcessingOutcome",
    "OutcomeKind",
    "SkipReason",
    "FailureReason",
    "WalkState",
    "WalkResult",
    "NotificationEntry",
    "Disposition",
    "DispatchResult",
    # Exceptions
    "ServiceError",
    "StorageError",
    "TranscriptionError",
    "DriveError",
    "CursorExpiredError",
    "ConfigurationError",
    "AuthenticationError",
    "WebhookPayloadError",
    # Logging
    "configure_logging",
    "get_logger",
]
