"""
Custom exceptions for the service system
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for all service errors"""

    pass


class StorageError(ServiceError):
    """Exception for storage-related errors"""

    pass


class TranscriptionError(ServiceError):
    """Exception for transcription-related errors"""

    pass


class DriveError(ServiceError):
    """Exception for remote drive (feed, content, metadata) errors"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CursorExpiredError(DriveError):
    """The remote feed rejected the delta token and a resync is required"""

    pass


class ConfigurationError(ServiceError):
    """Exception for configuration errors"""

    pass


class AuthenticationError(ServiceError):
    """Exception for authentication errors"""

    pass


class WebhookPayloadError(ServiceError):
    """Exception for webhook bodies that do not have the expected shape"""

    pass
