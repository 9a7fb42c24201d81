"""
Webhook payload handlers
"""

from .graph import get_validation_token, parse_notifications

__all__ = [
    "get_validation_token",
    "parse_notifications",
]
