"""
Microsoft Graph change notification payload handling
"""

from collections.abc import Mapping
from typing import Any, Optional

from ...core.exceptions import WebhookPayloadError
from ...core.logging import get_logger
from ...core.models import NotificationEntry

logger = get_logger(__name__)

VALIDATION_TOKEN_PARAM = "validationtoken"


def get_validation_token(query_params: Mapping[str, str]) -> Optional[str]:
    """
    Find the subscription validation token in a request's query string

    The parameter name is matched case-insensitively.

    Returns:
        Token value, or None if this is not a validation request
    """
    for name, value in query_params.items():
        if name.lower() == VALIDATION_TOKEN_PARAM:
            return value
    return None


def parse_notifications(payload: Any) -> list[NotificationEntry]:
    """
    Parse a notification delivery into entries

    Args:
        payload: Decoded JSON body

    Returns:
        Entries in delivery order

    Raises:
        WebhookPayloadError: the body does not have the expected shape
    """
    if not isinstance(payload, dict):
        raise WebhookPayloadError("Notification body must be a JSON object")

    notifications = payload.get("value")
    if not isinstance(notifications, list):
        raise WebhookPayloadError("Notification body must contain a 'value' array")

    entries = []
    for index, notification in enumerate(notifications):
        if not isinstance(notification, dict):
            raise WebhookPayloadError(f"Notification {index} is not an object")

        subscription_id = notification.get("subscriptionId")
        if not isinstance(subscription_id, str) or not subscription_id:
            raise WebhookPayloadError(f"Notification {index} has no subscriptionId")

        entries.append(
            NotificationEntry(
                subscription_id=subscription_id,
                resource=notification.get("resource"),
                client_state=notification.get("clientState"),
            )
        )

    return entries
