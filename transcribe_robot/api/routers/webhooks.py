"""
Webhooks router: change notifications from the drive service
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse

from ...core.logging import get_logger
from ...webhook.handlers.graph import get_validation_token
from ..dependencies import get_webhook_service, get_webhook_service_resolver

logger = get_logger(__name__)

router = APIRouter()


@router.api_route("/graph", methods=["GET", "POST"])
async def receive_graph_notification(
    request: Request, resolve_webhook_service=Depends(get_webhook_service_resolver)
):
    """
    Receive Microsoft Graph change notifications

    A subscription validation request is answered by echoing its token as
    plain text before the body is looked at or the service is built.
    """
    logger.info("Webhook was triggered")

    validation_token = get_validation_token(request.query_params)
    if validation_token is not None:
        return PlainTextResponse(validation_token, status_code=status.HTTP_200_OK)

    try:
        payload = await request.json()
    except ValueError:
        logger.info("Request body is not JSON, returning bad request")
        return Response(status_code=status.HTTP_400_BAD_REQUEST)

    try:
        webhook_service = resolve_webhook_service()
        result = await webhook_service.handle(payload)
    except Exception as e:
        logger.error(f"Webhook dispatch failed: {str(e)}", exc_info=True)
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(status_code=result.status_code)


@router.post("/manual/{subscription_id}")
async def process_subscription_manually(subscription_id: str, webhook_service=Depends(get_webhook_service)):
    """Run one pass for a subscription without waiting for a notification"""
    try:
        outcomes = await webhook_service.process_subscription(subscription_id)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Subscription pass failed: {str(e)}",
        )

    if outcomes is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown subscription: {subscription_id}",
        )

    return {
        "subscription_id": subscription_id,
        "files": len(outcomes),
        "outcomes": [o.to_dict() for o in outcomes],
    }
