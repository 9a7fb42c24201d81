"""
Subscriptions router: administration of stored subscription records
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from ...core.models import SubscriptionRecord
from ..dependencies import get_subscription_store

router = APIRouter()


class SubscriptionBody(BaseModel):
    owner_identity: str
    resource_id: str
    cursor: Optional[str] = None


@router.get("/")
async def list_subscriptions(owner: Optional[str] = None, store=Depends(get_subscription_store)):
    """List stored subscription records, optionally only the one belonging to an owner"""
    try:
        if owner is not None:
            record = await store.find_by_owner(owner)
            records = [record] if record else []
        else:
            records = await store.list_records()
        info = await store.get_store_info()

        return {
            "subscriptions": [r.to_dict() for r in records],
            "count": len(records),
            "storage_provider": info.get("storage_provider"),
        }

    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to list subscriptions: {str(e)}",
        )


@router.get("/{subscription_id}")
async def get_subscription(subscription_id: str, store=Depends(get_subscription_store)):
    """Get the record for one subscription"""
    record = await store.load(subscription_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Subscription not found: {subscription_id}",
        )
    return record.to_dict()


@router.put("/{subscription_id}")
async def put_subscription(
    subscription_id: str,
    body: SubscriptionBody,
    store=Depends(get_subscription_store),
):
    """Create or replace the record for a subscription"""
    record = SubscriptionRecord(
        subscription_id=subscription_id,
        owner_identity=body.owner_identity,
        resource_id=body.resource_id,
        cursor=body.cursor,
    )

    try:
        saved = await store.save(record)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save subscription: {str(e)}",
        )

    return {**saved.to_dict(), "message": "Subscription saved successfully"}


@router.delete("/{subscription_id}")
async def delete_subscription(subscription_id: str, store=Depends(get_subscription_store)):
    """Delete the record for a subscription"""
    try:
        deleted = await store.delete(subscription_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Subscription not found: {subscription_id}",
        )
    return {"subscription_id": subscription_id, "message": "Subscription deleted"}
