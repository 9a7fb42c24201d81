"""
High-level webhook service: turns notification deliveries into processing passes
"""

from typing import Any, Callable, Optional

from ..core.exceptions import DriveError, WebhookPayloadError
from ..core.interfaces import DriveClient
from ..core.logging import get_logger
from ..core.models import (
    DispatchResult,
    Disposition,
    ProcessingOutcome,
    SubscriptionRecord,
)
from ..pipeline.processor import FileProcessor
from .handlers.graph import parse_notifications
from .state import SubscriptionStore
from .walker import DeltaFeedWalker

logger = get_logger(__name__)


class WebhookService:
    """
    Dispatches webhook notifications to per-subscription feed walks.

    Every entry in a delivery is attempted; an unknown subscription anywhere
    in the batch turns the final disposition into GONE. Failures are isolated
    to the subscription they happened in.
    """

    def __init__(
        self,
        store: SubscriptionStore,
        drive_client_factory: Callable[[SubscriptionRecord], DriveClient],
        walker_factory: Callable[[DriveClient], DeltaFeedWalker],
        processor_factory: Callable[[DriveClient], FileProcessor],
        client_state: Optional[str] = None,
    ):
        """
        Initialize webhook service

        Args:
            store: Subscription state store
            drive_client_factory: Builds a drive client authorized as a record's owner
            walker_factory: Builds a feed walker over a drive client
            processor_factory: Builds a file processor over a drive client
            client_state: Expected clientState secret; entries that differ are ignored
        """
        self.store = store
        self.drive_client_factory = drive_client_factory
        self.walker_factory = walker_factory
        self.processor_factory = processor_factory
        self.client_state = client_state

        logger.info("Initialized WebhookService")

    async def handle(self, payload: Any) -> DispatchResult:
        """
        Process one webhook delivery

        Args:
            payload: Decoded JSON body

        Returns:
            DispatchResult with per-subscription outcomes and the response disposition
        """
        try:
            entries = parse_notifications(payload)
        except WebhookPayloadError as e:
            logger.info(f"Request was incorrect, returning bad request: {str(e)}")
            return DispatchResult(disposition=Disposition.BAD_REQUEST, errors={"payload": str(e)})

        result = DispatchResult()
        seen: set[str] = set()

        for entry in entries:
            logger.info(
                f"Hook received for subscription '{entry.subscription_id}' "
                f"resource '{entry.resource}'"
            )

            if self.client_state is not None and entry.client_state != self.client_state:
                logger.warning(
                    f"Ignoring notification for {entry.subscription_id}: clientState mismatch"
                )
                continue

            if entry.subscription_id in seen:
                logger.debug(f"Subscription {entry.subscription_id} already handled in this delivery")
                continue
            seen.add(entry.subscription_id)

            try:
                outcomes = await self.process_subscription(entry.subscription_id)
            except Exception as e:
                logger.error(
                    f"Error processing notification, subscription {entry.subscription_id} "
                    f"was skipped: {str(e)}",
                    exc_info=True,
                )
                result.errors[entry.subscription_id] = str(e)
                continue

            if outcomes is None:
                result.unknown_subscriptions.append(entry.subscription_id)
            else:
                result.outcomes[entry.subscription_id] = outcomes

        if result.unknown_subscriptions:
            result.disposition = Disposition.GONE

        return result

    async def process_subscription(self, subscription_id: str) -> Optional[list[ProcessingOutcome]]:
        """
        Run one pass for a subscription: walk the feed, process matches, persist the cursor

        Args:
            subscription_id: Subscription named by the notification

        Returns:
            Outcomes for each matching item, or None if the subscription is unknown

        Raises:
            DriveError: the feed walk failed; the stored cursor was left untouched
        """
        log = get_logger(__name__, {"subscription_id": subscription_id})

        record = await self.store.load(subscription_id)
        if record is None:
            log.info(f"Unknown subscription ID: '{subscription_id}'")
            return None

        log.info(f"Found subscription '{subscription_id}' with stored cursor: '{record.cursor}'")

        drive = self.drive_client_factory(record)
        try:
            walk = await self.walker_factory(drive).walk(record)

            processor = self.processor_factory(drive)
            outcomes = []
            for item in walk.items:
                log.info(f"Processing file: {item.name}")
                outcomes.append(await processor.process(item, record.resource_id))
        finally:
            await drive.aclose()

        if not walk.should_persist:
            raise DriveError(f"Feed walk failed, cursor not advanced: {walk.error}")

        record.cursor = walk.cursor
        await self.store.save(record)

        succeeded = sum(1 for o in outcomes if o.is_succeeded)
        failed = sum(1 for o in outcomes if o.is_failed)
        log.info(
            f"Subscription {subscription_id}: {len(outcomes)} file(s), "
            f"{succeeded} transcribed, {failed} failed"
        )
        return outcomes

    async def get_processing_stats(self) -> dict[str, Any]:
        """
        Get statistics about webhook processing

        Returns:
            Dictionary with processing statistics
        """
        try:
            return {"subscriptions": await self.store.get_store_info()}
        except Exception as e:
            logger.error(f"Error getting processing stats: {str(e)}")
            return {"error": str(e)}
