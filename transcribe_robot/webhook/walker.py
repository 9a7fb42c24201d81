"""
Delta feed walker: drains the remote change feed from a stored cursor
"""

from ..core.exceptions import CursorExpiredError, ServiceError
from ..core.interfaces import DriveClient
from ..core.logging import get_logger
from ..core.models import CandidateItem, SubscriptionRecord, WalkResult, WalkState
from .filters import DEFAULT_AUDIO_EXTENSION, filter_candidates

logger = get_logger(__name__)

DEFAULT_MAX_PAGES = 50


class DeltaFeedWalker:
    """
    Walks a subscription's delta feed to a terminal state.

    Every pass ends in exactly one of:
      END_OF_FEED      the feed handed back a delta link; it becomes the cursor
      CEILING_REACHED  max_pages were read without reaching the end, or a page
                       carried no continuation at all; cursor resets to latest
      CURSOR_INVALID   the remote service rejected the token; cursor resets to latest
      FAILED           a page could not be fetched; no cursor may be persisted
    """

    def __init__(
        self,
        drive_client: DriveClient,
        max_pages: int = DEFAULT_MAX_PAGES,
        audio_extension: str = DEFAULT_AUDIO_EXTENSION,
    ):
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")

        self.drive = drive_client
        self.max_pages = max_pages
        self.audio_extension = audio_extension

    async def walk(self, record: SubscriptionRecord) -> WalkResult:
        """
        Drain the feed for one subscription

        Args:
            record: Subscription whose cursor to start from

        Returns:
            WalkResult with matching items in feed order and the cursor to persist
        """
        latest = self.drive.latest_delta_url(record.resource_id)
        token = record.cursor or latest
        state = WalkState.PAGING
        matches: list[CandidateItem] = []
        pages_read = 0
        cursor = None
        error = None

        while state == WalkState.PAGING:
            if pages_read >= self.max_pages:
                logger.warning(
                    f"Read {pages_read} pages for subscription {record.subscription_id} "
                    "without reaching the end of the feed; resetting to latest"
                )
                state, cursor = WalkState.CEILING_REACHED, latest
                break

            logger.info(f"Requesting delta page {pages_read + 1} for {record.subscription_id}")

            try:
                page = await self.drive.fetch_delta_page(token)
            except CursorExpiredError as e:
                logger.warning(
                    f"Delta token for subscription {record.subscription_id} is no longer valid "
                    f"({str(e)}); resetting to latest"
                )
                state, cursor = WalkState.CURSOR_INVALID, latest
                break
            except (ServiceError, ValueError) as e:
                logger.error(f"Delta fetch failed for subscription {record.subscription_id}: {str(e)}")
                state, error = WalkState.FAILED, str(e)
                break

            pages_read += 1
            matches.extend(filter_candidates(page.items, self.audio_extension))

            if page.delta_link:
                logger.debug(f"All changes read, next delta link: {page.delta_link}")
                state, cursor = WalkState.END_OF_FEED, page.delta_link
            elif page.next_link:
                token = page.next_link
            else:
                logger.warning(
                    f"Delta page for subscription {record.subscription_id} carried neither "
                    "a next link nor a delta link; resetting to latest"
                )
                state, cursor = WalkState.CEILING_REACHED, latest

        logger.info(
            f"Walk for {record.subscription_id} finished in state {state.value}: "
            f"{len(matches)} candidate(s) over {pages_read} page(s)"
        )

        return WalkResult(
            state=state,
            # A failed walk hands back nothing; the next delivery re-reads the same pages
            items=matches if state != WalkState.FAILED else [],
            cursor=cursor,
            pages_read=pages_read,
            error=error,
        )
