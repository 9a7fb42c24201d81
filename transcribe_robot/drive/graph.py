"""
Microsoft Graph implementation of DriveClient
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx

from ..core.exceptions import CursorExpiredError, DriveError
from ..core.interfaces import DriveClient, TokenProvider
from ..core.logging import get_logger
from ..core.models import CandidateItem, ChangeFeedPage
from ..core.resilience import RetryConfig, RetryStrategy, with_retry

logger = get_logger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"

# Error codes Graph uses when a delta token can no longer be honoured
RESYNC_ERROR_CODES = {"resyncRequired", "syncStateNotFound", "syncStateInvalid"}

TRANSPORT_RETRY = RetryConfig(
    max_attempts=3,
    base_delay=0.5,
    strategy=RetryStrategy.EXPONENTIAL_BACKOFF,
    retry_on=(httpx.TransportError,),
    never_retry=(DriveError,),
)


class GraphDriveClient(DriveClient):
    """
    Drive client for OneDrive / SharePoint document libraries

    Requests are authorized with a bearer token for the subscription owner.
    The underlying httpx client is closed when the async context exits.
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        owner_identity: str,
        base_url: str = GRAPH_BASE_URL,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize Graph drive client

        Args:
            token_provider: Source of access tokens
            owner_identity: Principal whose credentials are used
            base_url: Graph API root
            timeout: Per-request timeout in seconds
            http_client: Optional preconfigured httpx client
        """
        self.token_provider = token_provider
        self.owner_identity = owner_identity
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def __aenter__(self) -> "GraphDriveClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _item_url(self, container_id: str, item_id: str) -> str:
        return f"{self.base_url}/drives/{quote(container_id, safe='')}/items/{quote(item_id, safe='')}"

    def latest_delta_url(self, resource_id: str) -> str:
        return f"{self.base_url}/drives/{quote(resource_id, safe='')}/root/delta?token=latest"

    @with_retry(TRANSPORT_RETRY)
    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        token = await self.token_provider.get_access_token(self.owner_identity)
        headers = kwargs.pop("headers", {})
        headers["Authorization"] = f"Bearer {token}"
        return await self._client.request(method, url, headers=headers, **kwargs)

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self._request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise DriveError(f"{method} {url} failed: {type(e).__name__}: {str(e)}")

    @staticmethod
    def _error_code(response: httpx.Response) -> Optional[str]:
        try:
            return response.json().get("error", {}).get("code")
        except (ValueError, AttributeError):
            return None

    def _raise_for_status(self, response: httpx.Response, action: str) -> None:
        if response.is_success:
            return
        code = self._error_code(response)
        raise DriveError(
            f"{action} failed: HTTP {response.status_code}" + (f" ({code})" if code else ""),
            status_code=response.status_code,
        )

    async def fetch_delta_page(self, url: str) -> ChangeFeedPage:
        response = await self._send("GET", url)

        if response.status_code == 410 or self._error_code(response) in RESYNC_ERROR_CODES:
            raise CursorExpiredError(
                f"Delta token rejected: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        self._raise_for_status(response, "Delta fetch")

        body = response.json()
        return ChangeFeedPage(
            items=[CandidateItem.from_graph(entry) for entry in body.get("value", [])],
            next_link=body.get("@odata.nextLink"),
            delta_link=body.get("@odata.deltaLink"),
        )

    async def get_item_fields(self, container_id: str, item_id: str) -> dict[str, Any]:
        url = f"{self._item_url(container_id, item_id)}/listItem"
        response = await self._send("GET", url, params={"expand": "fields"})
        self._raise_for_status(response, "List item read")
        return response.json().get("fields") or {}

    async def download_content(self, container_id: str, item_id: str) -> bytes:
        url = f"{self._item_url(container_id, item_id)}/content"
        response = await self._send("GET", url)
        self._raise_for_status(response, "Content download")
        return response.content

    async def update_item_fields(
        self, container_id: str, item_id: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        url = f"{self._item_url(container_id, item_id)}/listItem/fields"
        response = await self._send("PATCH", url, json=fields)
        self._raise_for_status(response, "Metadata patch")
        return response.json() if response.content else {}
