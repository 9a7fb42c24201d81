"""
Persistent OAuth token cache and token providers
"""

import json
import time
from typing import Any, Optional

import httpx

from ..core.exceptions import AuthenticationError
from ..core.interfaces import StorageProvider, TokenProvider
from ..core.logging import get_logger

logger = get_logger(__name__)

# Refresh tokens this many seconds before they actually expire
EXPIRY_SKEW_SECONDS = 60


class TokenCache:
    """
    Token set for one owner, backed by a storage provider.

    Use as an async context manager: the persisted entry is loaded once on
    enter, and written back on exit only if it was changed. The flush runs on
    every exit path, including when the body raises.

        async with TokenCache(storage, owner) as cache:
            token = cache.get()
    """

    def __init__(self, storage_provider: StorageProvider, owner_identity: str, prefix: str = "tokens/"):
        self.storage = storage_provider
        self.owner_identity = owner_identity
        self.key = f"{prefix.rstrip('/')}/{owner_identity}.json"
        self._entry: dict[str, Any] = {}
        self._dirty = False
        self._loaded = False

    async def __aenter__(self) -> "TokenCache":
        await self.load()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.flush()

    async def load(self) -> None:
        raw = await self.storage.read(self.key)
        if raw is not None:
            try:
                self._entry = json.loads(raw)
            except ValueError:
                logger.warning(f"Discarding unreadable token cache for {self.owner_identity}")
                self._entry = {}
        self._loaded = True
        self._dirty = False

    async def flush(self) -> bool:
        """
        Write the entry back if it changed

        Returns:
            True if a write happened
        """
        if not self._dirty:
            return False

        await self.storage.write(self.key, json.dumps(self._entry).encode("utf-8"))
        self._dirty = False
        logger.debug(f"Flushed token cache for {self.owner_identity}")
        return True

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def get(self) -> dict[str, Any]:
        return dict(self._entry)

    def set(self, entry: dict[str, Any]) -> None:
        if entry != self._entry:
            self._entry = dict(entry)
            self._dirty = True

    def clear(self) -> None:
        if self._entry:
            self._entry = {}
            self._dirty = True


class StaticTokenProvider(TokenProvider):
    """Returns a fixed bearer token for every owner"""

    def __init__(self, token: str):
        if not token:
            raise AuthenticationError("Static token provider requires a token")
        self.token = token

    async def get_access_token(self, owner_identity: str) -> str:
        return self.token


class CachedTokenProvider(TokenProvider):
    """
    Silent token acquisition from a per-owner cache.

    A cached access token is returned while it is valid; otherwise the cached
    refresh token is redeemed at the token endpoint and the new token set is
    stored back through the cache.
    """

    def __init__(
        self,
        storage_provider: StorageProvider,
        token_endpoint: str,
        client_id: str,
        client_secret: str,
        scope: str = "https://graph.microsoft.com/.default offline_access",
        timeout: float = 30.0,
    ):
        self.storage = storage_provider
        self.token_endpoint = token_endpoint
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope
        self.timeout = timeout

    async def get_access_token(self, owner_identity: str) -> str:
        async with TokenCache(self.storage, owner_identity) as cache:
            entry = cache.get()

            if entry.get("access_token") and entry.get("expires_at", 0) > time.time() + EXPIRY_SKEW_SECONDS:
                return entry["access_token"]

            refresh_token = entry.get("refresh_token")
            if not refresh_token:
                raise AuthenticationError(f"No cached credentials for owner {owner_identity}")

            logger.debug(f"Refreshing access token for owner {owner_identity}")
            token_set = await self._redeem_refresh_token(refresh_token)

            cache.set(
                {
                    "access_token": token_set["access_token"],
                    # Some endpoints rotate the refresh token, others keep it
                    "refresh_token": token_set.get("refresh_token", refresh_token),
                    "expires_at": time.time() + int(token_set.get("expires_in", 3600)),
                }
            )
            return token_set["access_token"]

    async def store_tokens(self, owner_identity: str, token_set: dict[str, Any]) -> None:
        """Seed the cache for an owner, e.g. after an interactive sign-in"""
        async with TokenCache(self.storage, owner_identity) as cache:
            cache.set(
                {
                    "access_token": token_set.get("access_token"),
                    "refresh_token": token_set.get("refresh_token"),
                    "expires_at": time.time() + int(token_set.get("expires_in", 0)),
                }
            )

    async def _redeem_refresh_token(self, refresh_token: str) -> dict[str, Any]:
        form = {
            "grant_type": "refresh_token",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
            "scope": self.scope,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.token_endpoint, data=form)
        except httpx.HTTPError as e:
            raise AuthenticationError(f"Token endpoint unreachable: {str(e)}")

        if response.status_code != 200:
            raise AuthenticationError(
                f"Token refresh failed: HTTP {response.status_code} {response.text[:200]}"
            )

        token_set = response.json()
        if "access_token" not in token_set:
            raise AuthenticationError("Token endpoint response missing access_token")
        return token_set
