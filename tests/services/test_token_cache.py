"""
Unit tests for the token cache and token providers
"""

import asyncio
import json
import time
import unittest
from unittest.mock import AsyncMock, patch

import httpx

from transcribe_robot.core.exceptions import AuthenticationError
from transcribe_robot.security.token_cache import CachedTokenProvider, StaticTokenProvider, TokenCache
from transcribe_robot.storage.providers import MemoryStorageProvider


class CountingStorage(MemoryStorageProvider):
    """Memory storage that counts writes"""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = 0

    async def write(self, key, data):
        self.writes += 1
        await super().write(key, data)


class TestTokenCache(unittest.TestCase):
    """Test load-once and flush-if-dirty behavior"""

    def setUp(self):
        self.storage = CountingStorage()

    def test_unchanged_cache_is_not_written(self):
        async def run_test():
            async with TokenCache(self.storage, "owner") as cache:
                self.assertEqual(cache.get(), {})
                self.assertFalse(cache.is_dirty)

        asyncio.run(run_test())
        self.assertEqual(self.storage.writes, 0)

    def test_changed_cache_is_flushed_once(self):
        async def run_test():
            async with TokenCache(self.storage, "owner") as cache:
                cache.set({"access_token": "a1"})
                self.assertTrue(cache.is_dirty)

            async with TokenCache(self.storage, "owner") as cache:
                self.assertEqual(cache.get(), {"access_token": "a1"})
                cache.set({"access_token": "a1"})
                self.assertFalse(cache.is_dirty)

        asyncio.run(run_test())
        self.assertEqual(self.storage.writes, 1)

    def test_flush_runs_when_body_raises(self):
        async def run_test():
            async with TokenCache(self.storage, "owner") as cache:
                cache.set({"access_token": "a1"})
                raise RuntimeError("caller failed")

        with self.assertRaises(RuntimeError):
            asyncio.run(run_test())

        stored = asyncio.run(self.storage.read("tokens/owner.json"))
        self.assertEqual(json.loads(stored), {"access_token": "a1"})

    def test_clear(self):
        async def run_test():
            async with TokenCache(self.storage, "owner") as cache:
                cache.set({"access_token": "a1"})
            async with TokenCache(self.storage, "owner") as cache:
                cache.clear()
                self.assertTrue(cache.is_dirty)
            async with TokenCache(self.storage, "owner") as cache:
                self.assertEqual(cache.get(), {})

        asyncio.run(run_test())

    def test_unreadable_entry_is_discarded(self):
        self.storage = CountingStorage({"tokens/owner.json": b"garbage"})

        async def run_test():
            async with TokenCache(self.storage, "owner") as cache:
                self.assertEqual(cache.get(), {})

        asyncio.run(run_test())


class TestCachedTokenProvider(unittest.TestCase):
    """Test silent token acquisition"""

    def setUp(self):
        self.storage = CountingStorage()
        self.provider = CachedTokenProvider(
            storage_provider=self.storage,
            token_endpoint="https://login.example.com/token",
            client_id="client",
            client_secret="secret",
        )

    def seed(self, entry):
        asyncio.run(self.storage.write("tokens/owner.json", json.dumps(entry).encode()))
        self.storage.writes = 0

    def test_valid_cached_token_is_returned(self):
        self.seed({"access_token": "cached", "refresh_token": "r1", "expires_at": time.time() + 3600})
        self.provider._redeem_refresh_token = AsyncMock()

        token = asyncio.run(self.provider.get_access_token("owner"))

        self.assertEqual(token, "cached")
        self.provider._redeem_refresh_token.assert_not_called()
        self.assertEqual(self.storage.writes, 0)

    def test_expiring_token_is_refreshed(self):
        """Test a token inside the expiry skew is refreshed and stored back"""
        self.seed({"access_token": "old", "refresh_token": "r1", "expires_at": time.time() + 30})
        self.provider._redeem_refresh_token = AsyncMock(
            return_value={"access_token": "new", "expires_in": 3600}
        )

        token = asyncio.run(self.provider.get_access_token("owner"))

        self.assertEqual(token, "new")
        self.provider._redeem_refresh_token.assert_awaited_once_with("r1")
        stored = json.loads(asyncio.run(self.storage.read("tokens/owner.json")))
        self.assertEqual(stored["access_token"], "new")
        self.assertEqual(stored["refresh_token"], "r1")
        self.assertEqual(self.storage.writes, 1)

    def test_no_refresh_token(self):
        with self.assertRaises(AuthenticationError):
            asyncio.run(self.provider.get_access_token("stranger"))

    def test_refresh_posts_form_to_endpoint(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"access_token": "fresh", "expires_in": 60})

        transport = httpx.MockTransport(handler)
        real_client = httpx.AsyncClient

        with patch(
            "transcribe_robot.security.token_cache.httpx.AsyncClient",
            side_effect=lambda **kwargs: real_client(transport=transport, **kwargs),
        ):
            token_set = asyncio.run(self.provider._redeem_refresh_token("r1"))

        self.assertEqual(token_set["access_token"], "fresh")
        body = requests[0].content.decode()
        self.assertIn("grant_type=refresh_token", body)
        self.assertIn("refresh_token=r1", body)

    def test_refresh_rejected(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(400, json={"error": "invalid_grant"}))
        real_client = httpx.AsyncClient

        with patch(
            "transcribe_robot.security.token_cache.httpx.AsyncClient",
            side_effect=lambda **kwargs: real_client(transport=transport, **kwargs),
        ):
            with self.assertRaises(AuthenticationError):
                asyncio.run(self.provider._redeem_refresh_token("r1"))

    def test_store_tokens_seeds_cache(self):
        async def run_test():
            await self.provider.store_tokens(
                "owner", {"access_token": "a", "refresh_token": "r", "expires_in": 3600}
            )
            return await self.provider.get_access_token("owner")

        self.assertEqual(asyncio.run(run_test()), "a")


class TestStaticTokenProvider(unittest.TestCase):
    def test_returns_token(self):
        self.assertEqual(asyncio.run(StaticTokenProvider("t").get_access_token("anyone")), "t")

    def test_requires_token(self):
        with self.assertRaises(AuthenticationError):
            StaticTokenProvider("")


if __name__ == "__main__":
    unittest.main()
