"""
Unit tests for FastAPI application lifespan management.

Tests verify that shutdown closes the shared Salesforce HTTP client and that
abandoned sessions are dropped while the app is serving logins.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestLifespan:
    async def test_shutdown_closes_http_client(self):
        from newbee_match.server.main import lifespan

        with patch("newbee_match.server.main.get_session_store", return_value=MagicMock()), patch(
            "newbee_match.server.main.close_http_client", new_callable=AsyncMock
        ) as mock_close:
            async with lifespan(FastAPI()):
                mock_close.assert_not_called()

        mock_close.assert_awaited_once()

    async def test_startup_warns_when_record_types_missing(self):
        from newbee_match.server.core.config import RecordTypeConfig
        from newbee_match.server.main import lifespan

        mock_settings = MagicMock()
        mock_settings.record_types = RecordTypeConfig()
        with patch("newbee_match.server.main.settings", mock_settings), patch(
            "newbee_match.server.main.close_http_client", new_callable=AsyncMock
        ), patch("newbee_match.server.main.logger") as mock_logger:
            async with lifespan(FastAPI()):
                pass

        mock_logger.warning.assert_called_once()
        assert "MENTOR_RECORD_TYPE_ID" in mock_logger.warning.call_args[0][0]


class TestSessionPurgeWhileServing:
    async def test_login_drops_expired_sessions(self, client: AsyncClient):
        from newbee_match.server.core.session import InMemorySessionStore, get_session_store
        from newbee_match.server.main import app

        now = [0.0]
        store = InMemorySessionStore(ttl_seconds=10, clock=lambda: now[0])
        app.dependency_overrides[get_session_store] = lambda: store
        for _ in range(50):
            store.create("http://mock.my.salesforce.com", "stale")
        now[0] = 10_000.0

        response = await client.get("/auth/callback", params={"code": "good-code"})

        assert response.status_code == 307
        assert len(store) == 1
