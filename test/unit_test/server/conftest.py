from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from newbee_match.server.core.session import InMemorySessionStore

INSTANCE_URL = "http://mock.my.salesforce.com"


@pytest.fixture(name="session_store")
def session_store_fixture() -> InMemorySessionStore:
    return InMemorySessionStore(ttl_seconds=60)


@pytest_asyncio.fixture(name="client")
async def client_fixture(fake_sf, session_store) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the app, with Salesforce served by the fake org."""
    from newbee_match.server.core.session import get_session_store
    from newbee_match.server.main import app
    from newbee_match.server.services.deps import get_http_client

    sf_http = httpx.AsyncClient(transport=fake_sf.transport())

    app.dependency_overrides[get_http_client] = lambda: sf_http
    app.dependency_overrides[get_session_store] = lambda: session_store

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()
    await sf_http.aclose()


@pytest_asyncio.fixture(name="auth_client")
async def auth_client_fixture(client: AsyncClient, session_store) -> AsyncClient:
    """The same client, carrying the cookie of an established session."""
    from newbee_match.server.core.config import settings

    session_id = session_store.create(INSTANCE_URL, "token-123")
    client.cookies.set(settings.session.cookie_name, session_id)
    return client
