"""Unit tests for the request dependencies that build the per-request CRM context."""

from unittest.mock import Mock

import httpx
import pytest

from newbee_match.crm.client import SalesforceClient
from newbee_match.server.core.config import settings
from newbee_match.server.core.session import InMemorySessionStore
from newbee_match.server.services.deps import (
    CrmContext,
    get_crm_context,
    get_match_service,
    get_oauth,
    get_report_service,
)
from newbee_match.server.services.errors import UnauthenticatedError


def _request(cookies: dict) -> Mock:
    request = Mock()
    request.cookies = cookies
    request.method = "GET"
    request.url.path = "/contacts"
    return request


def test_crm_context_binds_session_credentials():
    store = InMemorySessionStore()
    sid = store.create("https://na1.salesforce.com/", "tok")
    http = httpx.AsyncClient()

    ctx = get_crm_context(_request({settings.session.cookie_name: sid}), store, http)

    assert isinstance(ctx, CrmContext)
    assert ctx.session_id == sid
    assert isinstance(ctx.crm, SalesforceClient)
    assert ctx.crm.instance_url == "https://na1.salesforce.com"
    assert ctx.crm.access_token == "tok"
    assert ctx.crm.data_url == f"https://na1.salesforce.com/services/data/v{settings.salesforce.api_version}"


@pytest.mark.parametrize("cookies", [{}, {"newbee_match_session": "nope"}, {"other": "x"}])
def test_crm_context_without_session_raises(cookies):
    with pytest.raises(UnauthenticatedError):
        get_crm_context(_request(cookies), InMemorySessionStore(), httpx.AsyncClient())


def test_services_share_the_context_client():
    store = InMemorySessionStore()
    sid = store.create("https://na1.salesforce.com", "tok")
    ctx = get_crm_context(_request({settings.session.cookie_name: sid}), store, httpx.AsyncClient())

    assert get_match_service(ctx).crm is ctx.crm
    assert get_report_service(ctx).crm is ctx.crm
    assert get_match_service(ctx).record_types.newbee_record_type_id == "012NEWBEE"


def test_oauth_uses_settings():
    oauth = get_oauth(httpx.AsyncClient())
    assert oauth.login_url == settings.salesforce.login_url.rstrip("/")
    assert oauth.client_id == "test-consumer-key"
