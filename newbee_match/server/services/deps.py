"""
Request Dependencies.

Builds the per-request ``CrmContext`` (resolved session + Salesforce client)
once, in a FastAPI dependency, and hands it to the services explicitly.
Endpoints that depend on ``CrmContextDep`` never run without a valid session.
"""

from dataclasses import dataclass
from typing import Annotated, Optional

import httpx
from fastapi import Depends, Request

from newbee_match.core.logging_config import get_logger
from newbee_match.crm.client import SalesforceClient
from newbee_match.crm.oauth import SalesforceOAuth
from newbee_match.server.core.config import settings
from newbee_match.server.core.session import (
    InMemorySessionStore,
    SessionData,
    SessionNotFoundError,
    get_session_store,
)
from newbee_match.server.services.errors import UnauthenticatedError
from newbee_match.server.services.matching import MatchService
from newbee_match.server.services.reports import ReportService

logger = get_logger(__name__)

_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(timeout=settings.crm_timeout_seconds)
    return _http_client


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None and not _http_client.is_closed:
        await _http_client.aclose()
    _http_client = None


HttpClientDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]
SessionStoreDep = Annotated[InMemorySessionStore, Depends(get_session_store)]


def get_oauth(http: HttpClientDep) -> SalesforceOAuth:
    sf = settings.salesforce
    return SalesforceOAuth(
        sf.login_url,
        sf.consumer_key or "",
        sf.consumer_secret or "",
        sf.callback_url,
        timeout=sf.timeout_seconds,
        client=http,
    )


OAuthDep = Annotated[SalesforceOAuth, Depends(get_oauth)]


@dataclass
class CrmContext:
    """Everything an authenticated request needs to talk to Salesforce."""

    session_id: str
    session: SessionData
    crm: SalesforceClient


def get_crm_context(request: Request, store: SessionStoreDep, http: HttpClientDep) -> CrmContext:
    session_id = request.cookies.get(settings.session.cookie_name)
    try:
        data = store.resolve(session_id)
    except SessionNotFoundError:
        logger.debug(f"Rejected {request.method} {request.url.path}: no active session")
        raise UnauthenticatedError()
    sf = settings.salesforce
    crm = SalesforceClient(
        data.instance_url,
        data.access_token,
        api_version=sf.api_version,
        timeout=sf.timeout_seconds,
        client=http,
    )
    return CrmContext(session_id=data.session_id, session=data, crm=crm)


CrmContextDep = Annotated[CrmContext, Depends(get_crm_context)]


def get_match_service(ctx: CrmContextDep) -> MatchService:
    return MatchService(ctx.crm, settings.record_types)


def get_report_service(ctx: CrmContextDep) -> ReportService:
    return ReportService(ctx.crm, settings.record_types)


MatchServiceDep = Annotated[MatchService, Depends(get_match_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
