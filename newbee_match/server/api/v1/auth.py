"""
Authentication Endpoints.

OAuth2 login/logout against Salesforce. The Salesforce access token is kept in
the server-side session store; the browser only ever holds the session id cookie.
"""

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse, Response

from newbee_match.core.logging_config import get_logger
from newbee_match.crm.errors import CrmError
from newbee_match.server.exception_handlers.global_handler import crm_error_handler
from newbee_match.server.core.config import settings
from newbee_match.server.services.deps import CrmContextDep, OAuthDep, SessionStoreDep
from newbee_match.server.services.errors import MissingParameterError, UnauthenticatedError

logger = get_logger(__name__)
router = APIRouter()


@router.get(
    "/login",
    summary="Login",
    description="Redirect the browser to the Salesforce authorization page.",
)
async def login(oauth: OAuthDep):
    return RedirectResponse(oauth.authorization_url(scope="api"))


@router.get(
    "/callback",
    summary="OAuth Callback",
    description="Called by Salesforce after login. Exchanges the authorization code and starts a session.",
    responses={400: {"description": "Missing authorization code"}, 401: {"description": "Login was denied"}},
)
async def callback(
    oauth: OAuthDep,
    store: SessionStoreDep,
    code: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
):
    """
    OAuth callback.

    On success the session cookie is set (HTTP only) and the browser is sent
    back to the front end.
    """
    if error:
        logger.warning(f"Salesforce authorization denied: {error}: {error_description}")
        raise UnauthenticatedError(error_description or error)
    if not code:
        raise MissingParameterError("code")

    credentials = await oauth.exchange_code(code)
    session_id = store.create(credentials.instance_url, credentials.access_token)

    session_cfg = settings.session
    response = RedirectResponse(session_cfg.app_redirect_url)
    response.set_cookie(
        key=session_cfg.cookie_name,
        value=session_id,
        max_age=session_cfg.ttl_seconds,
        httponly=True,
        secure=session_cfg.cookie_secure,
        samesite="lax",
    )
    return response


@router.get(
    "/logout",
    summary="Logout",
    description="Revoke the Salesforce token, destroy the server-side session and clear the cookie.",
)
async def logout(request: Request, ctx: CrmContextDep, oauth: OAuthDep, store: SessionStoreDep):
    response: Response
    try:
        await oauth.revoke(ctx.session.access_token)
        response = RedirectResponse(settings.session.app_redirect_url)
    except CrmError as exc:
        # local logout still happens when the revoke fails
        response = await crm_error_handler(request, exc)
    finally:
        store.destroy(ctx.session_id)

    session_cfg = settings.session
    response.delete_cookie(session_cfg.cookie_name, httponly=True, secure=session_cfg.cookie_secure, samesite="lax")
    return response


@router.get(
    "/whoami",
    summary="Current User",
    description="Return identity information of the logged in Salesforce user.",
)
async def whoami(ctx: CrmContextDep):
    return await ctx.crm.identity()
