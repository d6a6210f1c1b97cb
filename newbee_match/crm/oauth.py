from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from .errors import CrmTimeoutError, UpstreamError
from .models import CrmCredentials


class SalesforceOAuth:
    """
    OAuth2 web-server flow against a Salesforce login domain.

    Responsibilities:
    - authorization_url
    - exchange_code (authorization code -> instance URL + access token)
    - revoke
    """

    def __init__(
        self,
        login_url: str,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient,
    ) -> None:
        self.login_url = login_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self._client = client
        self._logger = logging.getLogger(__name__)

    def authorization_url(self, scope: str = "api", state: Optional[str] = None) -> str:
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": scope,
        }
        if state:
            params["state"] = state
        return f"{self.login_url}/services/oauth2/authorize?{urlencode(params)}"

    async def _post(self, operation: str, path: str, data: dict[str, str]) -> httpx.Response:
        try:
            self._logger.debug("SalesforceOAuth.%s: POST %s%s", operation, self.login_url, path)
            r = await self._client.post(f"{self.login_url}{path}", data=data, timeout=self.timeout)
            r.raise_for_status()
        except httpx.TimeoutException as e:
            raise CrmTimeoutError(operation, self.timeout) from e
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "SalesforceOAuth.%s failed: status=%s body=%s", operation, e.response.status_code, e.response.text
            )
            raise UpstreamError(
                f"Salesforce {operation} failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Salesforce {operation} failed: {e}") from e
        return r

    async def exchange_code(self, code: str) -> CrmCredentials:
        """Exchange an authorization code for session credentials."""
        r = await self._post(
            "authorize",
            "/services/oauth2/token",
            {
                "grant_type": "authorization_code",
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
            },
        )
        data = r.json()
        if "access_token" not in data or "instance_url" not in data:
            raise UpstreamError("Unexpected token response from Salesforce", status_code=r.status_code, details=data)
        self._logger.info("SalesforceOAuth.authorize: session established for %s", data["instance_url"])
        return CrmCredentials(instance_url=data["instance_url"], access_token=data["access_token"])

    async def revoke(self, access_token: str) -> None:
        """Revoke an access token."""
        await self._post("revoke", "/services/oauth2/revoke", {"token": access_token})
