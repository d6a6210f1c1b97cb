from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional

import httpx

from newbee_match.core.monitoring import log_crm_call

from .errors import CrmTimeoutError, UpstreamError
from .models import DeleteOutcome, QueryResult, SaveResult, strip_attributes
from .soql import build_select


class SalesforceClient:
    """
    Thin async HTTP client for the Salesforce REST API, bound to one OAuth session.

    Responsibilities:
    - query / query_all / run_query
    - find_records (exact-match conjunction)
    - create_record
    - delete_records (per-id outcomes, no rollback)
    - identity

    Every call is a single round trip (``query_all`` aside, which follows
    pagination), never cached and never retried. Timeouts surface as
    `CrmTimeoutError`, everything else as `UpstreamError`.
    """

    def __init__(
        self,
        instance_url: str,
        access_token: str,
        *,
        api_version: str = "58.0",
        timeout: float = 10.0,
        client: httpx.AsyncClient,
    ) -> None:
        self.instance_url = instance_url.rstrip("/")
        self.access_token = access_token
        self.api_version = api_version
        self.timeout = timeout
        self._client = client
        self._logger = logging.getLogger(__name__)

    @property
    def data_url(self) -> str:
        return f"{self.instance_url}/services/data/v{self.api_version}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def _request(self, operation: str, target: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        start = time.monotonic()
        status_code: Optional[int] = None
        try:
            self._logger.debug("SalesforceClient.%s: %s %s", operation, method, url)
            r = await self._client.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
            status_code = r.status_code
            r.raise_for_status()
        except httpx.TimeoutException as e:
            self._logger.error("SalesforceClient.%s timed out after %ss (%s)", operation, self.timeout, target)
            raise CrmTimeoutError(operation, self.timeout) from e
        except httpx.HTTPStatusError as e:
            details = _error_payload(e.response)
            self._logger.error(
                "SalesforceClient.%s failed: status=%s target=%s details=%s",
                operation,
                e.response.status_code,
                target,
                details,
            )
            raise UpstreamError(
                f"Salesforce {operation} failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=details,
            ) from e
        except httpx.HTTPError as e:
            self._logger.error("SalesforceClient.%s transport error: %s", operation, e)
            raise UpstreamError(f"Salesforce {operation} failed: {e}") from e
        finally:
            log_crm_call(operation, target, (time.monotonic() - start) * 1000, status_code)
        return r

    async def query(self, soql: str) -> QueryResult:
        """Run a SOQL query and return the first page with its envelope."""
        r = await self._request("query", soql, "GET", f"{self.data_url}/query", params={"q": soql})
        result = QueryResult.model_validate(r.json())
        self._logger.debug("SalesforceClient.query: got %d of %d records", len(result.records), result.total_size)
        return result

    async def run_query(self, soql: str) -> List[Dict[str, Any]]:
        """Run a SOQL query and return the records of the first page."""
        result = await self.query(soql)
        return [strip_attributes(rec) for rec in result.records]

    async def query_all(self, soql: str) -> List[Dict[str, Any]]:
        """Run a SOQL query and follow ``nextRecordsUrl`` until every page is read."""
        result = await self.query(soql)
        records = list(result.records)
        while not result.done and result.next_records_url:
            r = await self._request("query_more", soql, "GET", f"{self.instance_url}{result.next_records_url}")
            result = QueryResult.model_validate(r.json())
            records.extend(result.records)
        return [strip_attributes(rec) for rec in records]

    async def find_records(
        self,
        object_type: str,
        filter: Mapping[str, Any],
        fields: Iterable[str] = ("Id",),
    ) -> List[Dict[str, Any]]:
        """Return records of ``object_type`` whose fields equal every value in ``filter``."""
        return await self.run_query(build_select(object_type, fields, filter))

    async def create_record(self, object_type: str, fields: Mapping[str, Any]) -> str:
        """Create one record and return its id."""
        r = await self._request(
            "create", object_type, "POST", f"{self.data_url}/sobjects/{object_type}/", json=dict(fields)
        )
        result = SaveResult.model_validate(r.json())
        if not result.success or not result.id:
            self._logger.error("SalesforceClient.create rejected %s: %s", object_type, result.errors)
            raise UpstreamError(
                f"Salesforce create of {object_type} was rejected", status_code=r.status_code, details=result.errors
            )
        self._logger.debug("SalesforceClient.create: created %s id=%s", object_type, result.id)
        return result.id

    async def delete_records(self, object_type: str, ids: List[str]) -> List[DeleteOutcome]:
        """Delete records by id; each id's outcome is reported independently."""
        if not ids:
            return []
        r = await self._request(
            "delete",
            object_type,
            "DELETE",
            f"{self.data_url}/composite/sobjects",
            params={"ids": ",".join(ids), "allOrNone": "false"},
        )
        data = r.json()
        if not isinstance(data, list):
            raise UpstreamError("Unexpected response shape from delete", status_code=r.status_code, details=data)
        outcomes: List[DeleteOutcome] = []
        for record_id, raw in zip(ids, data):
            result = SaveResult.model_validate(raw)
            message = "; ".join(str(err.get("message", err)) for err in result.errors) or None
            outcomes.append(DeleteOutcome(id=record_id, success=result.success, message=message))
        return outcomes

    async def identity(self) -> Dict[str, Any]:
        """Return the OpenID Connect user info of the session's user."""
        r = await self._request("identity", "userinfo", "GET", f"{self.instance_url}/services/oauth2/userinfo")
        return r.json()


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
