"""Error types specific to the Salesforce layer.

Purpose:
- Provide typed exceptions thrown by `SalesforceClient` and `SalesforceOAuth`.
- Expose HTTP-oriented context (status code, Salesforce error payload) for
  server-side diagnosis. None of it is meant to reach the browser.

Usage:
- Catch `CrmError` for any failure talking to Salesforce.
- Catch `CrmTimeoutError` when the call did not complete in time.
"""

from __future__ import annotations

from typing import Any, Optional


class CrmError(Exception):
    """Base error for Salesforce failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code returned by Salesforce.
        details: Optional structured payload from Salesforce (e.g., JSON error list).
    """

    kind = "UpstreamError"
    http_status = 502

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class UpstreamError(CrmError):
    """Salesforce rejected the call, returned an API-level error, or was unreachable."""


class CrmTimeoutError(CrmError):
    """A Salesforce call did not complete within the configured timeout."""

    kind = "Timeout"
    http_status = 504

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(f"Salesforce {operation} timed out after {timeout:g}s")
        self.operation = operation
        self.timeout = timeout
