"""
Exception Handlers for the FastAPI Application.

- Service errors (``MatchBackendError``) map to their own status and a
  ``{error, kind}`` body.
- Salesforce errors (``CrmError``) are logged with the full Salesforce payload;
  the client only receives a generic message and the error kind.
- Anything else is caught by the global handler, logged with an error id, and
  returned as a 500.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from newbee_match.core.logging_config import get_logger
from newbee_match.core.monitoring import log_error
from newbee_match.crm.errors import CrmError
from newbee_match.server.services.errors import MatchBackendError

logger = get_logger(__name__)


async def service_error_handler(request: Request, exc: MatchBackendError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} rejected: {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content={"error": exc.message, "kind": exc.kind})


async def crm_error_handler(request: Request, exc: CrmError) -> JSONResponse:
    """
    Log a Salesforce failure in full and return a generic error body.

    Args:
        request: The HTTP request that triggered the Salesforce call
        exc: The Salesforce error

    Returns:
        JSONResponse with 502 (upstream failure) or 504 (timeout)
    """
    logger.error(
        f"Salesforce error in {request.method} {request.url.path}: {exc}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "error_kind": exc.kind,
            "upstream_status": exc.status_code,
            "upstream_details": exc.details,
        },
    )
    log_error(exc.kind, str(exc), {"path": request.url.path, "upstream_status": exc.status_code})
    message = "Salesforce request timed out" if exc.kind == "Timeout" else "Salesforce request failed"
    return JSONResponse(status_code=exc.http_status, content={"error": message, "kind": exc.kind})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(MatchBackendError, service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(CrmError, crm_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
