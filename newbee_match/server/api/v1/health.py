"""
Health Check Endpoints.

This module provides basic system status endpoints (liveness text, health, version)
used for monitoring and deployment verification.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from newbee_match.server.core import constant

router = APIRouter()


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Liveness",
    description="Plain text greeting confirming the backend is reachable.",
)
async def root():
    return constant.LIVENESS_MESSAGE


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"status": "ok"}


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    return {"version": constant.API_VERSION}
