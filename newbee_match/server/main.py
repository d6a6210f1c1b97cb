"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request tracing), registers exception handlers and includes all API routers.
It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from newbee_match.core.logging_config import get_logger, setup_logging
from newbee_match.core.monitoring import initialize_logfire

from .api.v1 import auth, health, matching, records
from .core import constant
from .core.config import settings
from .core.session import get_session_store
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.deps import close_http_client

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup logs the effective Salesforce target; shutdown closes the shared
    HTTP client and drops expired sessions.
    """
    logger.info("Starting up Newbee Match backend...")
    record_types = settings.record_types
    if not record_types.newbee_record_type_id or not record_types.mentor_record_type_id:
        logger.warning("NEWBEE_RECORD_TYPE_ID / MENTOR_RECORD_TYPE_ID are not set; every match will be rejected")
    logger.info(f"Salesforce login URL: {settings.salesforce.login_url} (API v{settings.salesforce.api_version})")

    yield

    logger.info("Shutting down Newbee Match backend...")
    get_session_store().purge_expired()
    await close_http_client()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Newbee Match Backend API

    Mediates between the matching front end and Salesforce: OAuth login, SOQL queries,
    NewBee/Mentor reports, and creating or removing mentor matches.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_DOCS_PREFIX}/openapi.json",
    docs_url=f"{constant.API_DOCS_PREFIX}/docs",
    redoc_url=f"{constant.API_DOCS_PREFIX}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(records.router, tags=["records"])
app.include_router(matching.router, tags=["matching"])


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "newbee_match.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
