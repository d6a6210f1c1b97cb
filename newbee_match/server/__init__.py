"""
Newbee Match Server Package.

This package contains the web server that mediates between the browser client
and Salesforce.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Settings, constants and the server-side session store.
    services: Match workflow, report reshaping and request dependencies.
    exception_handlers: Error-to-response translation.
    middleware: Request logging and tracing.
"""
