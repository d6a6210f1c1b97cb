"""
Salesforce integration.

Modules:
- client: async REST facade bound to one session (query, find, create, delete, identity)
- oauth: OAuth2 web-server flow (authorize URL, code exchange, revoke)
- soql: exact-match SOQL builder
- models: pydantic payload models
- errors: exception types
"""

from .client import SalesforceClient
from .errors import CrmError, CrmTimeoutError, UpstreamError
from .models import CONTACT_FIELDS, CONTACT_OBJECT, CrmCredentials, DeleteOutcome, QueryResult
from .oauth import SalesforceOAuth

__all__ = [
    "SalesforceClient",
    "SalesforceOAuth",
    "CrmError",
    "CrmTimeoutError",
    "UpstreamError",
    "CONTACT_FIELDS",
    "CONTACT_OBJECT",
    "CrmCredentials",
    "DeleteOutcome",
    "QueryResult",
]
