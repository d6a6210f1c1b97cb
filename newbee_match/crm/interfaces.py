"""CRM facade contract.

Services depend on this Protocol instead of the concrete `SalesforceClient`,
so workflows can be exercised against an in-memory CRM in tests.

Contract guidelines
-------------------

- All methods are async and perform at most one round trip (``query_all``
  follows pagination).
- Failures raise `CrmError` subclasses; nothing is retried.
- ``delete_records`` reports each id independently and never rolls back.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Protocol

from .models import DeleteOutcome, QueryResult


class CrmFacade(Protocol):
    """Operations the backend needs from the CRM."""

    async def query(self, soql: str) -> QueryResult:
        ...

    async def run_query(self, soql: str) -> List[Dict[str, Any]]:
        ...

    async def query_all(self, soql: str) -> List[Dict[str, Any]]:
        ...

    async def find_records(
        self,
        object_type: str,
        filter: Mapping[str, Any],
        fields: Iterable[str] = ("Id",),
    ) -> List[Dict[str, Any]]:
        """
        Return records whose fields equal every value in ``filter``.

        Args:
            object_type: SObject API name.
            filter: Exact-match conditions, joined with AND.
            fields: Fields to return for each record.
        """
        ...

    async def create_record(self, object_type: str, fields: Mapping[str, Any]) -> str:
        """Create a record and return its new id."""
        ...

    async def delete_records(self, object_type: str, ids: List[str]) -> List[DeleteOutcome]:
        ...

    async def identity(self) -> Dict[str, Any]:
        ...
