"""Small SOQL builder for exact-match lookups."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

_IDENTIFIER = re.compile(r"^[A-Za-z][A-Za-z0-9_]*(\.[A-Za-z][A-Za-z0-9_]*)*$")
# 15-character case-sensitive or 18-character case-insensitive record id
_RECORD_ID = re.compile(r"^[A-Za-z0-9]{15}(?:[A-Za-z0-9]{3})?$")


def is_record_id(value: Any) -> bool:
    """Return True if ``value`` has the shape of a Salesforce record id."""
    return isinstance(value, str) and bool(_RECORD_ID.match(value))


def quote(value: Any) -> str:
    """Render a Python value as a SOQL literal."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{text}'"


def _identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid SOQL identifier: {name!r}")
    return name


def build_select(object_type: str, fields: Iterable[str], where: Mapping[str, Any] | None = None) -> str:
    """Build ``SELECT ... FROM ... WHERE a = 'x' AND b = 'y'``.

    Args:
        object_type: SObject API name.
        fields: Field API names to select.
        where: Exact-match conditions joined with AND; empty means no WHERE clause.

    Raises:
        ValueError: If an object or field name is not a plain SOQL identifier.
    """
    columns = ", ".join(_identifier(f) for f in fields) or "Id"
    soql = f"SELECT {columns} FROM {_identifier(object_type)}"
    if where:
        clauses = [f"{_identifier(k)} = {quote(v)}" for k, v in where.items()]
        soql += " WHERE " + " AND ".join(clauses)
    return soql
