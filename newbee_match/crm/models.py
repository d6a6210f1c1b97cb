"""Pydantic models for Salesforce payloads used by the facade."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

CONTACT_OBJECT = "Contact"

CONTACT_FIELDS: List[str] = [
    "Id",
    "Name",
    "Email",
    "CreatedDate",
    "MailingCity",
    "MailingState",
    "MailingPostalCode",
    "MailingLatitude",
    "MailingLongitude",
    "RecordTypeId",
]


class CrmCredentials(BaseModel):
    """The pair needed to resume a Salesforce connection."""

    instance_url: str
    access_token: str


class QueryResult(BaseModel):
    """Envelope returned by the ``/query`` REST resource."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    total_size: int = Field(default=0, alias="totalSize")
    done: bool = True
    records: List[Dict[str, Any]] = Field(default_factory=list)
    next_records_url: Optional[str] = Field(default=None, alias="nextRecordsUrl")


class SaveResult(BaseModel):
    """One entry of a create/delete response."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    success: bool = False
    errors: List[Dict[str, Any]] = Field(default_factory=list)


class DeleteOutcome(BaseModel):
    """Outcome of deleting a single record; failures do not abort the batch."""

    id: str
    success: bool
    message: Optional[str] = None


def strip_attributes(record: Dict[str, Any]) -> Dict[str, Any]:
    """Drop the ``attributes`` metadata block Salesforce adds to every record."""
    return {k: v for k, v in record.items() if k != "attributes"}
