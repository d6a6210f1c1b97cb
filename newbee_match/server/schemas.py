"""
API Schemas.

This module contains Pydantic models used for API responses.
These schemas define the interface contract between the browser client and the server.
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field

from newbee_match.crm.models import DeleteOutcome


class ErrorResponse(BaseModel):
    """
    Structured error body returned for every handled failure.
    """

    error: str = Field(..., description="Human-readable error message.", examples=["003A00000000001 is not a valid NewBee contact."])
    kind: str = Field(..., description="Machine-readable error kind.", examples=["InvalidNewbee"])


class MatchResponse(BaseModel):
    """
    Result of a successful match: the id of the created Relationship record.
    """

    id: str = Field(..., description="Id of the new Relationship record.", examples=["a0B5e000001AbCdEAK"])


class UnmatchResponse(BaseModel):
    """
    Result of an unmatch. Deletion is not atomic; ``failed`` lists ids Salesforce refused to delete.
    """

    deleted: List[str] = Field(default_factory=list, description="Relationship ids that were deleted.")
    failed: List[DeleteOutcome] = Field(default_factory=list, description="Per-id failures with messages.")


class LeftRightData(BaseModel):
    """
    NewBee and Mentor tables for the matching UI. Each table starts with a header row.
    """

    newbee: List[List[Any]] = Field(default_factory=list)
    mentor: List[List[Any]] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "newbee": [
                    ["Id", "Name", "Email", "Created Date", "City", "State", "Postal Code", "Latitude", "Longitude",
                     "Mentor Id", "Mentor Name"],
                    ["003A00000000001", "Ada", "ada@example.com", "2019-01-01T00:00:00.000+0000", "Houston", "TX", "77005",
                     29.7, -95.4, "003B00000000001", "Grace"],
                ],
                "mentor": [
                    ["Id", "Name", "Email", "Created Date", "City", "State", "Postal Code", "Latitude", "Longitude"],
                    ["003B00000000001", "Grace", "grace@example.com", "2018-05-01T00:00:00.000+0000", "N/A", "N/A", "N/A",
                     "N/A", "N/A"],
                ],
            }
        }
    )
