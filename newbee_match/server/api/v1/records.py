"""
Query and Report Endpoints.

Read-only access to Salesforce data: raw SOQL passthrough, Contact and
Relationship listings, and the NewBee/Mentor tables used by the matching UI.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter

from newbee_match.crm.models import QueryResult
from newbee_match.server.schemas import ErrorResponse, LeftRightData
from newbee_match.server.services.deps import CrmContextDep, ReportServiceDep
from newbee_match.server.services.errors import MissingParameterError

router = APIRouter()


@router.get(
    "/query",
    response_model=QueryResult,
    response_model_by_alias=True,
    summary="Run SOQL Query",
    description="Run a SOQL query string verbatim against Salesforce and return the first page of results.",
    responses={400: {"model": ErrorResponse, "description": "Missing query parameter"}},
)
async def run_query(ctx: CrmContextDep, q: Optional[str] = None):
    if not q:
        raise MissingParameterError("query")
    return await ctx.crm.query(q)


@router.get(
    "/contacts",
    response_model=List[Dict[str, Any]],
    summary="List Contacts",
)
async def list_contacts(reports: ReportServiceDep):
    return await reports.contacts()


@router.get(
    "/relationships",
    response_model=List[Dict[str, Any]],
    summary="List Relationships",
)
async def list_relationships(reports: ReportServiceDep):
    return await reports.relationships()


@router.get(
    "/leftRightData",
    response_model=LeftRightData,
    summary="NewBee and Mentor Tables",
    description=(
        "Contacts split by record type into a NewBee table and a Mentor table, each starting with a "
        "header row. NewBee rows carry the matched mentor; missing values are 'N/A'."
    ),
)
async def left_right_data(reports: ReportServiceDep):
    return await reports.left_right_data()
