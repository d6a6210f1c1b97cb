"""
Matching Endpoints.

Create and remove NewBee/Mentor matches. Validation failures are returned as
406 with a ``{error, kind}`` body.
"""

from typing import Optional

from fastapi import APIRouter

from newbee_match.core.logging_config import get_logger
from newbee_match.server.schemas import ErrorResponse, MatchResponse, UnmatchResponse
from newbee_match.server.services.deps import MatchServiceDep
from newbee_match.server.services.errors import MissingParameterError

logger = get_logger(__name__)
router = APIRouter()

_WORKFLOW_ERRORS = {
    400: {"model": ErrorResponse, "description": "Missing newbee or mentor parameter"},
    401: {"model": ErrorResponse, "description": "No active session"},
    406: {"model": ErrorResponse, "description": "Workflow validation failed"},
    502: {"model": ErrorResponse, "description": "Salesforce call failed"},
    504: {"model": ErrorResponse, "description": "Salesforce call timed out"},
}


def _require(newbee: Optional[str], mentor: Optional[str]) -> tuple[str, str]:
    if not newbee:
        raise MissingParameterError("newbee")
    if not mentor:
        raise MissingParameterError("mentor")
    return newbee, mentor


@router.post(
    "/match",
    response_model=MatchResponse,
    status_code=201,
    summary="Match",
    description="Pair a NewBee contact with a Mentor contact by creating a Relationship record.",
    responses=_WORKFLOW_ERRORS,
)
async def match(matching: MatchServiceDep, newbee: Optional[str] = None, mentor: Optional[str] = None):
    """
    Run the match workflow.

    - **newbee**: Contact id of a NewBee with no mentor yet.
    - **mentor**: Contact id of a Mentor.
    """
    newbee_id, mentor_id = _require(newbee, mentor)
    logger.debug(f"Match requested: newbee={newbee_id} mentor={mentor_id}")
    result = await matching.match(newbee_id, mentor_id)
    return MatchResponse(id=result.relationship_id)


@router.api_route(
    "/unmatch",
    methods=["POST", "GET"],
    response_model=UnmatchResponse,
    summary="Unmatch",
    description="Delete the Relationship records pairing a NewBee with a Mentor.",
    responses=_WORKFLOW_ERRORS,
)
async def unmatch(matching: MatchServiceDep, newbee: Optional[str] = None, mentor: Optional[str] = None):
    newbee_id, mentor_id = _require(newbee, mentor)
    logger.debug(f"Unmatch requested: newbee={newbee_id} mentor={mentor_id}")
    result = await matching.unmatch(newbee_id, mentor_id)
    return UnmatchResponse(deleted=result.deleted, failed=result.failed)
