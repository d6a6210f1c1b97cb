"""Service-level errors. Each carries the ``kind`` and HTTP status sent to the client."""

from __future__ import annotations


class MatchBackendError(Exception):
    kind = "Error"
    http_status = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthenticatedError(MatchBackendError):
    kind = "Unauthenticated"
    http_status = 401

    def __init__(self, message: str = "No active session") -> None:
        super().__init__(message)


class MissingParameterError(MatchBackendError):
    kind = "MissingParameter"
    http_status = 400

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing {name} parameter.")
        self.parameter = name


class WorkflowError(MatchBackendError):
    """Validation failure inside the match/unmatch workflow."""

    http_status = 406


class InvalidNewbeeError(WorkflowError):
    kind = "InvalidNewbee"

    def __init__(self, newbee_id: str) -> None:
        super().__init__(f"{newbee_id} is not a valid NewBee contact.")
        self.newbee_id = newbee_id


class InvalidMentorError(WorkflowError):
    kind = "InvalidMentor"

    def __init__(self, mentor_id: str) -> None:
        super().__init__(f"{mentor_id} is not a valid Mentor contact.")
        self.mentor_id = mentor_id


class AlreadyMatchedError(WorkflowError):
    kind = "AlreadyMatched"

    def __init__(self, newbee_id: str) -> None:
        super().__init__(f"NewBee {newbee_id} already has a mentor.")
        self.newbee_id = newbee_id


class NoMatchFoundError(WorkflowError):
    kind = "NoMatchFound"

    def __init__(self, newbee_id: str, mentor_id: str) -> None:
        super().__init__(f"No match exists between NewBee {newbee_id} and Mentor {mentor_id}.")
        self.newbee_id = newbee_id
        self.mentor_id = mentor_id
