"""
Match Workflow.

Creates and removes the Relationship record that pairs a NewBee contact with a
Mentor contact. Each workflow is a strict sequence of CRM calls; the first
failing step raises and no later step runs.

Relationship direction: source = newbee, related = mentor, type = the
configured mentor type tag ("Mentor" by default). Match, unmatch and the
report join all read the direction from ``RecordTypeConfig``.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List

from newbee_match.core.logging_config import get_logger
from newbee_match.crm.interfaces import CrmFacade
from newbee_match.crm.models import CONTACT_OBJECT, DeleteOutcome
from newbee_match.crm.soql import is_record_id
from newbee_match.server.core.config import RecordTypeConfig
from newbee_match.server.services.errors import (
    AlreadyMatchedError,
    InvalidMentorError,
    InvalidNewbeeError,
    NoMatchFoundError,
)

logger = get_logger(__name__)


class NewbeeLocks:
    """
    Per-newbee asyncio locks.

    Serializes match/unmatch for the same newbee inside one process so the
    "already matched" check and the create cannot interleave. Entries are
    dropped once nobody holds or waits on them.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, newbee_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(newbee_id, asyncio.Lock())
        self._users[newbee_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[newbee_id] -= 1
            if self._users[newbee_id] == 0:
                del self._users[newbee_id]
                self._locks.pop(newbee_id, None)

    def __len__(self) -> int:
        return len(self._locks)


_newbee_locks = NewbeeLocks()


def get_newbee_locks() -> NewbeeLocks:
    return _newbee_locks


@dataclass
class MatchResult:
    relationship_id: str


@dataclass
class UnmatchResult:
    deleted: List[str] = field(default_factory=list)
    failed: List[DeleteOutcome] = field(default_factory=list)


class MatchService:
    """
    Match/unmatch workflows over a CRM facade bound to the caller's session.
    """

    def __init__(self, crm: CrmFacade, record_types: RecordTypeConfig, locks: NewbeeLocks | None = None) -> None:
        self.crm = crm
        self.record_types = record_types
        self.locks = locks if locks is not None else _newbee_locks

    async def _ensure_newbee(self, newbee_id: str) -> None:
        if not is_record_id(newbee_id):
            raise InvalidNewbeeError(newbee_id)
        found = await self.crm.find_records(
            CONTACT_OBJECT, {"Id": newbee_id, "RecordTypeId": self.record_types.newbee_record_type_id}
        )
        if not found:
            raise InvalidNewbeeError(newbee_id)

    async def _ensure_mentor(self, mentor_id: str) -> None:
        if not is_record_id(mentor_id):
            raise InvalidMentorError(mentor_id)
        found = await self.crm.find_records(
            CONTACT_OBJECT, {"Id": mentor_id, "RecordTypeId": self.record_types.mentor_record_type_id}
        )
        if not found:
            raise InvalidMentorError(mentor_id)

    async def _mentor_relationships(self, newbee_id: str, mentor_id: str | None = None) -> List[str]:
        rt = self.record_types
        conditions = {rt.relationship_source_field: newbee_id}
        if mentor_id is not None:
            conditions[rt.relationship_related_field] = mentor_id
        conditions[rt.relationship_type_field] = rt.mentor_relationship_type
        records = await self.crm.find_records(rt.relationship_object, conditions)
        return [rec["Id"] for rec in records]

    async def match(self, newbee_id: str, mentor_id: str) -> MatchResult:
        """
        Pair a NewBee with a Mentor.

        Raises:
            InvalidNewbeeError: ``newbee_id`` is not a NewBee contact.
            InvalidMentorError: ``mentor_id`` is not a Mentor contact.
            AlreadyMatchedError: the NewBee already has a mentor relationship.
            CrmError: any Salesforce failure, including a rejected create.
        """
        async with self.locks.hold(newbee_id):
            await self._ensure_newbee(newbee_id)
            await self._ensure_mentor(mentor_id)
            if await self._mentor_relationships(newbee_id):
                raise AlreadyMatchedError(newbee_id)

            rt = self.record_types
            relationship_id = await self.crm.create_record(
                rt.relationship_object,
                {
                    rt.relationship_source_field: newbee_id,
                    rt.relationship_related_field: mentor_id,
                    rt.relationship_type_field: rt.mentor_relationship_type,
                },
            )
        logger.info(f"Matched newbee {newbee_id} with mentor {mentor_id}: relationship {relationship_id}")
        return MatchResult(relationship_id=relationship_id)

    async def unmatch(self, newbee_id: str, mentor_id: str) -> UnmatchResult:
        """
        Remove every mentor relationship between a NewBee and a Mentor.

        Deletion failures are logged and reported per id; they do not fail the call.

        Raises:
            InvalidNewbeeError, InvalidMentorError: as for ``match``.
            NoMatchFoundError: the pair is not matched.
            CrmError: any Salesforce failure.
        """
        async with self.locks.hold(newbee_id):
            await self._ensure_newbee(newbee_id)
            await self._ensure_mentor(mentor_id)
            ids = await self._mentor_relationships(newbee_id, mentor_id)
            if not ids:
                raise NoMatchFoundError(newbee_id, mentor_id)
            outcomes = await self.crm.delete_records(self.record_types.relationship_object, ids)

        result = UnmatchResult()
        for outcome in outcomes:
            if outcome.success:
                result.deleted.append(outcome.id)
            else:
                logger.error(f"Failed to delete relationship {outcome.id}: {outcome.message}")
                result.failed.append(outcome)
        logger.info(
            f"Unmatched newbee {newbee_id} from mentor {mentor_id}: "
            f"{len(result.deleted)} deleted, {len(result.failed)} failed"
        )
        return result
