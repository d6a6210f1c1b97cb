"""
Query/Report Service.

Read-only listings of Contacts and Relationships, and the ``leftRightData``
reshaping: contacts split into NewBee and Mentor tables, each NewBee row
carrying the mentor it is matched with.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from newbee_match.core.logging_config import get_logger
from newbee_match.crm.interfaces import CrmFacade
from newbee_match.crm.models import CONTACT_FIELDS, CONTACT_OBJECT
from newbee_match.crm.soql import build_select
from newbee_match.server.core.config import RecordTypeConfig

logger = get_logger(__name__)

NOT_AVAILABLE = "N/A"

# (header, Contact field) in display order
CONTACT_COLUMNS = [
    ("Id", "Id"),
    ("Name", "Name"),
    ("Email", "Email"),
    ("Created Date", "CreatedDate"),
    ("City", "MailingCity"),
    ("State", "MailingState"),
    ("Postal Code", "MailingPostalCode"),
    ("Latitude", "MailingLatitude"),
    ("Longitude", "MailingLongitude"),
]

MATCH_COLUMNS = [("Mentor Id", "MentorId"), ("Mentor Name", "MentorName")]

NEWBEE_HEADER = [title for title, _ in CONTACT_COLUMNS + MATCH_COLUMNS]
MENTOR_HEADER = [title for title, _ in CONTACT_COLUMNS]


def _cell(value: Any) -> Any:
    return NOT_AVAILABLE if value is None or value == "" else value


class ReportService:
    def __init__(self, crm: CrmFacade, record_types: RecordTypeConfig) -> None:
        self.crm = crm
        self.record_types = record_types

    def _relationship_fields(self) -> List[str]:
        rt = self.record_types
        return ["Id", rt.relationship_source_field, rt.relationship_related_field, rt.relationship_type_field]

    async def contacts(self) -> List[Dict[str, Any]]:
        return await self.crm.query_all(build_select(CONTACT_OBJECT, CONTACT_FIELDS))

    async def relationships(self) -> List[Dict[str, Any]]:
        return await self.crm.query_all(build_select(self.record_types.relationship_object, self._relationship_fields()))

    def record_type_of(self, contact: Dict[str, Any]) -> Optional[str]:
        record_type_id = contact.get("RecordTypeId")
        if record_type_id and record_type_id == self.record_types.newbee_record_type_id:
            return "NewBee"
        if record_type_id and record_type_id == self.record_types.mentor_record_type_id:
            return "Mentor"
        return None

    def join_mentors(self, contacts: List[Dict[str, Any]], relationships: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Return copies of ``contacts`` with ``MentorId``/``MentorName`` set on matched NewBees."""
        rt = self.record_types
        by_id = {c.get("Id"): dict(c) for c in contacts}
        for rel in relationships:
            if rel.get(rt.relationship_type_field) != rt.mentor_relationship_type:
                continue
            newbee = by_id.get(rel.get(rt.relationship_source_field))
            if newbee is None or self.record_type_of(newbee) != "NewBee":
                continue
            mentor_id = rel.get(rt.relationship_related_field)
            mentor = by_id.get(mentor_id)
            newbee["MentorId"] = mentor_id
            newbee["MentorName"] = mentor.get("Name") if mentor else None
        return [by_id[c.get("Id")] for c in contacts]

    def build_tables(self, contacts: List[Dict[str, Any]]) -> Dict[str, List[List[Any]]]:
        newbee_rows: List[List[Any]] = [list(NEWBEE_HEADER)]
        mentor_rows: List[List[Any]] = [list(MENTOR_HEADER)]
        for contact in contacts:
            kind = self.record_type_of(contact)
            if kind == "NewBee":
                newbee_rows.append([_cell(contact.get(f)) for _, f in CONTACT_COLUMNS + MATCH_COLUMNS])
            elif kind == "Mentor":
                mentor_rows.append([_cell(contact.get(f)) for _, f in CONTACT_COLUMNS])
        return {"newbee": newbee_rows, "mentor": mentor_rows}

    async def left_right_data(self) -> Dict[str, List[List[Any]]]:
        # Relationships are joined against the contact list, so contacts come first.
        contacts = await self.contacts()
        relationships = await self.relationships()
        tables = self.build_tables(self.join_mentors(contacts, relationships))
        logger.debug(
            f"leftRightData: {len(tables['newbee']) - 1} newbees, {len(tables['mentor']) - 1} mentors "
            f"from {len(contacts)} contacts and {len(relationships)} relationships"
        )
        return tables
