from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
import pytest_asyncio

INSTANCE_URL = "http://mock.my.salesforce.com"
LOGIN_URL = "http://mock-login.salesforce.com"
API_PREFIX = "/services/data/v58.0"

NEWBEE_RT = "012NEWBEE"
MENTOR_RT = "012MENTOR"

REL_OBJECT = "npe4__Relationship__c"
REL_SOURCE = "npe4__Contact__c"
REL_RELATED = "npe4__RelatedContact__c"
REL_TYPE = "npe4__Type__c"

_SELECT = re.compile(r"^SELECT (?P<fields>.+?) FROM (?P<object>\w+)(?: WHERE (?P<where>.+))?$")
_CONDITION = re.compile(r"^(?P<field>[\w.]+) = '(?P<value>(?:[^'\\]|\\.)*)'$")


def _parse_where(where: Optional[str]) -> List[Tuple[str, str]]:
    if not where:
        return []
    conditions = []
    for clause in where.split(" AND "):
        m = _CONDITION.match(clause)
        assert m, f"unsupported SOQL clause: {clause}"
        value = m.group("value").replace("\\'", "'").replace("\\\\", "\\")
        conditions.append((m.group("field"), value))
    return conditions


class FakeSalesforce:
    """In-memory Salesforce org served through ``httpx.MockTransport``.

    Understands the REST calls the backend makes: SOQL query (exact-match
    WHERE clauses only), sobject create, composite delete, userinfo, and the
    OAuth token/revoke endpoints.
    """

    def __init__(self) -> None:
        self.objects: Dict[str, List[Dict[str, Any]]] = {"Contact": [], REL_OBJECT: []}
        self.calls: List[Tuple[str, str]] = []
        self.queries: List[str] = []
        self.fail_create = False
        self.undeletable: set[str] = set()
        self.revoked: List[str] = []
        self.fail_revoke = False
        self.page_size: Optional[int] = None
        self._pages: Dict[str, List[Dict[str, Any]]] = {}
        self._seq = 0

    # --- data helpers -------------------------------------------------
    def add_contact(self, contact_id: str, record_type_id: Optional[str], **fields: Any) -> Dict[str, Any]:
        record = {"Id": contact_id, "RecordTypeId": record_type_id, "Name": contact_id, **fields}
        self.objects["Contact"].append(record)
        return record

    def add_relationship(self, source: str, related: str, rel_type: str = "Mentor") -> str:
        self._seq += 1
        rel_id = f"a0B{self._seq:012d}"
        self.objects[REL_OBJECT].append({"Id": rel_id, REL_SOURCE: source, REL_RELATED: related, REL_TYPE: rel_type})
        return rel_id

    def relationships_between(self, newbee_id: str, mentor_id: str) -> List[Dict[str, Any]]:
        return [
            r for r in self.objects[REL_OBJECT] if r[REL_SOURCE] == newbee_id and r[REL_RELATED] == mentor_id
        ]

    def count(self, method: str, fragment: str = "") -> int:
        return sum(1 for m, path in self.calls if m == method and fragment in path)

    @property
    def crm_calls(self) -> int:
        return len(self.calls)

    # --- transport ----------------------------------------------------
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append((request.method, path))
        host = f"{request.url.scheme}://{request.url.host}"

        if host == LOGIN_URL:
            return self._oauth(request, path)

        if request.headers.get("Authorization") != "Bearer token-123":
            return httpx.Response(401, json=[{"message": "Session expired or invalid", "errorCode": "INVALID_SESSION_ID"}])

        if request.method == "GET" and path == f"{API_PREFIX}/query":
            return self._query(request.url.params["q"])
        if request.method == "GET" and path.startswith(f"{API_PREFIX}/query/"):
            return self._next_page(path.rsplit("/", 1)[-1])
        if request.method == "POST" and path.startswith(f"{API_PREFIX}/sobjects/"):
            return self._create(path.split("/")[-2], json.loads(request.content))
        if request.method == "DELETE" and path == f"{API_PREFIX}/composite/sobjects":
            return self._delete(request.url.params["ids"].split(","))
        if request.method == "GET" and path == "/services/oauth2/userinfo":
            return httpx.Response(200, json={"user_id": "005USER", "name": "Test User", "email": "t@example.com"})
        return httpx.Response(404, json=[{"message": "not found", "errorCode": "NOT_FOUND"}])

    def _oauth(self, request: httpx.Request, path: str) -> httpx.Response:
        form = dict(httpx.QueryParams(request.content.decode()))
        if path == "/services/oauth2/token":
            if form.get("code") != "good-code":
                return httpx.Response(400, json={"error": "invalid_grant", "error_description": "expired code"})
            return httpx.Response(200, json={"access_token": "token-123", "instance_url": INSTANCE_URL})
        if path == "/services/oauth2/revoke":
            if self.fail_revoke:
                return httpx.Response(503, json={"error": "unavailable"})
            self.revoked.append(form.get("token", ""))
            return httpx.Response(200)
        return httpx.Response(404)

    def _query(self, soql: str) -> httpx.Response:
        self.queries.append(soql)
        m = _SELECT.match(soql)
        if not m:
            return httpx.Response(400, json=[{"message": f"malformed query: {soql}", "errorCode": "MALFORMED_QUERY"}])
        fields = [f.strip() for f in m.group("fields").split(",")]
        rows = self.objects.get(m.group("object"))
        if rows is None:
            return httpx.Response(400, json=[{"message": "sObject type not supported", "errorCode": "INVALID_TYPE"}])
        conditions = _parse_where(m.group("where"))
        matched = [
            {"attributes": {"type": m.group("object")}, **{f: row.get(f) for f in fields}}
            for row in rows
            if all(str(row.get(f)) == v for f, v in conditions)
        ]
        return httpx.Response(200, json=self._page(matched))

    def _page(self, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        if self.page_size is None or len(records) <= self.page_size:
            return {"totalSize": len(records), "done": True, "records": records}
        self._seq += 1
        locator = f"01g{self._seq:06d}"
        self._pages[locator] = records[self.page_size:]
        return {
            "totalSize": len(records),
            "done": False,
            "records": records[: self.page_size],
            "nextRecordsUrl": f"{API_PREFIX}/query/{locator}",
        }

    def _next_page(self, locator: str) -> httpx.Response:
        return httpx.Response(200, json=self._page(self._pages.pop(locator)))

    def _create(self, object_type: str, fields: Dict[str, Any]) -> httpx.Response:
        if self.fail_create:
            return httpx.Response(
                400, json=[{"message": "FIELD_CUSTOM_VALIDATION_EXCEPTION", "errorCode": "FIELD_CUSTOM_VALIDATION"}]
            )
        self._seq += 1
        new_id = f"a0B{self._seq:012d}"
        self.objects.setdefault(object_type, []).append({"Id": new_id, **fields})
        return httpx.Response(201, json={"id": new_id, "success": True, "errors": []})

    def _delete(self, ids: List[str]) -> httpx.Response:
        results = []
        for record_id in ids:
            if record_id in self.undeletable:
                results.append(
                    {
                        "id": None,
                        "success": False,
                        "errors": [{"message": "insufficient access rights", "statusCode": "INSUFFICIENT_ACCESS"}],
                    }
                )
                continue
            for rows in self.objects.values():
                rows[:] = [r for r in rows if r["Id"] != record_id]
            results.append({"id": record_id, "success": True, "errors": []})
        return httpx.Response(200, json=results)


@pytest.fixture
def fake_sf() -> FakeSalesforce:
    sf = FakeSalesforce()
    sf.add_contact("003A00000000001", NEWBEE_RT, Name="Ada Newbee", Email="ada@example.com", MailingCity="Houston",
                   MailingState="TX", MailingPostalCode="77005", MailingLatitude=29.71, MailingLongitude=-95.40,
                   CreatedDate="2019-01-01T00:00:00.000+0000")
    sf.add_contact("003C00000000001", NEWBEE_RT, Name="Cy Newbee", Email="cy@example.com",
                   CreatedDate="2019-02-01T00:00:00.000+0000")
    sf.add_contact("003B00000000001", MENTOR_RT, Name="Grace Mentor", Email="grace@example.com", MailingCity="Austin",
                   CreatedDate="2018-05-01T00:00:00.000+0000")
    sf.add_contact("003D00000000001", MENTOR_RT, Name="Dee Mentor", Email="dee@example.com",
                   CreatedDate="2018-06-01T00:00:00.000+0000")
    sf.add_contact("003X00000000001", None, Name="Other Person")
    return sf


@pytest.fixture
def record_types():
    from newbee_match.server.core.config import RecordTypeConfig

    return RecordTypeConfig(newbee_record_type_id=NEWBEE_RT, mentor_record_type_id=MENTOR_RT)


@pytest_asyncio.fixture
async def sf_client(fake_sf: FakeSalesforce):
    from newbee_match.crm.client import SalesforceClient

    async with httpx.AsyncClient(transport=fake_sf.transport()) as http:
        yield SalesforceClient(INSTANCE_URL, "token-123", api_version="58.0", client=http)
