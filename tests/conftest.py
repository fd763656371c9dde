"""Shared fixtures: an in-memory NocoDB stand-in served through httpx.MockTransport."""

import re
from typing import Dict
from typing import List

import httpx
import pytest

from tool_directory.catalog import DirectoryCatalog
from tool_directory.diagnostics import RecordingReporter
from tool_directory.models import EntityKind
from tool_directory.models import TableRef
from tool_directory.record_client import RecordClient

BASE_URL = "https://nocodb.example.com/api/v2"
TOKEN = "secret-token"
TABLES = {
    EntityKind.TOOL: TableRef("tbl_tools", "vw_tools"),
    EntityKind.BLOG_POST: TableRef("tbl_blog", "vw_blog"),
}

_WHERE = re.compile(r"^\((\w+),eq,(.*)\)$")


class FakeRecordStore:
    """Serves ``{"list": [...]}`` for each table and records incoming requests."""

    def __init__(self) -> None:
        self.tables: Dict[str, List] = {"tbl_tools": [], "tbl_blog": []}
        self.requests: List[httpx.Request] = []
        self.fail = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            raise httpx.ConnectError("Connection refused", request=request)

        table_id = request.url.path.split("/")[-2]
        records = list(self.tables.get(table_id, []))
        where = request.url.params.get("where")
        if where:
            match = _WHERE.match(where)
            field, value = match.group(1), match.group(2)
            records = [r for r in records if isinstance(r, dict) and r.get(field) == value]
        limit = request.url.params.get("limit")
        if limit:
            records = records[: int(limit)]
        return httpx.Response(200, json={"list": records})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def client(store, reporter):
    return RecordClient(BASE_URL, TOKEN, reporter=reporter, transport=store.transport)


@pytest.fixture
def catalog(client, reporter):
    return DirectoryCatalog(client, TABLES, reporter=reporter)
