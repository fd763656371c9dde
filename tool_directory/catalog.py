"""List, lookup and alternatives queries over the record store."""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from tool_directory.config import PAGE_SIZE
from tool_directory.config import Settings
from tool_directory.diagnostics import MISSING_TABLE
from tool_directory.diagnostics import NOT_FOUND
from tool_directory.diagnostics import TRANSPORT_ERROR
from tool_directory.diagnostics import UNSAFE_FILTER
from tool_directory.diagnostics import Reporter
from tool_directory.diagnostics import default_reporter
from tool_directory.models import BlogPost
from tool_directory.models import EntityKind
from tool_directory.models import TableRef
from tool_directory.models import Tool
from tool_directory.normalizer import normalize
from tool_directory.record_client import FilterExpressionError
from tool_directory.record_client import RecordClient
from tool_directory.record_client import RecordStoreError
from tool_directory.record_client import build_where

MAX_ALTERNATIVES = 3


class DirectoryCatalog:
    """Stateless request/normalize/return operations for tools and blog posts.

    Every operation recovers from transport and validation failures locally:
    lists come back empty and lookups come back as ``None``, with the failure
    sent to the reporter.
    """

    def __init__(
        self,
        client: RecordClient,
        tables: Dict[EntityKind, TableRef],
        *,
        reporter: Optional[Reporter] = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.client = client
        self.tables = dict(tables)
        self.reporter = reporter or client.reporter or default_reporter()
        self.page_size = page_size

    def _table(self, kind: EntityKind) -> Optional[TableRef]:
        table = self.tables.get(kind)
        if table is None or not table.table_id:
            self.reporter.error(MISSING_TABLE, f"No table configured for {kind.value} records", kind=kind.value)
            return None
        return table

    async def _fetch(self, kind: EntityKind, **query: Any) -> Optional[List[Any]]:
        table = self._table(kind)
        if table is None:
            return None
        try:
            return await self.client.fetch_records(table.table_id, table.view_id, **query)
        except RecordStoreError as exc:
            self.reporter.error(
                TRANSPORT_ERROR, f"Failed to fetch {kind.value} records", kind=kind.value, error=str(exc)
            )
            return None

    async def list(self, kind: EntityKind) -> List[Any]:
        """Fetch one page of records for ``kind``, dropping the ones that fail validation."""
        records = await self._fetch(kind, limit=self.page_size)
        if records is None:
            return []
        entities = []
        for raw in records:
            entity = normalize(kind, raw, self.reporter)
            if entity is not None:
                entities.append(entity)
        return entities

    async def get_by_slug(self, kind: EntityKind, slug: str) -> Optional[Any]:
        """Return the first record whose slug equals ``slug``, or ``None``."""
        try:
            where = build_where("slug", slug)
        except FilterExpressionError as exc:
            self.reporter.warning(UNSAFE_FILTER, f"Refusing {kind.value} lookup", slug=slug, error=str(exc))
            return None

        records = await self._fetch(kind, where=where)
        if not records:
            if records is not None:
                self.reporter.info(NOT_FOUND, f"No {kind.value} with slug {slug!r}", kind=kind.value, slug=slug)
            return None
        return normalize(kind, records[0], self.reporter)

    async def get_alternatives(self, tool: Tool, limit: int = MAX_ALTERNATIVES) -> List[Tool]:
        """Other tools sharing ``tool``'s category, case-insensitively, in list order."""
        if not tool.id or not tool.categories:
            return []
        category = tool.categories.lower()
        alternatives = []
        for candidate in await self.list(EntityKind.TOOL):
            if len(alternatives) >= limit:
                break
            if not candidate.id or candidate.id == tool.id:
                continue
            if candidate.categories and candidate.categories.lower() == category:
                alternatives.append(candidate)
        return alternatives

    async def get_tools(self) -> List[Tool]:
        return await self.list(EntityKind.TOOL)

    async def get_tool_by_slug(self, slug: str) -> Optional[Tool]:
        return await self.get_by_slug(EntityKind.TOOL, slug)

    async def get_all_blog_posts(self) -> List[BlogPost]:
        return await self.list(EntityKind.BLOG_POST)

    async def get_blog_post_by_slug(self, slug: str) -> Optional[BlogPost]:
        return await self.get_by_slug(EntityKind.BLOG_POST, slug)


def build_catalog(settings: Settings, reporter: Optional[Reporter] = None) -> DirectoryCatalog:
    """Wire a record client and catalog from loaded settings."""
    client = RecordClient(
        settings.api_url,
        settings.api_token,
        log_request_headers=settings.log_request_headers,
        reporter=reporter,
    )
    return DirectoryCatalog(client, settings.tables(), reporter=reporter)
