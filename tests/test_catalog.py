"""Query operations over the fake record store."""

import pytest
from conftest import TABLES
from factories import blog_record
from factories import tool_record

from tool_directory.catalog import DirectoryCatalog
from tool_directory.catalog import build_catalog
from tool_directory.config import Settings
from tool_directory.diagnostics import MISSING_TABLE
from tool_directory.diagnostics import NOT_FOUND
from tool_directory.diagnostics import TRANSPORT_ERROR
from tool_directory.diagnostics import UNSAFE_FILTER
from tool_directory.diagnostics import VALIDATION_ERROR
from tool_directory.models import EntityKind
from tool_directory.models import TableRef
from tool_directory.models import Tool


class TestListing:
    @pytest.mark.asyncio
    async def test_tools_scenario(self, catalog, store):
        store.tables["tbl_tools"] = [
            {"Id": "1", "Name": "Acme", "categories": "Writing", "slug": "acme"},
            {"Id": "2", "Name": "Beta", "categories": "writing", "slug": "beta"},
        ]

        tools = await catalog.get_tools()

        assert [t.name for t in tools] == ["Acme", "Beta"]
        assert all(t.advantage == [] and t.inconvenient == [] for t in tools)
        assert [t.slug for t in await catalog.get_alternatives(tools[0])] == ["beta"]

    @pytest.mark.asyncio
    async def test_list_requests_fixed_page_size(self, catalog, store):
        await catalog.get_tools()

        params = store.requests[0].url.params
        assert params["limit"] == "100"
        assert params["viewId"] == "vw_tools"

    @pytest.mark.asyncio
    async def test_invalid_posts_are_dropped_and_order_is_kept(self, catalog, store, reporter):
        broken = blog_record("broken")
        del broken["content"]
        store.tables["tbl_blog"] = [blog_record("first"), broken, "garbage", blog_record("last")]

        posts = await catalog.get_all_blog_posts()

        assert [p.slug for p in posts] == ["first", "last"]
        assert len(reporter.events(VALIDATION_ERROR)) == 2

    @pytest.mark.asyncio
    async def test_tool_without_identifier_is_dropped(self, catalog, store):
        store.tables["tbl_tools"] = [{"Name": "Ghost"}, tool_record("1", "Acme", "AI", "acme")]
        assert [t.slug for t in await catalog.get_tools()] == ["acme"]

    @pytest.mark.asyncio
    async def test_transport_failure_returns_empty_list(self, catalog, store, reporter):
        store.fail = True

        assert await catalog.get_tools() == []
        assert await catalog.get_all_blog_posts() == []
        assert len(reporter.events(TRANSPORT_ERROR)) == 2

    @pytest.mark.asyncio
    async def test_missing_table_is_reported_not_requested(self, client, store, reporter):
        catalog = DirectoryCatalog(client, {EntityKind.TOOL: TableRef("", "vw")}, reporter=reporter)

        assert await catalog.get_tools() == []
        assert await catalog.get_blog_post_by_slug("anything") is None
        assert store.requests == []
        assert len(reporter.events(MISSING_TABLE)) == 2


class TestLookupBySlug:
    @pytest.mark.asyncio
    async def test_finds_tool_by_slug(self, catalog, store):
        store.tables["tbl_tools"] = [tool_record("1", "Acme", "AI", "acme"), tool_record("2", "Beta", "AI", "beta")]

        tool = await catalog.get_tool_by_slug("beta")

        assert tool.id == "2"
        assert store.requests[0].url.params["where"] == "(slug,eq,beta)"

    @pytest.mark.asyncio
    async def test_finds_blog_post_by_slug(self, catalog, store):
        store.tables["tbl_blog"] = [blog_record("hello")]

        post = await catalog.get_blog_post_by_slug("hello")

        assert post.title == "Post hello"
        assert store.requests[0].url.params["viewId"] == "vw_blog"

    @pytest.mark.asyncio
    async def test_empty_result_is_absent_not_error(self, catalog, reporter):
        assert await catalog.get_tool_by_slug("nothing") is None
        assert await catalog.get_blog_post_by_slug("nothing") is None
        assert len(reporter.events(NOT_FOUND)) == 2
        assert reporter.events(TRANSPORT_ERROR) == []

    @pytest.mark.asyncio
    async def test_transport_failure_returns_none(self, catalog, store, reporter):
        store.fail = True

        assert await catalog.get_tool_by_slug("acme") is None
        assert await catalog.get_blog_post_by_slug("acme") is None
        assert len(reporter.events(TRANSPORT_ERROR)) == 2

    @pytest.mark.asyncio
    async def test_invalid_post_is_not_found(self, catalog, store, reporter):
        store.tables["tbl_blog"] = [blog_record("hello", Title=None)]

        assert await catalog.get_blog_post_by_slug("hello") is None
        assert reporter.events(VALIDATION_ERROR)[0].context["field"] == "title"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("slug", ["acme,eq,x", "acme)~or(slug,neq,", ""])
    async def test_unsafe_slug_is_refused_without_request(self, catalog, store, reporter, slug):
        assert await catalog.get_tool_by_slug(slug) is None
        assert store.requests == []
        assert reporter.events(UNSAFE_FILTER)[0].context["slug"] == slug


class TestAlternatives:
    @pytest.fixture
    def tools(self, store):
        store.tables["tbl_tools"] = [
            tool_record("1", "Acme", "Writing", "acme"),
            tool_record("2", "Beta", "Images", "beta"),
            tool_record("3", "Gamma", "WRITING", "gamma"),
            tool_record("4", "Delta", "writing", "delta"),
            tool_record("5", "Epsilon", "Writing", "epsilon"),
            tool_record("6", "Zeta", "Writing", "zeta"),
        ]

    @pytest.mark.asyncio
    async def test_same_category_excluding_self_capped_at_three(self, catalog, tools):
        acme = await catalog.get_tool_by_slug("acme")

        alternatives = await catalog.get_alternatives(acme)

        assert [t.slug for t in alternatives] == ["gamma", "delta", "epsilon"]

    @pytest.mark.asyncio
    async def test_uses_a_single_list_fetch(self, catalog, store, tools):
        acme = Tool(id="1", categories="writing", date="2024-01-01T00:00:00Z")

        await catalog.get_alternatives(acme)

        assert len(store.requests) == 1

    @pytest.mark.asyncio
    async def test_case_insensitive_category_match(self, catalog, store):
        store.tables["tbl_tools"] = [tool_record("2", "Lower", "ai", "lower")]
        upper = Tool(id="1", categories="AI", date="2024-01-01T00:00:00Z")

        assert [t.slug for t in await catalog.get_alternatives(upper)] == ["lower"]

    @pytest.mark.asyncio
    async def test_tool_without_category_has_no_alternatives(self, catalog, store, tools):
        uncategorised = Tool(id="99", date="2024-01-01T00:00:00Z")

        assert await catalog.get_alternatives(uncategorised) == []
        assert store.requests == []

    @pytest.mark.asyncio
    async def test_transport_failure_gives_no_alternatives(self, catalog, store):
        store.fail = True
        acme = Tool(id="1", categories="Writing", date="2024-01-01T00:00:00Z")

        assert await catalog.get_alternatives(acme) == []


def test_tables_are_copied(client):
    tables = dict(TABLES)
    catalog = DirectoryCatalog(client, tables)
    tables.clear()
    assert catalog.tables[EntityKind.TOOL].table_id == "tbl_tools"


def test_build_catalog_from_settings(reporter):
    settings = Settings(
        api_url="https://nocodb.example.com/api/v2/",
        api_token="token",
        tools_table_id="tbl_tools",
        tools_view_id="vw_tools",
        app_env="development",
    )

    catalog = build_catalog(settings, reporter)

    assert catalog.client.base_url == "https://nocodb.example.com/api/v2"
    assert catalog.client.reporter is reporter
    assert catalog.reporter is reporter
    assert catalog.tables[EntityKind.TOOL] == TableRef("tbl_tools", "vw_tools")
    assert catalog.tables[EntityKind.BLOG_POST] == TableRef("", "")
