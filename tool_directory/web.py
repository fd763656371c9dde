"""fasthtml front end: tool grid, tool and blog pages, health check."""

import logging
from typing import List
from typing import Optional
from urllib.parse import quote
from urllib.parse import urlencode

from fasthtml.common import H1
from fasthtml.common import H2
from fasthtml.common import H3
from fasthtml.common import A
from fasthtml.common import Body
from fasthtml.common import Button
from fasthtml.common import Div
from fasthtml.common import Form
from fasthtml.common import Head
from fasthtml.common import Html
from fasthtml.common import Img
from fasthtml.common import Input
from fasthtml.common import Li
from fasthtml.common import Meta
from fasthtml.common import Nav
from fasthtml.common import P
from fasthtml.common import Section
from fasthtml.common import Span
from fasthtml.common import Style
from fasthtml.common import Title
from fasthtml.common import Ul
from fasthtml.common import to_xml
from fasthtml.fastapp import fast_app
from starlette.responses import HTMLResponse

from tool_directory.catalog import DirectoryCatalog
from tool_directory.catalog import build_catalog
from tool_directory.config import load_settings
from tool_directory.listing import category_options
from tool_directory.listing import filter_tools
from tool_directory.logging_config import setup_logging
from tool_directory.models import BlogPost
from tool_directory.models import Tool

# Missing NOCODB_API_URL or NOCODB_API_TOKEN aborts the import, and with it server startup
settings = load_settings()
setup_logging(settings.log_level)

# Base path for subdirectory deployment
BASE_PATH = settings.base_path
SITE_TITLE = "AI Tools Directory"

logger = logging.getLogger(__name__)

_catalog: DirectoryCatalog = build_catalog(settings)
logger.info(f"Catalog configured against {settings.api_url}")


def get_catalog() -> DirectoryCatalog:
    return _catalog


def set_catalog(catalog: DirectoryCatalog) -> None:
    global _catalog
    _catalog = catalog


def url(path: str, **query: str) -> str:
    """Prefix path with BASE_PATH for subdirectory deployment"""
    if not path.startswith("/"):
        path = f"/{path}"
    params = {k: v for k, v in query.items() if v}
    suffix = f"?{urlencode(params)}" if params else ""
    return f"{BASE_PATH}{path}{suffix}"


def detail_url(section: str, slug: str) -> Optional[str]:
    """Link to a detail page, or None when there is no slug to link to."""
    if not slug:
        return None
    return url(f"/{section}/{quote(slug, safe='')}")


styles = Style(
    """
    body { font-family: system-ui, sans-serif; margin: 0 auto; max-width: 1100px; padding: 1.5rem; }
    .tools-grid { display: grid; gap: 1.5rem; grid-template-columns: repeat(auto-fill, minmax(300px, 1fr)); }
    .tool-card { border: 1px solid #ddd; border-radius: 12px; padding: 1.5rem; display: flex; flex-direction: column; }
    .tool-logo { width: 64px; height: 64px; border-radius: 8px; object-fit: cover; }
    .tool-initial { width: 64px; height: 64px; border-radius: 8px; background: #eef; display: flex;
                    align-items: center; justify-content: center; font-size: 1.5rem; font-weight: bold; }
    .badge { display: inline-block; padding: 0.1rem 0.6rem; border-radius: 999px; background: #eef;
             margin-right: 0.5rem; }
    .badge.rating { background: #fff6d5; color: #a67c00; }
    .filters a { margin-right: 0.75rem; }
    .filters a.active { font-weight: bold; }
    .empty-state { text-align: center; color: #777; }
    """
)


def _page(title: str, *content, description: str = ""):
    return Html(
        Head(
            Title(title),
            Meta({"charset": "utf-8"}),
            Meta({"name": "viewport", "content": "width=device-width, initial-scale=1"}),
            Meta({"name": "description", "content": description or title}),
            styles,
        ),
        Body(
            Nav(A(SITE_TITLE, href=url("/")), " · ", A("Blog", href=url("/blog")), _class="site-nav"),
            *content,
        ),
    )


def _not_found(kind: str, slug: str) -> HTMLResponse:
    page = _page(f"{kind} Not Found", H1(f"{kind} Not Found"), P(f"No {kind.lower()} found with slug: {slug}"))
    return HTMLResponse(to_xml(page), status_code=404)


def _bullet_section(heading: str, items: List[str]):
    if not items:
        return None
    return Section(H3(heading), Ul(*[Li(item) for item in items]))


# Components
def tool_card(tool: Tool):
    """Grid card linking to the tool detail page"""
    if tool.logo:
        visual = Img({"src": tool.logo, "alt": f"Logo {tool.name}", "_class": "tool-logo"})
    else:
        visual = Div(tool.name[:1].upper(), _class="tool-initial")

    href = detail_url("tools", tool.slug)
    badges = [Span(tool.categories, _class="badge")] if tool.categories else []
    if tool.rating is not None:
        badges.append(Span(f"★ {tool.rating:g}", _class="badge rating"))

    return Div(
        Div(visual, Div(H3(tool.name), P(tool.tagline, _class="tagline")), _class="tool-header"),
        P(tool.description, _class="description"),
        Div(*badges, _class="badges"),
        A("Discover", href=href, _class="cta-button") if href else None,
        _class="tool-card",
        **{"data-search": f"{tool.name.lower()} {tool.description.lower()}"},
    )


def tool_grid(tools: List[Tool]):
    if not tools:
        return Div(P("No tools to display.", _class="empty-state"), _class="tools-grid")
    return Div(*[tool_card(t) for t in tools], _class="tools-grid")


def filter_bar(categories: List[str], search: str, selected: str):
    links = [A("All", href=url("/", q=search), _class="" if selected else "active")]
    for category in categories:
        active = category.lower() == selected.lower()
        links.append(A(category, href=url("/", q=search, category=category), _class="active" if active else ""))
    return Div(
        Form(
            Input({"type": "search", "name": "q", "value": search, "placeholder": "Search tools..."}),
            Input({"type": "hidden", "name": "category", "value": selected}),
            Button("Search", type="submit"),
            method="get",
            action=url("/"),
        ),
        Div(*links, _class="filters"),
        _class="filter-bar",
    )


def post_card(post: BlogPost):
    href = detail_url("blog", post.slug)
    return Div(
        Img({"src": post.banner_url, "alt": post.title, "_class": "banner"}) if post.banner_url else None,
        H3(A(post.title, href=href) if href else post.title),
        Span(post.category, _class="badge"),
        P(post.metadescription),
        _class="tool-card",
    )


def faq_section(faq):
    if not faq:
        return None
    items = []
    for entry in faq:
        items.extend([H3(entry.question), P(entry.answer)])
    return Section(H2("FAQ"), *items)


# App setup
app, rt = fast_app()


@rt("/")
async def get(q: str = "", category: str = ""):
    tools = await get_catalog().get_tools()
    visible = filter_tools(tools, q, category)
    return _page(
        SITE_TITLE,
        H1(SITE_TITLE),
        P(f"{len(visible)} of {len(tools)} tools", _class="count"),
        filter_bar(category_options(tools), q, category),
        tool_grid(visible),
        description="Discover AI tools by category, with features, pros and cons, and alternatives.",
    )


@rt("/tools/{slug}")
async def get_tool_page(slug: str):
    """Tool detail page with alternatives from the same category"""
    catalog = get_catalog()
    tool = await catalog.get_tool_by_slug(slug)
    if tool is None:
        return _not_found("Tool", slug)

    alternatives = await catalog.get_alternatives(tool)
    links = []
    if tool.website:
        links.append(A("Visit Official Website", href=tool.website, target="_blank", _class="cta-button"))

    return _page(
        f"{tool.name} - {tool.categories or 'AI Tool'}",
        Div(A("Home", href=url("/")), " › ", Span(tool.name), _class="breadcrumbs"),
        H1(tool.name, _class="tool-title"),
        P(tool.tagline, _class="tagline"),
        Img({"src": tool.banner_url, "alt": tool.name, "_class": "banner"}) if tool.banner_url else None,
        P(tool.description),
        Ul(
            Li(f"Category: {tool.categories}") if tool.categories else None,
            Li(f"Pricing: {tool.pricing}") if tool.pricing else None,
            Li(f"Rating: {tool.rating:g}") if tool.rating is not None else None,
        ),
        *links,
        _bullet_section("Features", tool.features),
        _bullet_section("Advantages", tool.advantage),
        _bullet_section("Drawbacks", tool.inconvenient),
        Section(H3("Videos"), Ul(*[Li(A(v, href=v, target="_blank")) for v in tool.youtube_url]))
        if tool.youtube_url
        else None,
        Section(H3("Sources"), Ul(*[Li(A(s, href=s, target="_blank")) for s in tool.source_url]))
        if tool.source_url
        else None,
        faq_section(tool.faq),
        Section(H2("Alternatives"), tool_grid(alternatives)) if alternatives else None,
        description=tool.tagline or tool.description,
    )


@rt("/blog")
async def get_blog_index():
    posts = await get_catalog().get_all_blog_posts()
    if posts:
        body = Div(*[post_card(p) for p in posts], _class="tools-grid")
    else:
        body = P("No articles yet.", _class="empty-state")
    return _page(f"Blog - {SITE_TITLE}", H1("Blog"), body)


@rt("/blog/{slug}")
async def get_blog_post(slug: str):
    post = await get_catalog().get_blog_post_by_slug(slug)
    if post is None:
        return _not_found("Article", slug)

    paragraphs = [P(chunk) for chunk in post.content.split("\n\n") if chunk.strip()]
    return _page(
        post.title,
        Div(A("Blog", href=url("/blog")), " › ", Span(post.title), _class="breadcrumbs"),
        H1(post.title),
        Span(post.category, _class="badge"),
        Span(post.date[:10], _class="date"),
        Img({"src": post.banner_url, "alt": post.title, "_class": "banner"}) if post.banner_url else None,
        *paragraphs,
        faq_section(post.faq),
        description=post.metadescription,
    )


@rt("/health")
def health():
    return {"status": "ok"}


# For direct script execution
if __name__ == "__main__":
    import uvicorn

    port = settings.web_port
    print(f"Starting server on port {port}")
    uvicorn.run("tool_directory.web:app", host="0.0.0.0", port=port, reload=True)
