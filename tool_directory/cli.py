"""Command line access to the directory catalog."""

import asyncio
import json
import logging

import click

from tool_directory.catalog import DirectoryCatalog
from tool_directory.catalog import build_catalog
from tool_directory.config import load_settings
from tool_directory.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _build_catalog() -> DirectoryCatalog:
    settings = load_settings()
    setup_logging(settings.log_level)
    return build_catalog(settings)


def _dump(payload) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@click.group()
def main() -> None:
    """Inspect tools and blog posts served from NocoDB."""


@main.command()
@click.option("--slug", default=None, help="Look up a single tool by slug")
@click.option("--alternatives", is_flag=True, help="Also list alternatives for --slug")
def tools(slug: str, alternatives: bool) -> None:
    """Print normalized tools as JSON."""
    catalog = _build_catalog()
    if not slug:
        _dump([tool.model_dump() for tool in asyncio.run(catalog.get_tools())])
        return

    tool = asyncio.run(catalog.get_tool_by_slug(slug))
    if tool is None:
        raise click.ClickException(f"No tool found with slug: {slug}")
    payload = tool.model_dump()
    if alternatives:
        payload["alternatives"] = [alt.slug for alt in asyncio.run(catalog.get_alternatives(tool))]
    _dump(payload)


@main.command()
@click.option("--slug", default=None, help="Look up a single post by slug")
def posts(slug: str) -> None:
    """Print normalized blog posts as JSON."""
    catalog = _build_catalog()
    if not slug:
        _dump([post.model_dump() for post in asyncio.run(catalog.get_all_blog_posts())])
        return

    post = asyncio.run(catalog.get_blog_post_by_slug(slug))
    if post is None:
        raise click.ClickException(f"No article found with slug: {slug}")
    _dump(post.model_dump())


@main.command()
@click.option("--port", default=None, type=int, help="Port to listen on (defaults to WEB_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(port: int, reload: bool) -> None:
    """Run the web front end."""
    import uvicorn

    settings = load_settings()
    port = port or settings.web_port
    logger.info(f"Starting server on port {port}")
    uvicorn.run("tool_directory.web:app", host="0.0.0.0", port=port, reload=reload)


if __name__ == "__main__":
    main()
