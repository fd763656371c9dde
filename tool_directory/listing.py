"""Search and category filtering for the tool grid."""

from typing import Iterable
from typing import List

from tool_directory.models import Tool

ALL_CATEGORIES = "all"


def _matches_search(tool: Tool, needle: str) -> bool:
    haystack = " ".join([tool.name, tool.tagline, tool.description, tool.categories]).lower()
    return needle in haystack


def filter_tools(tools: Iterable[Tool], search: str = "", category: str = "") -> List[Tool]:
    """Filter tools by free-text search and selected category, keeping order."""
    needle = (search or "").strip().lower()
    selected = (category or "").strip().lower()
    if selected == ALL_CATEGORIES:
        selected = ""

    result = []
    for tool in tools:
        if selected and tool.categories.lower() != selected:
            continue
        if needle and not _matches_search(tool, needle):
            continue
        result.append(tool)
    return result


def category_options(tools: Iterable[Tool]) -> List[str]:
    """Distinct non-empty categories in order of first appearance."""
    seen = set()
    options = []
    for tool in tools:
        label = tool.categories.strip()
        if label and label.lower() not in seen:
            seen.add(label.lower())
            options.append(label)
    return options
