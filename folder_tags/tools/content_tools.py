"""Content-level tag MCP tools.

These tools run the tag codec over markdown text supplied by the caller and
return the result. They never read or write a vault.
"""
from __future__ import annotations

from typing import Any

from folder_tags.server import mcp
from folder_tags.models import ContentInput, ContentTagsInput
from folder_tags.core.tag_codec import (
    clear_tags,
    extract_plain_text_tags,
    extract_tags,
    merge_tags_into,
    write_tags,
)


def _tags_of(content: str, use_front_matter: bool) -> list[str]:
    return extract_tags(content) if use_front_matter else extract_plain_text_tags(content)


@mcp.tool()
async def extract_tags_from_content(input: ContentInput) -> dict[str, Any]:
    """Read the tags of a note's text.

    With front matter: tags from the ``tags:`` block followed by hashtags in
    the body. Without: the hashtags of the leading tag line.

    Returns:
        {"tags": list[str]}
    """
    return {"tags": _tags_of(input.content, input.use_front_matter)}


@mcp.tool()
async def update_tags_in_content(input: ContentTagsInput) -> dict[str, Any]:
    """Replace the declared tags of a note's text with the given list.

    Other front matter keys and the body are kept as they are.

    Returns:
        {"content": str, "tags": list[str], "changed": bool}
    """
    updated = write_tags(input.content, input.tags, input.use_front_matter)
    return {
        "content": updated,
        "tags": _tags_of(updated, input.use_front_matter),
        "changed": updated != input.content,
    }


@mcp.tool()
async def add_tags_to_content(input: ContentTagsInput) -> dict[str, Any]:
    """Add tags a note's text does not carry yet; existing tags are kept.

    Returns:
        {"content": str, "tags": list[str], "changed": bool}
    """
    updated = merge_tags_into(input.content, input.tags, input.use_front_matter)
    return {
        "content": updated,
        "tags": _tags_of(updated, input.use_front_matter),
        "changed": updated != input.content,
    }


@mcp.tool()
async def remove_all_tags_from_content(input: ContentInput) -> dict[str, Any]:
    """Remove the declared tags of a note's text.

    A front matter block left empty is removed entirely. Hashtags inside the
    body are not touched.

    Returns:
        {"content": str, "changed": bool}
    """
    updated = clear_tags(input.content, input.use_front_matter)
    return {"content": updated, "changed": updated != input.content}
