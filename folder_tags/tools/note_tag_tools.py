"""Note tag MCP tools.

This module provides MCP tool wrappers for note-scoped tag operations:
- Create and move notes with folder tag reconciliation
- Report note events made outside this server
- Apply, remove, replace and merge note tags
- Convert body hashtags into front matter
- List and answer pending tag prompts

All tools delegate to the vault's FolderTagService in
folder_tags.core.tag_operations.
"""
from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import Context

from folder_tags.server import mcp
from folder_tags.session import get_tag_service, resolve_vault
from folder_tags.models import (
    NoteInput,
    CreateTaggedNoteInput,
    MoveTaggedNoteInput,
    NotifyNoteMovedInput,
    NoteTagsInput,
    OptionalNoteTagsInput,
    MergeNoteTagsInput,
    ResolveTagPromptInput,
    ListTagPromptsInput,
)
from folder_tags.core.note_operations import create_note, move_note


# ==============================================================================
# NOTE LIFECYCLE
# ==============================================================================

# Creates the note, then applies the folder's effective tags when auto-apply is on.
@mcp.tool()
async def create_tagged_note(
    input: CreateTaggedNoteInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Create a new note and give it its folder's tags (fails if exists).

    Parent folders are created automatically. With auto-apply enabled, the
    effective tags of the note's folder are merged into its tags; tags in the
    supplied content are kept.

    Args:
        input (CreateTaggedNoteInput): Validated input containing:
            - title (str): Note identifier (path without .md extension)
            - content (str): Markdown content (may be empty)
            - vault (str, optional): Vault name (omit to use active vault)

    Returns:
        {
            "vault": str,
            "note": str,
            "path": str,
            "status": "created",
            "tagging": {"status": "updated" | "no_action" | ..., "tags": list[str]}
        }

    Error Handling:
        - Note already exists → Error
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    result = create_note(metadata, input.title, input.content)
    result["tagging"] = service.on_note_created(input.title)
    return result


@mcp.tool()
async def move_tagged_note(
    input: MoveTaggedNoteInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Move or rename a note and reconcile its tags with the new folder.

    Moves within one folder need no reconciliation. When the folder tags of
    the old and new location differ, a prompt is returned:

    - "conflict" when a tag is assigned to more than one ancestor folder of
      the new location (options: keep_all, keep_one, remove_all)
    - "folder_change" otherwise (options: replace_all, merge, no_action)

    Answer it with resolve_tag_prompt() or dismiss_tag_prompt(). Rapid moves
    of the same note are combined into one reconciliation.

    Returns:
        {
            "vault": str,
            "old_path": str,
            "new_path": str,
            "status": "moved" | "unchanged",
            "tagging": {"status": "prompt" | "no_action" | "missing", "prompt": {...}}
        }

    Error Handling:
        - Old note not found → Error
        - New note already exists → Error
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    result = move_note(metadata, input.title, input.new_title)
    if result["status"] == "moved":
        result["tagging"] = await service.on_note_moved(input.new_title, input.title)
    return result


@mcp.tool()
async def notify_note_created(
    input: NoteInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Report a note created outside this server so folder tags get applied.

    Returns:
        {"vault": str, "note": str, "status": "updated" | "no_action" | "missing" | "failed"}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.on_note_created(input.title)


@mcp.tool()
async def notify_note_moved(
    input: NotifyNoteMovedInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Report a note moved outside this server (title = new location).

    Returns the same "tagging" payload as move_tagged_note().
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return await service.on_note_moved(input.title, input.old_title)


# ==============================================================================
# NOTE TAGS
# ==============================================================================

@mcp.tool()
async def apply_folder_tags_to_note(
    input: NoteInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Add the effective tags of a note's folder to the note.

    Existing tags are kept. A note in an untagged folder is left untouched.

    Returns:
        {"vault": str, "note": str, "path": str, "tags": list[str],
         "status": "updated" | "unchanged" | "no_folder_tags" | "missing" | "failed"}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.apply_folder_tags_to_file(input.title)


@mcp.tool()
async def remove_note_tags(
    input: OptionalNoteTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Remove tags from a note, by default the tags its folder gives it.

    Tags are removed from the front matter (or leading tag line) and from
    hashtags in the body.

    Returns:
        {"vault": str, "note": str, "path": str, "tags": list[str], "status": str}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.remove_tags_from_file(input.title, input.tags)


@mcp.tool()
async def replace_note_tags(
    input: NoteTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Replace every tag of a note with the given list.

    Returns:
        {"vault": str, "note": str, "path": str, "tags": list[str], "status": str}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.replace_all_tags(input.title, input.tags)


@mcp.tool()
async def merge_note_tags(
    input: MergeNoteTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Swap old folder tags for new ones while keeping manually added tags.

    Returns:
        {"vault": str, "note": str, "path": str, "tags": list[str], "status": str}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.merge_tags(input.title, input.old_tags, input.new_tags)


@mcp.tool()
async def convert_inline_tags(
    input: OptionalNoteTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Move body hashtags of a note into its front matter ``tags:`` list.

    With ``tags`` given, only those hashtags are converted.

    Returns:
        {"vault": str, "note": str, "path": str, "tags": list[str], "status": str}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.convert_inline_tags(input.title, input.tags)


# ==============================================================================
# PROMPTS
# ==============================================================================

@mcp.tool()
async def list_tag_prompts(
    input: ListTagPromptsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List prompts awaiting an answer.

    Returns:
        {
            "vault": str,
            "notes": [
                {
                    "note": str,
                    "kind": "conflict" | "folder_change",
                    "options": list[str],
                    "old_tags": list[str],
                    "new_tags": list[str],
                    "conflicts": list[str]
                }
            ],
            "folders": [{"folder": str, "inherited_tags": list[str]}]
        }
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.list_prompts()


@mcp.tool()
async def resolve_tag_prompt(
    input: ResolveTagPromptInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Answer a note's pending tag prompt.

    Conflict prompts:
        - keep_all: leave the note as it is
        - keep_one: collapse repeated tags into one
        - remove_all: remove every conflicting tag
    Folder change prompts:
        - replace_all: the note gets exactly the new folder's tags
        - merge: drop the old folder's tags, keep manual tags, add the new ones
        - no_action: leave the note as it is

    Returns:
        {"vault": str, "note": str, "choice": str, "tags": list[str], "status": str}

    Error Handling:
        - No pending prompt for the note, or a choice not offered → Error
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.resolve_prompt(input.title, input.choice)


@mcp.tool()
async def dismiss_tag_prompt(
    input: NoteInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Dismiss a note's pending tag prompt; the note is left unchanged.

    Returns:
        {"vault": str, "note": str, "status": "dismissed" | "no_prompt"}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.dismiss_prompt(input.title)
