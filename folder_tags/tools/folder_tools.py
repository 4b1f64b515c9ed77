"""Folder tag MCP tools.

This module provides MCP tool wrappers for folder-scoped operations:
- Read, set and clear a folder's own tags
- Resolve inherited tags and list every folder tag in use
- Apply folder tags to the notes of a folder (and note tags to a folder)
- Create and delete folders, and report folder events made elsewhere
- Folder maintenance: duplicate tag removal and inline tag conversion

All tools delegate to the vault's FolderTagService in
folder_tags.core.tag_operations.
"""
from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import Context

from folder_tags.server import mcp
from folder_tags.session import get_tag_service, resolve_vault
from folder_tags.models import (
    FolderInput,
    SetFolderTagsInput,
    ListFolderTagsInput,
    FolderEventInput,
    BatchConvertInlineTagsInput,
    OptionalNoteTagsInput,
)
from folder_tags.core.vault_operations import create_folder, delete_folder

logger = logging.getLogger(__name__)


# ==============================================================================
# FOLDER TAGS
# ==============================================================================

@mcp.tool()
async def get_folder_tags(
    input: FolderInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Get the tags assigned directly to a folder.

    Args:
        input (FolderInput): Validated input containing:
            - folder (str): Vault-relative folder path ("" for the vault root)
            - vault (str, optional): Vault name (omit to use active vault)

    Returns:
        {"vault": str, "folder": str, "tags": list[str]}

    Examples:
        - Use when: Checking what a folder adds to its notes
        - Don't use: Need the tags a note would receive → get_inherited_folder_tags()
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return {
        "vault": metadata.name,
        "folder": input.folder,
        "tags": service.get_folder_tags(input.folder),
    }


@mcp.tool()
async def get_inherited_folder_tags(
    input: FolderInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Get the effective tags of a folder under the current inheritance mode.

    Combines the folder's own tags with those of its ancestors according to
    the inheritance setting ('none', 'immediate' or 'all'), skipping excluded
    folders. These are the tags a note created in the folder receives.

    Args:
        input (FolderInput): Validated input containing:
            - folder (str): Vault-relative folder path
            - vault (str, optional): Vault name (omit to use active vault)

    Returns:
        {"vault": str, "folder": str, "inheritance_mode": str, "tags": list[str]}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return {
        "vault": metadata.name,
        "folder": input.folder,
        "inheritance_mode": service.settings.inheritance_mode.value,
        "tags": service.get_folder_tags_with_inheritance(input.folder),
    }


@mcp.tool()
async def list_all_folder_tags(
    input: ListFolderTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """List every tag assigned to any folder, and the folder tag map itself.

    Returns:
        {
            "vault": str,
            "tags": list[str],                    # unique, first-seen order
            "folders": {folder: list[str], ...}
        }
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return {
        "vault": metadata.name,
        "tags": service.get_all_folder_tags(),
        "folders": service.store.as_dict(),
    }


@mcp.tool()
async def set_folder_tags(
    input: SetFolderTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Replace the tags assigned directly to a folder.

    Tags are saved immediately. Existing notes are not changed unless
    ``apply_to_notes`` is set; notes created in the folder afterwards receive
    the folder's effective tags when auto-apply is enabled. Setting tags also
    answers a pending new-folder prompt for the folder.

    Args:
        input (SetFolderTagsInput): Validated input containing:
            - folder (str): Vault-relative folder path (not the root)
            - tags (list[str]): The folder's own tags; number-only tags are rejected
            - apply_to_notes (bool): Also tag the notes directly inside the folder
            - vault (str, optional): Vault name (omit to use active vault)

    Returns:
        {"vault": str, "folder": str, "tags": list[str], "status": "saved",
         "notes": {...}  # only with apply_to_notes
        }

    Error Handling:
        - ValidationError: Empty folder, traversal segments, number-only tags
        - Saving failed → "notice" in the payload, tags kept in memory
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.set_folder_tags(input.folder, input.tags, apply_to_notes=input.apply_to_notes)


@mcp.tool()
async def remove_folder_tags(
    input: FolderInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Remove every tag assigned directly to a folder.

    Notes keep the tags already written into them; use remove_note_tags()
    on a note to strip its folder tags.

    Returns:
        {"vault": str, "folder": str, "tags": [], "status": "cleared"}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.remove_folder_tags(input.folder)


@mcp.tool()
async def apply_folder_tags_to_notes(
    input: FolderInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Add a folder's effective tags to every note directly inside it.

    Non-destructive: existing tags are kept, missing folder tags are added.

    Returns:
        {
            "vault": str,
            "folder": str,
            "processed": int,
            "updated": list[str],
            "failed": list[str],
            "status": "processed" | "missing"
        }
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.apply_folder_tags_to_notes(input.folder)


@mcp.tool()
async def apply_note_tags_to_folder(
    input: OptionalNoteTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Copy a note's tags into the own tags of the folder containing it.

    Args:
        input (OptionalNoteTagsInput): Validated input containing:
            - title (str): Note identifier
            - tags (list[str], optional): Subset of the note's tags to copy
              (omit to copy every tag the note carries)
            - vault (str, optional): Vault name (omit to use active vault)

    Returns:
        {"vault": str, "folder": str, "note": str, "tags": list[str],
         "added": list[str], "status": "saved"}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.apply_note_tags_to_folder(input.title, input.tags)


# ==============================================================================
# FOLDER LIFECYCLE
# ==============================================================================

@mcp.tool()
async def create_tagged_folder(
    input: FolderEventInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Create a folder and queue it for a folder-tag prompt.

    When the new-folder prompt setting is on, the folder shows up in
    list_tag_prompts() shortly after creation; answer it with
    set_folder_tags() or dismiss_folder_tag_prompt().

    Returns:
        {"vault": str, "folder": str, "path": str, "status": "created", "queued": bool}

    Error Handling:
        - Folder already exists → Error
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    result = create_folder(metadata, input.folder)
    result["queued"] = service.on_folder_created(input.folder)
    return result


@mcp.tool()
async def delete_tagged_folder(
    input: FolderEventInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Delete a folder with everything in it and forget its tags.

    Tags of the folder and of every folder below it are removed from the
    folder tag map.

    Returns:
        {"vault": str, "folder": str, "path": str, "status": "deleted",
         "forgotten": list[str]}

    Error Handling:
        - Folder not found → Error
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    result = delete_folder(metadata, input.folder)
    result["forgotten"] = service.on_folder_deleted(input.folder)["forgotten"]
    return result


@mcp.tool()
async def notify_folder_created(
    input: FolderEventInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Report a folder created outside this server.

    Folders reported during the first seconds after start-up are ignored,
    as are folders reported while the new-folder prompt setting is off.

    Returns:
        {"vault": str, "folder": str, "queued": bool}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return {
        "vault": metadata.name,
        "folder": input.folder,
        "queued": service.on_folder_created(input.folder),
    }


@mcp.tool()
async def notify_folder_deleted(
    input: FolderEventInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Report a folder deleted outside this server; its tags are forgotten.

    Returns:
        {"vault": str, "folder": str, "forgotten": list[str], "status": "forgotten"}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.on_folder_deleted(input.folder)


@mcp.tool()
async def dismiss_folder_tag_prompt(
    input: FolderEventInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Dismiss the pending tag prompt of a new folder without tagging it.

    Returns:
        {"vault": str, "folder": str, "status": "dismissed" | "no_prompt"}
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.dismiss_folder_prompt(input.folder)


# ==============================================================================
# MAINTENANCE
# ==============================================================================

@mcp.tool()
async def remove_duplicate_tags(
    input: FolderInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Collapse repeated tags in every note directly inside a folder.

    Returns the same summary shape as apply_folder_tags_to_notes().
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    return service.remove_duplicate_tags(input.folder)


@mcp.tool()
async def batch_convert_inline_tags(
    input: BatchConvertInlineTagsInput,
    ctx: Context | None = None,
) -> dict[str, Any]:
    """Move hashtags written at the top of notes into their front matter.

    Only the first lines of each note are scanned; the hashtags found there
    are removed from the body and added to the ``tags:`` list.

    Returns:
        {
            "vault": str,
            "folder": str,
            "processed": int,
            "converted": int,
            "updated": list[str],
            "failed": list[str],
            "status": "processed" | "missing"
        }
    """
    metadata = resolve_vault(input.vault, ctx)
    service = get_tag_service(metadata)
    logger.debug("Batch converting inline tags in '%s' (subfolders: %s)", input.folder, input.include_subfolders)
    return service.batch_convert_inline_tags(input.folder, include_subfolders=input.include_subfolders)
