"""Pydantic input models for folder tag operations.

This module defines input models for folder-scoped tools:
- Read, set and clear a folder's own tags
- Resolve a folder's inherited tags
- Apply folder tags to the notes of a folder
- Create and delete folders, and report folder events
- Folder maintenance (duplicate removal, inline tag conversion)
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .base import BaseFolderInput, BaseSubfolderInput, validate_tag_list, _clean_vault


class FolderInput(BaseFolderInput):
    """Input model for tools that only need a folder.

    Used by get_folder_tags, get_inherited_folder_tags, remove_folder_tags,
    apply_folder_tags_to_notes and remove_duplicate_tags.

    Examples:
        >>> FolderInput(folder="Projects/Alpha")
        >>> FolderInput(folder="", vault="work")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"folder": "Projects/Alpha", "vault": None},
                {"folder": "Areas", "vault": "work"}
            ]
        }


class SetFolderTagsInput(BaseSubfolderInput):
    """Input model for set_folder_tags tool.

    Replaces the folder's own tags. Inherited tags are not affected.

    Examples:
        >>> SetFolderTagsInput(folder="Projects", tags=["project"])
        >>> SetFolderTagsInput(folder="Projects/Alpha", tags=["#alpha"], apply_to_notes=True)
    """

    tags: list[str] = Field(
        description=(
            "The folder's own tags. A leading '#' is optional. "
            "Tags made only of digits are rejected."
        ),
        examples=[["project"], ["project", "alpha"]]
    )

    apply_to_notes: bool = Field(
        False,
        description="Also add the folder's effective tags to the notes directly inside it."
    )

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return validate_tag_list(v)

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"folder": "Projects", "tags": ["project"], "apply_to_notes": False, "vault": None},
                {"folder": "Projects/Alpha", "tags": ["alpha"], "apply_to_notes": True, "vault": "work"}
            ]
        }


class ListFolderTagsInput(BaseModel):
    """Input model for list_all_folder_tags tool.

    Examples:
        >>> ListFolderTagsInput()
        >>> ListFolderTagsInput(vault="work")
    """

    vault: Optional[str] = Field(
        None,
        description="Vault name (omit to use active vault)."
    )

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        return _clean_vault(v)

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [{}, {"vault": "work"}]
        }


class FolderEventInput(BaseSubfolderInput):
    """Input model for folder lifecycle tools.

    Used by create_tagged_folder, delete_tagged_folder, notify_folder_created,
    notify_folder_deleted and dismiss_folder_tag_prompt. The vault root cannot
    be created, deleted or prompted for.

    Examples:
        >>> FolderEventInput(folder="Projects/Beta")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"folder": "Projects/Beta", "vault": None}
            ]
        }


class BatchConvertInlineTagsInput(BaseFolderInput):
    """Input model for batch_convert_inline_tags tool.

    Converts hashtags found in the first lines of each note into front matter.

    Examples:
        >>> BatchConvertInlineTagsInput(folder="Inbox")
        >>> BatchConvertInlineTagsInput(folder="Archive", include_subfolders=True)
    """

    include_subfolders: bool = Field(
        False,
        description="Also convert notes in nested folders."
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"folder": "Inbox", "include_subfolders": False, "vault": None}
            ]
        }
