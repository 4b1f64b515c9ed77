"""Pydantic input models for MCP tool validation.

This package defines Pydantic models that provide automatic input validation
for all MCP tools. Each model represents the input schema for one or more tools,
with field-level validation, type checking, and descriptive error messages.

Architecture:
- base: Base models (BaseNoteInput, BaseFolderInput) and tag list validation
- folder_models: Input models for folder tag operations
- note_tag_models: Input models for note tag operations and prompts
- content_models: Input models for the content-level tag codec tools
- vault_models: Input models for vault management and settings

Usage:
    from folder_tags.models import SetFolderTagsInput, ResolveTagPromptInput
    from folder_tags.models import ListVaultsInput, UpdateTagSettingsInput
"""

from .base import BaseNoteInput, BaseFolderInput, BaseSubfolderInput, validate_tag_list
from .folder_models import (
    FolderInput,
    SetFolderTagsInput,
    ListFolderTagsInput,
    FolderEventInput,
    BatchConvertInlineTagsInput,
)
from .note_tag_models import (
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
from .content_models import ContentInput, ContentTagsInput
from .vault_models import (
    ListVaultsInput,
    SetActiveVaultInput,
    GetTagSettingsInput,
    UpdateTagSettingsInput,
)

__all__ = [
    # Base models
    "BaseNoteInput",
    "BaseFolderInput",
    "BaseSubfolderInput",
    "validate_tag_list",
    # Folder models
    "FolderInput",
    "SetFolderTagsInput",
    "ListFolderTagsInput",
    "FolderEventInput",
    "BatchConvertInlineTagsInput",
    # Note tag models
    "NoteInput",
    "CreateTaggedNoteInput",
    "MoveTaggedNoteInput",
    "NotifyNoteMovedInput",
    "NoteTagsInput",
    "OptionalNoteTagsInput",
    "MergeNoteTagsInput",
    "ResolveTagPromptInput",
    "ListTagPromptsInput",
    # Content models
    "ContentInput",
    "ContentTagsInput",
    # Vault models
    "ListVaultsInput",
    "SetActiveVaultInput",
    "GetTagSettingsInput",
    "UpdateTagSettingsInput",
]
