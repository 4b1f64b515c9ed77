"""Pydantic input models for note tag operations.

This module defines input models for note-scoped tools:
- Create and move notes with folder tag reconciliation
- Report note events that happened outside the server
- Apply, remove, replace and merge note tags
- Answer pending tag prompts
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from folder_tags.core.reconciliation import Choice
from .base import BaseNoteInput, clean_note_title, validate_tag_list, _clean_vault


class NoteInput(BaseNoteInput):
    """Input model for tools that only need a note.

    Used by apply_folder_tags_to_note, notify_note_created and
    dismiss_tag_prompt.

    Examples:
        >>> NoteInput(title="Projects/Alpha/Kickoff")
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"title": "Projects/Alpha/Kickoff", "vault": None}
            ]
        }


class CreateTaggedNoteInput(BaseNoteInput):
    """Input model for create_tagged_note tool.

    Examples:
        >>> CreateTaggedNoteInput(title="Projects/Alpha/Kickoff", content="# Kickoff")
    """

    content: str = Field(
        "",
        description="Markdown content for the new note. May be empty."
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"title": "Projects/Alpha/Kickoff", "content": "# Kickoff\n", "vault": None}
            ]
        }


class MoveTaggedNoteInput(BaseNoteInput):
    """Input model for move_tagged_note tool.

    Examples:
        >>> MoveTaggedNoteInput(title="Inbox/Idea", new_title="Projects/Alpha/Idea")
    """

    new_title: str = Field(
        min_length=1,
        description="Destination note identifier (path without .md extension)."
    )

    @field_validator('new_title')
    @classmethod
    def validate_new_title(cls, v: str) -> str:
        return clean_note_title(v)

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"title": "Inbox/Idea", "new_title": "Projects/Alpha/Idea", "vault": None}
            ]
        }


class NotifyNoteMovedInput(BaseNoteInput):
    """Input model for notify_note_moved tool.

    ``title`` is where the note is now; ``old_title`` is where it was.

    Examples:
        >>> NotifyNoteMovedInput(title="Projects/Alpha/Idea", old_title="Inbox/Idea")
    """

    old_title: str = Field(
        min_length=1,
        description="Previous note identifier (path without .md extension)."
    )

    @field_validator('old_title')
    @classmethod
    def validate_old_title(cls, v: str) -> str:
        return clean_note_title(v)

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"title": "Projects/Alpha/Idea", "old_title": "Inbox/Idea", "vault": None}
            ]
        }


class NoteTagsInput(BaseNoteInput):
    """Input model for note tools taking a tag list.

    Used by replace_note_tags.

    Examples:
        >>> NoteTagsInput(title="Projects/Alpha/Kickoff", tags=["alpha", "meeting"])
    """

    tags: list[str] = Field(
        description="Tags to write. A leading '#' is optional."
    )

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return validate_tag_list(v)

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"title": "Projects/Alpha/Kickoff", "tags": ["alpha", "meeting"], "vault": None}
            ]
        }


class OptionalNoteTagsInput(BaseNoteInput):
    """Input model for note tools whose tag list defaults to a computed set.

    Used by remove_note_tags (defaults to the note's folder tags),
    convert_inline_tags (defaults to every body hashtag) and
    apply_note_tags_to_folder (defaults to every tag of the note).

    Examples:
        >>> OptionalNoteTagsInput(title="Projects/Alpha/Kickoff")
        >>> OptionalNoteTagsInput(title="Projects/Alpha/Kickoff", tags=["draft"])
    """

    tags: Optional[list[str]] = Field(
        None,
        description="Tags to act on (omit for the tool's default set)."
    )

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        return None if v is None else validate_tag_list(v)

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"title": "Projects/Alpha/Kickoff", "vault": None},
                {"title": "Projects/Alpha/Kickoff", "tags": ["draft"], "vault": None}
            ]
        }


class MergeNoteTagsInput(BaseNoteInput):
    """Input model for merge_note_tags tool.

    Removes ``old_tags`` that the note carries, keeps every other tag and
    adds ``new_tags``.

    Examples:
        >>> MergeNoteTagsInput(title="Projects/Beta/Idea", old_tags=["alpha"], new_tags=["beta"])
    """

    old_tags: list[str] = Field(
        default_factory=list,
        description="Folder tags of the note's previous location."
    )

    new_tags: list[str] = Field(
        default_factory=list,
        description="Folder tags of the note's current location."
    )

    @field_validator('old_tags', 'new_tags')
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return validate_tag_list(v)

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {
                    "title": "Projects/Beta/Idea",
                    "old_tags": ["project", "alpha"],
                    "new_tags": ["project", "beta"],
                    "vault": None
                }
            ]
        }


class ResolveTagPromptInput(BaseNoteInput):
    """Input model for resolve_tag_prompt tool.

    Conflict prompts accept keep_all, keep_one and remove_all. Folder change
    prompts accept replace_all, merge and no_action.

    Examples:
        >>> ResolveTagPromptInput(title="Projects/Beta/Idea", choice="merge")
    """

    choice: Choice = Field(
        description="The selected option, one of the prompt's 'options'."
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"title": "Projects/Beta/Idea", "choice": "merge", "vault": None},
                {"title": "Areas/Work/Plan", "choice": "keep_one", "vault": None}
            ]
        }


class ListTagPromptsInput(BaseModel):
    """Input model for list_tag_prompts tool.

    Examples:
        >>> ListTagPromptsInput()
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
            "examples": [{}]
        }
