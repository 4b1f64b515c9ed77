"""Base Pydantic models for MCP tool input validation.

This module defines base models that provide common validation patterns
for note and folder operations. Other input models inherit from these bases.

Base Models:
- BaseNoteInput: Common validation for note-related operations
- BaseFolderInput: Common validation for folder-related operations
- validate_tag_list: Shared tag list cleanup used by tag-carrying models
"""

from __future__ import annotations

import re
from typing import Optional
from pydantic import BaseModel, Field, field_validator

NUMERIC_TAG_PATTERN = re.compile(r"^\d+$")


def _clean_vault(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise ValueError(
            "Vault name cannot be empty. "
            "Either omit the vault parameter to use the active vault, "
            "or provide a valid vault name from list_vaults()."
        )
    return v.strip() if v else None


def validate_tag_list(tags: list[str]) -> list[str]:
    """Clean a list of tags supplied by a caller.

    Strips whitespace and a leading ``#``, drops empty entries and duplicates.

    Raises:
        ValueError: If a tag contains whitespace or consists only of digits
            (Obsidian does not treat number-only hashtags as tags).
    """
    cleaned: list[str] = []
    for raw in tags:
        tag = raw.strip().lstrip("#").strip()
        if not tag:
            continue
        if any(char.isspace() for char in tag):
            raise ValueError(f"Tag '{tag}' cannot contain whitespace.")
        if NUMERIC_TAG_PATTERN.match(tag):
            raise ValueError(f"Tag '{tag}' cannot consist only of numbers.")
        if tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def clean_note_title(v: str) -> str:
    """Validate and normalize a note identifier.

    Enforces:
    - Non-empty title
    - No path traversal attempts (.., .)
    - Relative path only (no absolute paths)
    - Strips .md extension if present (normalized internally)

    Raises:
        ValueError: If title contains invalid characters or patterns
    """
    cleaned = v.strip()

    if not cleaned:
        raise ValueError(
            "Note title cannot be empty. "
            "Provide a valid note identifier like 'Projects/Alpha/Kickoff'."
        )

    parts = cleaned.split("/")
    if any(part in {".", ".."} for part in parts):
        raise ValueError(
            "Note title cannot contain '.' or '..' path segments. "
            f"Invalid title: '{cleaned}'"
        )

    if cleaned.startswith("/"):
        raise ValueError(
            "Note title must be a relative path within the vault. "
            "Do not start with '/'. "
            f"Invalid title: '{cleaned}'"
        )

    # Users may include the extension; identifiers never carry it
    if cleaned.endswith(".md"):
        cleaned = cleaned[:-3]

    if not cleaned:
        raise ValueError(
            "Note title cannot be just '.md'. "
            "Provide a valid note name."
        )

    return cleaned


class BaseNoteInput(BaseModel):
    """Base model for note operations with common validation.

    Provides standard validation for note identifiers and vault names.
    All note-related input models should inherit from this class.
    """

    title: str = Field(
        min_length=1,
        description=(
            "Note identifier (path without .md extension). "
            "Examples: 'Projects/Alpha/Kickoff', 'Inbox/Idea'. "
            "Forward slashes for folders, case-sensitive."
        ),
        examples=["Projects/Alpha/Kickoff", "Inbox/Idea", "README"]
    )

    vault: Optional[str] = Field(
        None,
        description=(
            "Vault name (omit to use active vault). "
            "Use list_vaults() to discover available vaults."
        )
    )

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        return clean_note_title(v)

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        return _clean_vault(v)


class BaseFolderInput(BaseModel):
    """Base model for folder operations.

    The folder is a vault-relative path. Leading and trailing slashes are
    removed; an empty string addresses the vault root.
    """

    folder: str = Field(
        description=(
            "Vault-relative folder path. "
            "Examples: 'Projects', 'Projects/Alpha'. Empty string for the vault root."
        ),
        examples=["Projects", "Projects/Alpha"]
    )

    vault: Optional[str] = Field(
        None,
        description=(
            "Vault name (omit to use active vault). "
            "Use list_vaults() to discover available vaults."
        )
    )

    @field_validator('folder')
    @classmethod
    def validate_folder(cls, v: str) -> str:
        """Normalize the folder path and reject traversal segments.

        Raises:
            ValueError: If the path contains '.' or '..' segments.
        """
        parts = [part.strip() for part in v.replace("\\", "/").split("/") if part.strip()]
        if any(part in {".", ".."} for part in parts):
            raise ValueError(
                "Folder path cannot contain '.' or '..' path segments. "
                f"Invalid folder: '{v.strip()}'"
            )
        return "/".join(parts)

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: Optional[str]) -> Optional[str]:
        return _clean_vault(v)


class BaseSubfolderInput(BaseFolderInput):
    """Folder input that must name a folder below the vault root."""

    @field_validator('folder')
    @classmethod
    def validate_not_root(cls, v: str) -> str:
        if not v.replace("\\", "/").strip("/ "):
            raise ValueError(
                "Folder path cannot be empty here. "
                "Provide a folder inside the vault, like 'Projects/Alpha'."
            )
        return v
