"""Data models for vault metadata, settings and persisted plugin data."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from folder_tags.constants import DATA_VERSION


@dataclass(frozen=True)
class VaultMetadata:
    """Normalized metadata describing an Obsidian vault."""

    name: str
    path: Path
    description: str
    exists: bool

    def as_payload(self) -> dict[str, Any]:
        """Return a serializable payload representation."""
        return {
            "name": self.name,
            "path": str(self.path),
            "description": self.description,
            "exists": self.path.is_dir(),
        }


class VaultConfiguration:
    """Holds vault metadata and default resolution helpers.

    Loaded once from vaults.yaml on first use.
    Provides vault lookup by name and payload serialization for MCP responses.
    """

    def __init__(self, default_vault: str, vaults: dict[str, VaultMetadata]) -> None:
        self.default_vault = default_vault
        self.vaults = vaults

    def get(self, name: str) -> VaultMetadata:
        """Get vault metadata by name.

        Args:
            name: The name of the vault to retrieve.

        Returns:
            VaultMetadata for the requested vault.

        Raises:
            ValueError: If the vault name is not found in configuration.
        """
        try:
            return self.vaults[name]
        except KeyError as exc:
            raise ValueError(f"Unknown vault '{name}'") from exc

    def as_payload(self) -> dict[str, Any]:
        """Return serializable configuration payload.

        Returns:
            Dictionary with default vault name and list of vault metadata.
        """
        return {
            "default": self.default_vault,
            "vaults": [vault.as_payload() for vault in self.vaults.values()],
        }


class InheritanceMode(str, Enum):
    """How far up the folder chain a note collects tags."""

    NONE = "none"
    IMMEDIATE = "immediate"
    ALL = "all"


def normalize_folder_path(path: str) -> str:
    """Normalize a vault-relative folder path.

    Backslashes become ``/``, empty segments are collapsed and leading or
    trailing slashes are removed. The vault root is the empty string.

    Examples:
        >>> normalize_folder_path("/Projects//Alpha/")
        'Projects/Alpha'
        >>> normalize_folder_path("/")
        ''
    """
    parts = [part for part in path.replace("\\", "/").split("/") if part.strip()]
    return "/".join(part.strip() for part in parts)


class FolderTagSettings(BaseModel):
    """User-facing settings, persisted with the camelCase keys of the plugin blob."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", validate_assignment=True)

    inheritance_mode: InheritanceMode = Field(InheritanceMode.IMMEDIATE, alias="inheritanceMode")
    excluded_folders: list[str] = Field(default_factory=list, alias="excludedFolders")
    auto_apply_tags: bool = Field(True, alias="autoApplyTags")
    use_front_matter: bool = Field(True, alias="useFrontMatter")
    show_new_folder_modal: bool = Field(True, alias="showNewFolderModal")
    debug_mode: bool = Field(False, alias="debugMode")

    @field_validator("excluded_folders")
    @classmethod
    def normalize_excluded(cls, v: list[str]) -> list[str]:
        normalized: list[str] = []
        for entry in v:
            folder = normalize_folder_path(entry)
            if folder and folder not in normalized:
                normalized.append(folder)
        return normalized


class PluginData(BaseModel):
    """The single persisted blob: settings, folder tag map and format version."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    settings: FolderTagSettings = Field(default_factory=FolderTagSettings)
    folder_tags: dict[str, list[str]] = Field(default_factory=dict, alias="folderTags")
    version: str = DATA_VERSION

    @field_validator("folder_tags", mode="before")
    @classmethod
    def drop_null_folder_tags(cls, v: Any) -> Any:
        # An empty YAML mapping or list value loads as None
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(key): (value or []) for key, value in v.items()}
        return v

    def as_payload(self) -> dict[str, Any]:
        """Return the blob in its persisted (camelCase) shape."""
        return self.model_dump(mode="json", by_alias=True)
