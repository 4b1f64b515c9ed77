"""Pydantic input models for vault management and settings operations.

This module defines input models for vault management tools:
- List configured vaults
- Set active vault for session
- Read and update folder tag settings
"""

from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from folder_tags.data_models import InheritanceMode
from .base import _clean_vault


class ListVaultsInput(BaseModel):
    """Input model for list_vaults tool.

    Lists all configured vaults and session state. Takes no parameters,
    but using a model maintains API consistency.

    Examples:
        >>> ListVaultsInput()
    """

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [{}]
        }


class SetActiveVaultInput(BaseModel):
    """Input model for set_active_vault tool.

    Sets the active vault for the conversation session. All subsequent tool
    calls that omit the vault parameter will use this vault.

    Examples:
        >>> SetActiveVaultInput(vault="personal")
    """

    vault: str = Field(
        min_length=1,
        description=(
            "Friendly vault name from vaults.yaml configuration. "
            "Use list_vaults() to discover valid names."
        ),
        examples=["personal", "work"]
    )

    @field_validator('vault')
    @classmethod
    def validate_vault(cls, v: str) -> str:
        cleaned = v.strip()

        if not cleaned:
            raise ValueError(
                "Vault name cannot be empty. "
                "Provide a valid vault name from vaults.yaml configuration. "
                "Use list_vaults() to see available vaults."
            )

        return cleaned

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"vault": "personal"},
                {"vault": "work"}
            ]
        }


class GetTagSettingsInput(BaseModel):
    """Input model for get_tag_settings tool."""

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


class UpdateTagSettingsInput(GetTagSettingsInput):
    """Input model for update_tag_settings tool.

    Only the fields that are provided are changed.

    Examples:
        >>> UpdateTagSettingsInput(inheritance_mode="all")
        >>> UpdateTagSettingsInput(excluded_folders=["Archive"], auto_apply_tags=False)
    """

    inheritance_mode: Optional[InheritanceMode] = Field(
        None,
        description=(
            "'none' (only the note's own folder), 'immediate' (own folder and its "
            "parent) or 'all' (every ancestor folder)."
        )
    )
    excluded_folders: Optional[list[str]] = Field(
        None,
        description="Folders whose tags are never inherited."
    )
    auto_apply_tags: Optional[bool] = Field(
        None,
        description="Add folder tags to notes created in a tagged folder."
    )
    use_front_matter: Optional[bool] = Field(
        None,
        description="Write tags to front matter (true) or as a leading '#tag' line (false)."
    )
    show_new_folder_modal: Optional[bool] = Field(
        None,
        description="Queue a folder tag prompt when a folder is created."
    )
    debug_mode: Optional[bool] = Field(
        None,
        description="Enable debug logging."
    )

    def changes(self) -> dict[str, Any]:
        """Return the settings that were provided, keyed by setting name."""
        return {
            name: value
            for name, value in self.model_dump(exclude={"vault"}).items()
            if value is not None
        }

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"inheritance_mode": "all"},
                {"excluded_folders": ["Archive"], "auto_apply_tags": False, "vault": "work"}
            ]
        }
