"""Core note lifecycle operations that produce vault events."""

from __future__ import annotations

import logging
from typing import Any

from folder_tags.core.vault_operations import (
    ensure_vault_ready,
    resolve_note_path,
    note_display_name,
)
from folder_tags.data_models import VaultMetadata

logger = logging.getLogger(__name__)


def create_note(vault: VaultMetadata, title: str, content: str) -> dict[str, Any]:
    """Create a markdown note with the given title and content.

    Args:
        vault: Vault metadata describing where the note should reside.
        title: Human-friendly note identifier; folders can be expressed with ``/``.
        content: Markdown body to write into the new file.

    Returns:
        A dictionary describing the created note (vault name, note identifier, full
        path, and status).

    Raises:
        FileExistsError: If the note already exists.
        FileNotFoundError: If the vault directory is missing.
        ValueError: If ``title`` escapes the vault.
    """
    ensure_vault_ready(vault)
    target_path = resolve_note_path(vault, title)
    target_path.parent.mkdir(parents=True, exist_ok=True)

    if target_path.exists():
        raise FileExistsError(
            f"Note '{note_display_name(vault, target_path)}' already exists in vault '{vault.name}'."
        )

    target_path.write_text(content, encoding="utf-8")
    logger.info("Created note '%s' in vault '%s'", note_display_name(vault, target_path), vault.name)
    return {
        "vault": vault.name,
        "note": note_display_name(vault, target_path),
        "path": str(target_path),
        "status": "created",
    }


def move_note(vault: VaultMetadata, old_title: str, new_title: str) -> dict[str, Any]:
    """Move or rename a note.

    Args:
        vault: Vault metadata.
        old_title: Current note identifier (without ``.md``).
        new_title: Desired note identifier (without ``.md``).

    Returns:
        A dictionary with the old and new identifiers and status ``moved``
        (or ``unchanged`` when both identifiers resolve to the same file).

    Raises:
        FileNotFoundError: If the original note cannot be located.
        FileExistsError: If a note already exists at the new location.
        ValueError: If either identifier escapes the vault.
    """
    ensure_vault_ready(vault)
    old_path = resolve_note_path(vault, old_title)
    new_path = resolve_note_path(vault, new_title)

    if not old_path.is_file():
        raise FileNotFoundError(
            f"Note '{note_display_name(vault, old_path)}' not found in vault '{vault.name}'."
        )

    old_display = note_display_name(vault, old_path)
    if old_path == new_path:
        return {
            "vault": vault.name,
            "old_path": old_display,
            "new_path": old_display,
            "status": "unchanged",
        }

    if new_path.exists():
        raise FileExistsError(
            f"Note '{note_display_name(vault, new_path)}' already exists in vault '{vault.name}'."
        )

    new_path.parent.mkdir(parents=True, exist_ok=True)
    old_path.rename(new_path)

    logger.info(
        "Moved note from '%s' to '%s' in vault '%s'",
        old_display,
        note_display_name(vault, new_path),
        vault.name,
    )

    return {
        "vault": vault.name,
        "old_path": old_display,
        "new_path": note_display_name(vault, new_path),
        "status": "moved",
    }
