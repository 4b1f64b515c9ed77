"""Core vault operations: path resolution, folder listing and folder lifecycle."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from folder_tags.constants import DATA_FILE_NAME, NOTE_SUFFIX
from folder_tags.data_models import VaultMetadata, normalize_folder_path

logger = logging.getLogger(__name__)


def ensure_vault_ready(vault: VaultMetadata) -> None:
    """Ensure the target vault directory is accessible before performing operations.

    Args:
        vault: Metadata describing the vault to use.

    Raises:
        FileNotFoundError: If the vault path does not exist or is not a directory.
    """
    if not vault.path.is_dir():
        raise FileNotFoundError(f"Vault '{vault.name}' is not accessible at {vault.path}")


def construct_note_path(identifier: str) -> Path:
    """Construct a relative Path from a pre-validated note identifier.

    Validation (empty, .md suffix, path traversal, absolute paths) is handled
    at the MCP tool boundary by the Pydantic models in folder_tags.models.

    Examples:
        >>> construct_note_path("My Note")
        PosixPath('My Note.md')
        >>> construct_note_path("Folder/My Note")
        PosixPath('Folder/My Note.md')
    """
    parts = identifier.split("/")
    leaf_with_extension = f"{parts[-1]}{NOTE_SUFFIX}"

    if len(parts) == 1:
        return Path(leaf_with_extension)
    return Path(*parts[:-1]) / leaf_with_extension


def _within_vault(vault: VaultMetadata, candidate: Path) -> Path:
    vault_root = vault.path.resolve(strict=False)
    resolved = candidate.resolve(strict=False)
    if not resolved.is_relative_to(vault_root):
        raise ValueError("Path escapes the configured vault.")
    return resolved


def resolve_note_path(vault: VaultMetadata, title: str) -> Path:
    """Resolve a pre-validated note title to an absolute vault path.

    Raises:
        ValueError: If the resolved path escapes the vault root.
    """
    return _within_vault(vault, vault.path / construct_note_path(title))


def resolve_folder_path(vault: VaultMetadata, folder: str) -> Path:
    """Resolve a vault-relative folder path (root = ``""``) to an absolute path.

    Raises:
        ValueError: If the folder escapes the vault root.
    """
    normalized = normalize_folder_path(folder)
    if not normalized:
        return vault.path.resolve(strict=False)
    return _within_vault(vault, vault.path / Path(*normalized.split("/")))


def note_display_name(vault: VaultMetadata, path: Path) -> str:
    """Convert a note path into a normalized display name without extension."""
    relative = path.relative_to(vault.path.resolve(strict=False))
    return str(relative.with_suffix("")).replace("\\", "/")


def parent_folder_path(path: str) -> str:
    """Return the folder portion of a note identifier or folder path.

    Examples:
        >>> parent_folder_path("Projects/Alpha/plan")
        'Projects/Alpha'
        >>> parent_folder_path("plan")
        ''
    """
    normalized = normalize_folder_path(path)
    index = normalized.rfind("/")
    return normalized[:index] if index != -1 else ""


def folder_exists(vault: VaultMetadata, folder: str) -> bool:
    try:
        return resolve_folder_path(vault, folder).is_dir()
    except ValueError:
        return False


def note_exists(vault: VaultMetadata, title: str) -> bool:
    try:
        return resolve_note_path(vault, title).is_file()
    except ValueError:
        return False


def list_folder_notes(vault: VaultMetadata, folder: str, recursive: bool = False) -> list[str]:
    """List note identifiers inside a folder.

    Args:
        vault: Vault metadata.
        folder: Vault-relative folder path (root = ``""``).
        recursive: Include notes of every descendant folder.

    Returns:
        Sorted note identifiers (vault-relative, without ``.md``).

    Raises:
        FileNotFoundError: If the folder does not exist.
    """
    ensure_vault_ready(vault)
    folder_path = resolve_folder_path(vault, folder)
    if not folder_path.is_dir():
        raise FileNotFoundError(f"Folder '{normalize_folder_path(folder)}' not found in vault '{vault.name}'.")

    pattern = f"*{NOTE_SUFFIX}"
    candidates = folder_path.rglob(pattern) if recursive else folder_path.glob(pattern)
    return sorted(note_display_name(vault, path) for path in candidates if path.is_file())


def read_note_text(vault: VaultMetadata, title: str) -> str:
    """Read the whole text of a note.

    Raises:
        FileNotFoundError: If the note does not exist.
        UnicodeDecodeError: If the note is not UTF-8 encoded.
    """
    target_path = resolve_note_path(vault, title)
    if not target_path.is_file():
        raise FileNotFoundError(f"Note '{title}' not found in vault '{vault.name}'.")
    return target_path.read_text(encoding="utf-8")


def write_note_text(vault: VaultMetadata, title: str, content: str) -> Path:
    """Overwrite the whole text of a note in a single write."""
    target_path = resolve_note_path(vault, title)
    target_path.write_text(content, encoding="utf-8")
    return target_path


def create_folder(vault: VaultMetadata, folder: str) -> dict[str, str]:
    """Create a folder (and missing parents) inside the vault.

    Raises:
        FileExistsError: If the folder already exists.
        ValueError: If the folder path is empty or escapes the vault.
    """
    ensure_vault_ready(vault)
    normalized = normalize_folder_path(folder)
    if not normalized:
        raise ValueError("Folder name cannot be empty.")

    folder_path = resolve_folder_path(vault, normalized)
    if folder_path.exists():
        raise FileExistsError(f"Folder '{normalized}' already exists in vault '{vault.name}'.")

    folder_path.mkdir(parents=True)
    logger.info("Created folder '%s' in vault '%s'", normalized, vault.name)
    return {"vault": vault.name, "folder": normalized, "path": str(folder_path), "status": "created"}


def delete_folder(vault: VaultMetadata, folder: str) -> dict[str, str]:
    """Delete a folder and everything inside it.

    Raises:
        FileNotFoundError: If the folder does not exist.
        ValueError: If the folder is the vault root or escapes the vault.
    """
    ensure_vault_ready(vault)
    normalized = normalize_folder_path(folder)
    if not normalized:
        raise ValueError("The vault root cannot be deleted.")

    folder_path = resolve_folder_path(vault, normalized)
    if not folder_path.is_dir():
        raise FileNotFoundError(f"Folder '{normalized}' not found in vault '{vault.name}'.")

    shutil.rmtree(folder_path)
    logger.info("Deleted folder '%s' in vault '%s'", normalized, vault.name)
    return {"vault": vault.name, "folder": normalized, "path": str(folder_path), "status": "deleted"}


def data_file_path(vault: VaultMetadata) -> Path:
    """Location of the persisted settings and folder tag map for a vault."""
    return vault.path / DATA_FILE_NAME
