"""Folder tag map and persistence of the plugin data blob."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

import yaml
from pydantic import ValidationError

from folder_tags.data_models import PluginData, normalize_folder_path

logger = logging.getLogger(__name__)


def unique_tags(tags: Iterable[str]) -> list[str]:
    """De-duplicate tags preserving first-seen order, dropping empty entries."""
    seen: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


class FolderTagStore:
    """Ordered mapping of normalized folder path to its own tags.

    Lookups never fail: unknown folders simply have no tags. Writes replace
    the whole tag list of a folder (last writer wins).
    """

    def __init__(self, folder_tags: dict[str, list[str]] | None = None) -> None:
        self._tags: dict[str, list[str]] = {}
        for folder, tags in (folder_tags or {}).items():
            self.set(folder, tags)

    def get(self, folder: str) -> list[str]:
        return list(self._tags.get(normalize_folder_path(folder), []))

    def set(self, folder: str, tags: Iterable[str]) -> list[str]:
        """Store ``tags`` as the own tags of ``folder`` and return the stored list."""
        stored = unique_tags(tags)
        self._tags[normalize_folder_path(folder)] = stored
        return list(stored)

    def delete(self, folder: str, include_descendants: bool = True) -> list[str]:
        """Forget a folder (and by default its descendants); return removed paths."""
        target = normalize_folder_path(folder)
        prefix = f"{target}/"
        removed = [
            path
            for path in self._tags
            if path == target or (include_descendants and target and path.startswith(prefix))
        ]
        for path in removed:
            del self._tags[path]
        return removed

    def all_tags(self) -> list[str]:
        """Every tag assigned to any folder, first-seen order."""
        return unique_tags(tag for tags in self._tags.values() for tag in tags)

    def folders_with_tag(self, tag: str) -> list[str]:
        return [folder for folder, tags in self._tags.items() if tag in tags]

    def as_dict(self) -> dict[str, list[str]]:
        return {folder: list(tags) for folder, tags in self._tags.items()}

    def __contains__(self, folder: object) -> bool:
        return isinstance(folder, str) and normalize_folder_path(folder) in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)


def load_plugin_data(data_path: Path) -> PluginData:
    """Load the persisted blob, falling back to defaults on any problem.

    A missing file, unreadable file, invalid YAML or a blob that fails
    validation all yield default settings and an empty folder tag map.
    """
    if not data_path.exists():
        logger.info("No folder tag data at %s; starting with defaults", data_path)
        return PluginData()

    try:
        raw = yaml.safe_load(data_path.read_text(encoding="utf-8")) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        logger.warning("Failed to read folder tag data at %s, using defaults: %s", data_path, exc)
        return PluginData()

    if not isinstance(raw, dict):
        logger.warning("Folder tag data at %s is not a mapping, using defaults", data_path)
        return PluginData()

    try:
        return PluginData.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Folder tag data at %s failed validation, using defaults: %s", data_path, exc)
        return PluginData()


def save_plugin_data(data_path: Path, data: PluginData) -> None:
    """Persist the blob as YAML in a single write.

    Raises:
        OSError: If the file cannot be written.
    """
    serialized = yaml.safe_dump(data.as_payload(), sort_keys=False, allow_unicode=True)
    data_path.write_text(serialized, encoding="utf-8")
    logger.debug("Saved folder tag data to %s", data_path)
