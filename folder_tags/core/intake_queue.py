"""Batching of newly created folders awaiting a folder-tag prompt."""

from __future__ import annotations

import logging

from folder_tags.constants import NEW_FOLDER_QUEUE_LIMIT
from folder_tags.data_models import normalize_folder_path

logger = logging.getLogger(__name__)


class NewFolderQueue:
    """Bounded, append-only buffer drained on a fixed interval.

    Folders created while ``initial_load`` is set (the startup window, when
    every pre-existing folder may be reported as new) are ignored.
    """

    def __init__(self, max_size: int = NEW_FOLDER_QUEUE_LIMIT, initial_load: bool = True) -> None:
        self.max_size = max_size
        self.initial_load = initial_load
        self._folders: list[str] = []

    def enqueue(self, folder: str) -> bool:
        """Queue ``folder``; return False when it was ignored."""
        normalized = normalize_folder_path(folder)
        if self.initial_load:
            logger.debug("Ignoring folder '%s' created during initial load", normalized)
            return False
        if not normalized or normalized in self._folders:
            return False
        if len(self._folders) >= self.max_size:
            dropped = self._folders.pop(0)
            logger.warning("New folder queue full; dropping '%s'", dropped)
        self._folders.append(normalized)
        return True

    def drain(self) -> list[str]:
        """Pop every queued folder in arrival order."""
        drained, self._folders = self._folders, []
        return drained

    def finish_initial_load(self) -> None:
        self.initial_load = False

    def __len__(self) -> int:
        return len(self._folders)
