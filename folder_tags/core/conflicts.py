"""Detection of tags assigned by more than one ancestor folder of a note."""

from __future__ import annotations

from collections import Counter

from folder_tags.core.inheritance import ancestor_chain
from folder_tags.core.tag_store import FolderTagStore
from folder_tags.core.vault_operations import parent_folder_path


def detect_conflicts(note: str, store: FolderTagStore) -> list[str]:
    """Return tags declared as own tags by two or more ancestors of ``note``.

    The walk covers the note's physical folder chain and ignores inheritance
    mode and exclusions. A tag counts once per folder.

    Examples:
        >>> store = FolderTagStore({"A": ["x"], "A/B": ["x", "y"]})
        >>> detect_conflicts("A/B/note", store)
        ['x']
    """
    counts: Counter[str] = Counter()
    order: list[str] = []
    for folder in ancestor_chain(parent_folder_path(note)):
        for tag in store.get(folder):
            if tag not in counts:
                order.append(tag)
            counts[tag] += 1
    return [tag for tag in order if counts[tag] >= 2]
