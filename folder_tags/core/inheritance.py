"""Effective tag resolution along a folder's ancestor chain."""

from __future__ import annotations

from collections.abc import Iterable

from folder_tags.core.tag_store import FolderTagStore
from folder_tags.data_models import InheritanceMode, normalize_folder_path


def ancestor_chain(folder: str) -> list[str]:
    """Return ``folder`` followed by each ancestor, nearest first, root excluded.

    Examples:
        >>> ancestor_chain("Projects/Alpha/Specs")
        ['Projects/Alpha/Specs', 'Projects/Alpha', 'Projects']
    """
    chain: list[str] = []
    current = normalize_folder_path(folder)
    while current:
        chain.append(current)
        index = current.rfind("/")
        current = current[:index] if index != -1 else ""
    return chain


def resolve_folder_tags(
    folder: str,
    mode: InheritanceMode,
    exclusions: Iterable[str],
    store: FolderTagStore,
) -> list[str]:
    """Compute the effective tags a note in ``folder`` should carry.

    ``none`` returns the folder's own tags. ``immediate`` adds the direct
    parent's tags. ``all`` accumulates every ancestor up to the vault root.
    Excluded folders contribute nothing in the walking modes. Order is first
    appearance, nearest folder first.
    """
    origin = normalize_folder_path(folder)
    if mode == InheritanceMode.NONE:
        return store.get(origin)

    excluded = {normalize_folder_path(path) for path in exclusions}
    tags: list[str] = []
    for current in ancestor_chain(origin):
        if current not in excluded:
            tags.extend(tag for tag in store.get(current) if tag not in tags)
        if mode == InheritanceMode.IMMEDIATE and current != origin:
            break
    return tags
