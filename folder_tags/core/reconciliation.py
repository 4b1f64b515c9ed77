"""Reconciliation of note tags with folder tags.

Vault events are plain dataclasses. :func:`reconcile` maps an event to the
action the service should take, and :func:`resolve_choice` turns a user's
answer to a prompt into the note's new tag list. Neither touches the vault.
:class:`ReconciliationController` keeps the per-note prompt state
(``idle -> awaiting_choice -> applying -> idle``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from folder_tags.core.conflicts import detect_conflicts
from folder_tags.core.inheritance import resolve_folder_tags
from folder_tags.core.tag_store import FolderTagStore, unique_tags
from folder_tags.core.vault_operations import parent_folder_path
from folder_tags.data_models import FolderTagSettings, normalize_folder_path

logger = logging.getLogger(__name__)


class Choice(str, Enum):
    KEEP_ALL = "keep_all"
    KEEP_ONE = "keep_one"
    REMOVE_ALL = "remove_all"
    REPLACE_ALL = "replace_all"
    MERGE = "merge"
    NO_ACTION = "no_action"


class PromptKind(str, Enum):
    CONFLICT = "conflict"
    FOLDER_CHANGE = "folder_change"


class PromptState(str, Enum):
    IDLE = "idle"
    AWAITING_CHOICE = "awaiting_choice"
    APPLYING = "applying"


CONFLICT_CHOICES = (Choice.KEEP_ALL, Choice.KEEP_ONE, Choice.REMOVE_ALL)
FOLDER_CHANGE_CHOICES = (Choice.REPLACE_ALL, Choice.MERGE, Choice.NO_ACTION)


# ==============================================================================
# EVENTS
# ==============================================================================


@dataclass(frozen=True)
class NoteCreated:
    note: str


@dataclass(frozen=True)
class NoteMoved:
    note: str
    old_note: str


@dataclass(frozen=True)
class FolderDeleted:
    folder: str


@dataclass(frozen=True)
class FolderTagsChanged:
    folder: str
    tags: tuple[str, ...]


Event = Union[NoteCreated, NoteMoved, FolderDeleted, FolderTagsChanged]


# ==============================================================================
# ACTIONS
# ==============================================================================


@dataclass(frozen=True)
class NoOp:
    reason: str


@dataclass(frozen=True)
class AddTags:
    note: str
    tags: tuple[str, ...]


@dataclass(frozen=True)
class Prompt:
    note: str
    kind: PromptKind
    options: tuple[Choice, ...]
    old_tags: tuple[str, ...] = ()
    new_tags: tuple[str, ...] = ()
    conflicts: tuple[str, ...] = ()

    def as_payload(self) -> dict[str, object]:
        return {
            "note": self.note,
            "kind": self.kind.value,
            "options": [option.value for option in self.options],
            "old_tags": list(self.old_tags),
            "new_tags": list(self.new_tags),
            "conflicts": list(self.conflicts),
        }


@dataclass(frozen=True)
class ForgetFolder:
    folder: str


@dataclass(frozen=True)
class StoreFolderTags:
    folder: str
    tags: tuple[str, ...]


Action = Union[NoOp, AddTags, Prompt, ForgetFolder, StoreFolderTags]


def effective_tags(folder: str, store: FolderTagStore, settings: FolderTagSettings) -> list[str]:
    return resolve_folder_tags(folder, settings.inheritance_mode, settings.excluded_folders, store)


def reconcile(
    event: Event,
    store: FolderTagStore,
    settings: FolderTagSettings,
    existing_tags: Iterable[str] = (),
) -> Action:
    """Decide what to do about ``event``.

    Args:
        event: The vault event.
        store: Folder tag map.
        settings: Current settings (inheritance mode, exclusions, auto-apply).
        existing_tags: Tags the affected note currently carries.

    Returns:
        The action to carry out. Prompts are never resolved here.
    """
    if isinstance(event, NoteCreated):
        if not settings.auto_apply_tags:
            return NoOp("auto-apply disabled")
        wanted = effective_tags(parent_folder_path(event.note), store, settings)
        if not wanted:
            return NoOp("folder has no tags")
        present = set(existing_tags)
        if all(tag in present for tag in wanted):
            return NoOp("note already carries folder tags")
        return AddTags(event.note, tuple(wanted))

    if isinstance(event, NoteMoved):
        old_folder = parent_folder_path(event.old_note)
        new_folder = parent_folder_path(event.note)
        if old_folder == new_folder:
            return NoOp("note stayed in the same folder")

        old_tags = effective_tags(old_folder, store, settings)
        new_tags = effective_tags(new_folder, store, settings)
        if set(old_tags) == set(new_tags):
            return NoOp("folder tags unchanged")

        conflicts = detect_conflicts(event.note, store)
        if conflicts:
            return Prompt(
                note=event.note,
                kind=PromptKind.CONFLICT,
                options=CONFLICT_CHOICES,
                old_tags=tuple(old_tags),
                new_tags=tuple(new_tags),
                conflicts=tuple(conflicts),
            )
        return Prompt(
            note=event.note,
            kind=PromptKind.FOLDER_CHANGE,
            options=FOLDER_CHANGE_CHOICES,
            old_tags=tuple(old_tags),
            new_tags=tuple(new_tags),
        )

    if isinstance(event, FolderDeleted):
        return ForgetFolder(normalize_folder_path(event.folder))

    if isinstance(event, FolderTagsChanged):
        return StoreFolderTags(normalize_folder_path(event.folder), tuple(unique_tags(event.tags)))

    raise TypeError(f"Unsupported event: {event!r}")


def resolve_choice(
    choice: Choice,
    prompt: Prompt,
    existing_tags: Sequence[str],
    declared_tags: Sequence[str] = (),
) -> Optional[list[str]]:
    """Compute a note's tags after the user picked ``choice``.

    Args:
        choice: The selected option.
        prompt: The prompt being answered.
        existing_tags: Every tag the note carries (block and body).
        declared_tags: Block tags with duplicates, used by ``keep_one``.

    Returns:
        The tag list to write, or None when the note must be left untouched.
    """
    if choice in (Choice.KEEP_ALL, Choice.NO_ACTION):
        return None
    if choice == Choice.KEEP_ONE:
        return unique_tags(declared_tags or existing_tags)
    if choice == Choice.REMOVE_ALL:
        return [tag for tag in unique_tags(existing_tags) if tag not in prompt.conflicts]
    if choice == Choice.REPLACE_ALL:
        return unique_tags(prompt.new_tags)
    if choice == Choice.MERGE:
        return merged_tags(existing_tags, prompt.old_tags, prompt.new_tags)
    raise ValueError(f"Unsupported choice: {choice!r}")


def merged_tags(existing: Iterable[str], old_tags: Iterable[str], new_tags: Iterable[str]) -> list[str]:
    """Drop the old folder tags, keep manual tags, add the new folder tags.

    Examples:
        >>> merged_tags(["x", "manual"], ["x"], ["x", "y"])
        ['manual', 'x', 'y']
    """
    previous = set(old_tags)
    manual = [tag for tag in existing if tag not in previous]
    return unique_tags([*manual, *new_tags])


@dataclass
class _Pending:
    prompt: Prompt
    state: PromptState = PromptState.AWAITING_CHOICE


@dataclass
class ReconciliationController:
    """Dispatches events and tracks prompts awaiting a user decision."""

    store: FolderTagStore
    settings: FolderTagSettings
    _pending: dict[str, _Pending] = field(default_factory=dict, init=False, repr=False)

    def dispatch(self, event: Event, existing_tags: Iterable[str] = ()) -> Action:
        if isinstance(event, NoteMoved) and event.old_note in self._pending:
            # The old prompt no longer describes the note's location
            del self._pending[event.old_note]

        action = reconcile(event, self.store, self.settings, existing_tags)
        if isinstance(action, Prompt):
            self._pending[action.note] = _Pending(action)
        logger.debug("Reconciled %s -> %s", event, action)
        return action

    def state(self, note: str) -> PromptState:
        pending = self._pending.get(note)
        return pending.state if pending else PromptState.IDLE

    def pending_prompts(self) -> list[Prompt]:
        return [entry.prompt for entry in self._pending.values() if entry.state == PromptState.AWAITING_CHOICE]

    def prompt_for(self, note: str) -> Optional[Prompt]:
        pending = self._pending.get(note)
        return pending.prompt if pending else None

    def begin(self, note: str, choice: Choice) -> Prompt:
        """Move a note's prompt to ``applying``.

        Raises:
            ValueError: If no prompt awaits a choice for ``note`` or ``choice``
                is not one of the prompt's options.
        """
        pending = self._pending.get(note)
        if pending is None or pending.state != PromptState.AWAITING_CHOICE:
            raise ValueError(f"No tag prompt is awaiting a choice for note '{note}'.")
        if choice not in pending.prompt.options:
            options = ", ".join(option.value for option in pending.prompt.options)
            raise ValueError(f"Choice '{choice.value}' is not valid here; expected one of: {options}.")
        pending.state = PromptState.APPLYING
        return pending.prompt

    def finish(self, note: str) -> None:
        self._pending.pop(note, None)

    def dismiss(self, note: str) -> bool:
        """Treat a dismissed prompt as ``no_action``; True if one was pending."""
        return self._pending.pop(note, None) is not None
