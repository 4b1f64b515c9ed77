"""Folder tag service: the stateful layer between vault events and note text.

One :class:`FolderTagService` exists per vault. It loads the persisted
settings and folder tag map once, persists them after every mutation, and
applies reconciliation actions to notes. Every note mutation is read whole,
transformed in memory and written back in a single write, so a failure at any
step leaves the note untouched.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, Optional

from folder_tags.constants import LOG_LEVEL, NEW_FOLDER_DRAIN_INTERVAL, STARTUP_GRACE_SECONDS
from folder_tags.core.debounce import MoveDebouncer
from folder_tags.core.intake_queue import NewFolderQueue
from folder_tags.core.reconciliation import (
    AddTags,
    Choice,
    FolderDeleted,
    FolderTagsChanged,
    ForgetFolder,
    NoOp,
    NoteCreated,
    NoteMoved,
    Prompt,
    ReconciliationController,
    StoreFolderTags,
    effective_tags,
    merged_tags,
    resolve_choice,
)
from folder_tags.core.tag_codec import (
    convert_inline_tags,
    convert_leading_inline_tags,
    declared_tags,
    discard_tags,
    extract_tags,
    merge_tags_into,
    strip_inline_tag,
    write_tags,
)
from folder_tags.core.tag_store import FolderTagStore, load_plugin_data, save_plugin_data, unique_tags
from folder_tags.core.vault_operations import (
    data_file_path,
    folder_exists,
    list_folder_notes,
    note_exists,
    parent_folder_path,
    read_note_text,
    write_note_text,
)
from folder_tags.data_models import PluginData, VaultMetadata, normalize_folder_path

logger = logging.getLogger(__name__)

Transform = Callable[[str], str]


class FolderTagService:
    """Owns the settings, folder tag map and prompt state of one vault."""

    def __init__(
        self,
        vault: VaultMetadata,
        data_path: Optional[Path] = None,
        initial_load: bool = True,
    ) -> None:
        self.vault = vault
        self.data_path = data_path or data_file_path(vault)

        data = load_plugin_data(self.data_path)
        self.settings = data.settings
        self.store = FolderTagStore(data.folder_tags)
        self.controller = ReconciliationController(self.store, self.settings)
        self.new_folders = NewFolderQueue(initial_load=initial_load)
        self.debouncer = MoveDebouncer()
        self._folder_prompts: list[str] = []
        self._drain_task: Optional[asyncio.Task] = None
        self._apply_log_level()

    # ==========================================================================
    # LIFECYCLE
    # ==========================================================================

    def start(self) -> None:
        """Start the periodic new-folder drain; requires a running event loop."""
        if self._drain_task is not None and not self._drain_task.done():
            return
        loop = asyncio.get_running_loop()
        self._drain_task = loop.create_task(self._drain_periodically())
        if self.new_folders.initial_load:
            loop.call_later(STARTUP_GRACE_SECONDS, self.new_folders.finish_initial_load)
        logger.info("Started folder tag service for vault '%s'", self.vault.name)

    def stop(self) -> None:
        if self._drain_task is not None:
            self._drain_task.cancel()
            self._drain_task = None
        self.debouncer.cancel_all()

    async def _drain_periodically(self) -> None:
        while True:
            await asyncio.sleep(NEW_FOLDER_DRAIN_INTERVAL)
            self.drain_new_folders()

    def _apply_log_level(self) -> None:
        level = logging.DEBUG if self.settings.debug_mode else logging.getLevelName(LOG_LEVEL)
        logging.getLogger("folder_tags").setLevel(level)

    def _persist(self) -> Optional[str]:
        """Save settings and folder tags; return a notice when saving failed."""
        data = PluginData(settings=self.settings, folder_tags=self.store.as_dict())
        try:
            save_plugin_data(self.data_path, data)
        except OSError as exc:
            logger.error("Failed to save folder tag data for vault '%s': %s", self.vault.name, exc)
            return f"Folder tags could not be saved: {exc}"
        return None

    # ==========================================================================
    # SETTINGS
    # ==========================================================================

    def get_settings(self) -> dict[str, Any]:
        return self.settings.model_dump(mode="json")

    def update_settings(self, **changes: Any) -> dict[str, Any]:
        """Apply validated setting changes and persist them.

        Raises:
            ValueError: If a setting name is unknown or a value is invalid.
        """
        unknown = sorted(set(changes) - set(type(self.settings).model_fields))
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")

        for name, value in changes.items():
            setattr(self.settings, name, value)
        self._apply_log_level()

        payload: dict[str, Any] = {
            "vault": self.vault.name,
            "settings": self.get_settings(),
            "status": "updated",
        }
        notice = self._persist()
        if notice:
            payload["notice"] = notice
        logger.info("Updated settings for vault '%s': %s", self.vault.name, ", ".join(sorted(changes)))
        return payload

    # ==========================================================================
    # FOLDER TAGS
    # ==========================================================================

    def get_folder_tags(self, folder: str) -> list[str]:
        return self.store.get(folder)

    def get_folder_tags_with_inheritance(self, folder: str) -> list[str]:
        return effective_tags(folder, self.store, self.settings)

    def get_all_folder_tags(self) -> list[str]:
        return self.store.all_tags()

    def set_folder_tags(
        self,
        folder: str,
        tags: Iterable[str],
        apply_to_notes: bool = False,
    ) -> dict[str, Any]:
        """Replace a folder's own tags and persist them.

        Args:
            folder: Vault-relative folder path.
            tags: The folder's new own tags.
            apply_to_notes: Also add the folder's effective tags to the notes
                directly inside it (used when answering a new-folder prompt).
        """
        action = self.controller.dispatch(FolderTagsChanged(folder, tuple(tags)))
        if not isinstance(action, StoreFolderTags):
            raise TypeError(f"Unexpected action: {action!r}")
        stored = self.store.set(action.folder, action.tags)
        if action.folder in self._folder_prompts:
            self._folder_prompts.remove(action.folder)

        payload: dict[str, Any] = {
            "vault": self.vault.name,
            "folder": action.folder,
            "tags": stored,
            "status": "saved",
        }
        notice = self._persist()
        if notice:
            payload["notice"] = notice
        logger.info(
            "Saved tags for folder '%s' in vault '%s': %s",
            action.folder,
            self.vault.name,
            ", ".join(stored) or "(none)",
        )

        if apply_to_notes:
            payload["notes"] = self.apply_folder_tags_to_notes(action.folder)
        return payload

    def remove_folder_tags(self, folder: str) -> dict[str, Any]:
        payload = self.set_folder_tags(folder, [])
        payload["status"] = "cleared"
        return payload

    def apply_note_tags_to_folder(self, note: str, tags: Optional[Iterable[str]] = None) -> dict[str, Any]:
        """Add a note's tags to the own tags of its folder.

        Args:
            note: Note identifier.
            tags: Subset of the note's tags to copy; all of them when None.
        """
        folder = parent_folder_path(note)
        try:
            note_tags = extract_tags(read_note_text(self.vault, note))
        except FileNotFoundError:
            logger.warning("Note '%s' not found in vault '%s'; nothing applied", note, self.vault.name)
            return self._note_payload(note, "missing")
        except (OSError, UnicodeDecodeError) as exc:
            return self._failure(note, "read tags", exc)

        own = self.store.get(folder)
        candidates = [tag for tag in note_tags if tag not in own]
        if tags is not None:
            wanted = set(unique_tags(tags))
            candidates = [tag for tag in candidates if tag in wanted]

        if not candidates:
            payload = self._note_payload(note, "unchanged")
            payload.update({"folder": folder, "tags": own})
            return payload

        payload = self.set_folder_tags(folder, [*own, *candidates])
        payload.update({"note": note, "added": candidates})
        return payload

    # ==========================================================================
    # NOTE TAGS
    # ==========================================================================

    def _note_payload(self, note: str, status: str, **extra: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {"vault": self.vault.name, "note": note, "status": status}
        payload.update(extra)
        return payload

    def _failure(self, note: str, action: str, exc: BaseException) -> dict[str, Any]:
        logger.error("Could not %s for note '%s' in vault '%s': %s", action, note, self.vault.name, exc)
        return self._note_payload(note, "failed", notice=f"Could not {action} for '{note}': {exc}")

    def _modify_note(self, note: str, transform: Transform, action: str) -> dict[str, Any]:
        """Read, transform and write back a note in one pass."""
        try:
            content = read_note_text(self.vault, note)
        except FileNotFoundError:
            logger.warning("Note '%s' not found in vault '%s'; skipping %s", note, self.vault.name, action)
            return self._note_payload(note, "missing")
        except (OSError, UnicodeDecodeError) as exc:
            return self._failure(note, action, exc)

        updated = transform(content)
        if updated == content:
            logger.debug("No changes needed for note '%s' (%s)", note, action)
            return self._note_payload(note, "unchanged", tags=extract_tags(content))

        try:
            path = write_note_text(self.vault, note, updated)
        except OSError as exc:
            return self._failure(note, action, exc)

        tags = extract_tags(updated)
        logger.info("Updated tags of note '%s' in vault '%s' (%s)", note, self.vault.name, action)
        return self._note_payload(note, "updated", path=str(path), tags=tags)

    def _retag(self, content: str, tags: Iterable[str]) -> str:
        """Make ``tags`` the note's complete tag set.

        Tags that disappear are also stripped from the body as hashtags.
        """
        wanted = unique_tags(tags)
        removed = [tag for tag in extract_tags(content) if tag not in wanted]
        updated = write_tags(content, wanted, self.settings.use_front_matter)
        for tag in removed:
            updated = strip_inline_tag(updated, tag)
        return updated

    def apply_folder_tags_to_file(self, note: str) -> dict[str, Any]:
        """Add the note's effective folder tags, keeping every existing tag."""
        tags = self.get_folder_tags_with_inheritance(parent_folder_path(note))
        if not tags:
            return self._note_payload(note, "no_folder_tags")
        return self._modify_note(
            note,
            lambda content: merge_tags_into(content, tags, self.settings.use_front_matter),
            "apply folder tags",
        )

    def remove_tags_from_file(self, note: str, tags: Optional[Iterable[str]] = None) -> dict[str, Any]:
        """Remove tags from a note; by default its effective folder tags."""
        unwanted = unique_tags(tags) if tags is not None else self.get_folder_tags_with_inheritance(
            parent_folder_path(note)
        )
        if not unwanted:
            return self._note_payload(note, "unchanged")

        def transform(content: str) -> str:
            updated = discard_tags(content, unwanted, self.settings.use_front_matter)
            for tag in unwanted:
                updated = strip_inline_tag(updated, tag)
            return updated

        return self._modify_note(note, transform, "remove tags")

    def replace_all_tags(self, note: str, tags: Iterable[str]) -> dict[str, Any]:
        """Discard every tag of a note and write exactly ``tags``."""
        wanted = unique_tags(tags)
        return self._modify_note(note, lambda content: self._retag(content, wanted), "replace tags")

    def merge_tags(self, note: str, old_tags: Iterable[str], new_tags: Iterable[str]) -> dict[str, Any]:
        """Swap ``old_tags`` for ``new_tags`` while keeping manually added tags."""
        old = unique_tags(old_tags)
        new = unique_tags(new_tags)

        def transform(content: str) -> str:
            existing = extract_tags(content)
            merged = merged_tags(existing, old, new)
            if set(merged) == set(existing):
                return content
            return self._retag(content, merged)

        return self._modify_note(note, transform, "merge tags")

    def apply_folder_tags_to_notes(self, folder: str) -> dict[str, Any]:
        """Add a folder's effective tags to every note directly inside it."""
        normalized = normalize_folder_path(folder)
        try:
            notes = list_folder_notes(self.vault, normalized)
        except FileNotFoundError:
            logger.warning("Folder '%s' not found in vault '%s'", normalized, self.vault.name)
            return {"vault": self.vault.name, "folder": normalized, "status": "missing"}

        results = [self.apply_folder_tags_to_file(note) for note in notes]
        return self._batch_summary(normalized, results)

    def remove_duplicate_tags(self, folder: str) -> dict[str, Any]:
        """Collapse repeated declared tags in every note directly inside a folder."""
        normalized = normalize_folder_path(folder)
        try:
            notes = list_folder_notes(self.vault, normalized)
        except FileNotFoundError:
            logger.warning("Folder '%s' not found in vault '%s'", normalized, self.vault.name)
            return {"vault": self.vault.name, "folder": normalized, "status": "missing"}

        def transform(content: str) -> str:
            declared = declared_tags(content, self.settings.use_front_matter)
            if len(unique_tags(declared)) == len(declared):
                return content
            return write_tags(content, declared, self.settings.use_front_matter)

        results = [self._modify_note(note, transform, "remove duplicate tags") for note in notes]
        return self._batch_summary(normalized, results)

    def convert_inline_tags(self, note: str, tags: Optional[Iterable[str]] = None) -> dict[str, Any]:
        """Move body hashtags of a note into its front matter."""
        selected = None if tags is None else unique_tags(tags)
        return self._modify_note(
            note,
            lambda content: convert_inline_tags(content, selected),
            "convert inline tags",
        )

    def batch_convert_inline_tags(self, folder: str, include_subfolders: bool = False) -> dict[str, Any]:
        """Convert hashtags at the top of each note in a folder into front matter."""
        normalized = normalize_folder_path(folder)
        try:
            notes = list_folder_notes(self.vault, normalized, recursive=include_subfolders)
        except FileNotFoundError:
            logger.warning("Folder '%s' not found in vault '%s'", normalized, self.vault.name)
            return {"vault": self.vault.name, "folder": normalized, "status": "missing"}

        results = [
            self._modify_note(note, convert_leading_inline_tags, "convert inline tags")
            for note in notes
        ]
        payload = self._batch_summary(normalized, results)
        payload["converted"] = len(payload["updated"])
        return payload

    def _batch_summary(self, folder: str, results: list[dict[str, Any]]) -> dict[str, Any]:
        updated = [result["note"] for result in results if result["status"] == "updated"]
        failed = [result["note"] for result in results if result["status"] == "failed"]
        logger.info(
            "Processed %d note(s) in folder '%s' of vault '%s' (%d updated, %d failed)",
            len(results),
            folder,
            self.vault.name,
            len(updated),
            len(failed),
        )
        payload: dict[str, Any] = {
            "vault": self.vault.name,
            "folder": folder,
            "processed": len(results),
            "updated": updated,
            "failed": failed,
            "status": "processed",
        }
        if failed:
            payload["notice"] = f"Could not update {len(failed)} note(s): {', '.join(failed)}"
        return payload

    # ==========================================================================
    # VAULT EVENTS
    # ==========================================================================

    def on_note_created(self, note: str) -> dict[str, Any]:
        try:
            existing = extract_tags(read_note_text(self.vault, note))
        except FileNotFoundError:
            logger.warning("Created note '%s' vanished from vault '%s'", note, self.vault.name)
            return self._note_payload(note, "missing")
        except (OSError, UnicodeDecodeError) as exc:
            return self._failure(note, "read new note", exc)

        action = self.controller.dispatch(NoteCreated(note), existing)
        if isinstance(action, AddTags):
            return self._modify_note(
                note,
                lambda content: merge_tags_into(content, action.tags, self.settings.use_front_matter),
                "apply folder tags",
            )
        if not isinstance(action, NoOp):
            raise TypeError(f"Unexpected action: {action!r}")
        return self._note_payload(note, "no_action", reason=action.reason)

    async def on_note_moved(self, note: str, old_note: str) -> dict[str, Any]:
        """Reconcile a moved note once its burst of move events settles."""
        return await self.debouncer.submit(note, old_note, self.reconcile_move)

    def reconcile_move(self, note: str, old_note: str) -> dict[str, Any]:
        if not note_exists(self.vault, note):
            logger.warning("Moved note '%s' vanished from vault '%s'", note, self.vault.name)
            return self._note_payload(note, "missing", old_note=old_note)
        try:
            existing = extract_tags(read_note_text(self.vault, note))
        except (OSError, UnicodeDecodeError) as exc:
            return self._failure(note, "read moved note", exc)

        action = self.controller.dispatch(NoteMoved(note, old_note), existing)
        if isinstance(action, Prompt):
            logger.info(
                "Note '%s' moved from '%s'; awaiting %s choice",
                note,
                old_note,
                action.kind.value,
            )
            return self._note_payload(note, "prompt", old_note=old_note, prompt=action.as_payload())
        if not isinstance(action, NoOp):
            raise TypeError(f"Unexpected action: {action!r}")
        logger.debug("Note '%s' moved from '%s': %s", note, old_note, action.reason)
        return self._note_payload(note, "no_action", old_note=old_note, reason=action.reason)

    def on_folder_created(self, folder: str) -> bool:
        """Queue a new folder for a tag prompt; False when it was ignored."""
        if not self.settings.show_new_folder_modal:
            return False
        return self.new_folders.enqueue(folder)

    def on_folder_deleted(self, folder: str) -> dict[str, Any]:
        """Forget a deleted folder's tags; notes keep tags already written."""
        action = self.controller.dispatch(FolderDeleted(folder))
        if not isinstance(action, ForgetFolder):
            raise TypeError(f"Unexpected action: {action!r}")
        removed = self.store.delete(action.folder)
        prefix = f"{action.folder}/"
        self._folder_prompts = [
            pending
            for pending in self._folder_prompts
            if pending != action.folder and not pending.startswith(prefix)
        ]

        payload: dict[str, Any] = {
            "vault": self.vault.name,
            "folder": action.folder,
            "forgotten": removed,
            "status": "forgotten",
        }
        if removed:
            notice = self._persist()
            if notice:
                payload["notice"] = notice
            logger.info("Forgot tags of deleted folder(s) %s in vault '%s'", ", ".join(removed), self.vault.name)
        return payload

    def drain_new_folders(self) -> list[str]:
        """Turn queued new folders into folder-tag prompts."""
        prompted: list[str] = []
        for folder in self.new_folders.drain():
            if not folder_exists(self.vault, folder):
                logger.warning("New folder '%s' no longer exists in vault '%s'", folder, self.vault.name)
                continue
            if folder not in self._folder_prompts:
                self._folder_prompts.append(folder)
                prompted.append(folder)
        if prompted:
            logger.info("Folders awaiting tags in vault '%s': %s", self.vault.name, ", ".join(prompted))
        return prompted

    # ==========================================================================
    # PROMPTS
    # ==========================================================================

    def list_prompts(self) -> dict[str, Any]:
        return {
            "vault": self.vault.name,
            "notes": [prompt.as_payload() for prompt in self.controller.pending_prompts()],
            "folders": [
                {"folder": folder, "inherited_tags": self.get_folder_tags_with_inheritance(folder)}
                for folder in self._folder_prompts
            ],
        }

    def resolve_prompt(self, note: str, choice: Choice | str) -> dict[str, Any]:
        """Apply the user's answer to a pending note prompt.

        Raises:
            ValueError: If no prompt is pending for ``note`` or ``choice`` is
                not one of its options.
        """
        selected = Choice(choice)
        prompt = self.controller.begin(note, selected)
        try:
            if selected in (Choice.KEEP_ALL, Choice.NO_ACTION):
                payload = self._note_payload(note, "unchanged")
            elif selected == Choice.KEEP_ONE:
                payload = self._modify_note(
                    note,
                    lambda content: write_tags(
                        content,
                        declared_tags(content, self.settings.use_front_matter),
                        self.settings.use_front_matter,
                    ),
                    "keep one of each tag",
                )
            else:
                def transform(content: str) -> str:
                    tags = resolve_choice(
                        selected,
                        prompt,
                        extract_tags(content),
                        declared_tags(content, self.settings.use_front_matter),
                    )
                    return content if tags is None else self._retag(content, tags)

                payload = self._modify_note(note, transform, selected.value.replace("_", " "))
        finally:
            self.controller.finish(note)

        payload["choice"] = selected.value
        return payload

    def dismiss_prompt(self, note: str) -> dict[str, Any]:
        """Dismissing a prompt is the same as choosing no action."""
        dismissed = self.controller.dismiss(note)
        return self._note_payload(note, "dismissed" if dismissed else "no_prompt")

    def dismiss_folder_prompt(self, folder: str) -> dict[str, Any]:
        normalized = normalize_folder_path(folder)
        dismissed = normalized in self._folder_prompts
        if dismissed:
            self._folder_prompts.remove(normalized)
        return {
            "vault": self.vault.name,
            "folder": normalized,
            "status": "dismissed" if dismissed else "no_prompt",
        }
