"""Tests for event reconciliation and the prompt state machine."""

import pytest

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
    PromptKind,
    PromptState,
    ReconciliationController,
    StoreFolderTags,
    merged_tags,
    reconcile,
    resolve_choice,
)
from folder_tags.core.tag_store import FolderTagStore
from folder_tags.data_models import FolderTagSettings, InheritanceMode


@pytest.fixture
def store():
    return FolderTagStore(
        {
            "Old": ["x"],
            "New": ["x", "y"],
            "Same": ["y", "x"],
            "Areas": ["shared"],
            "Areas/Team": ["shared", "team"],
        }
    )


@pytest.fixture
def settings():
    return FolderTagSettings()


class TestReconcileNoteCreated:
    def test_adds_effective_tags(self, store, settings):
        action = reconcile(NoteCreated("New/note"), store, settings)
        assert action == AddTags("New/note", ("x", "y"))

    def test_auto_apply_disabled(self, store):
        settings = FolderTagSettings(auto_apply_tags=False)
        assert isinstance(reconcile(NoteCreated("New/note"), store, settings), NoOp)

    def test_untagged_folder(self, store, settings):
        assert isinstance(reconcile(NoteCreated("Untagged/note"), store, settings), NoOp)

    def test_note_already_tagged(self, store, settings):
        action = reconcile(NoteCreated("New/note"), store, settings, existing_tags=["y", "x", "z"])
        assert isinstance(action, NoOp)

    def test_uses_inheritance_mode(self, store):
        settings = FolderTagSettings(inheritance_mode=InheritanceMode.NONE)
        action = reconcile(NoteCreated("Areas/Team/note"), store, settings)
        assert action == AddTags("Areas/Team/note", ("shared", "team"))


class TestReconcileNoteMoved:
    def test_folder_change_prompt(self, store, settings):
        action = reconcile(NoteMoved("New/note", "Old/note"), store, settings)
        assert isinstance(action, Prompt)
        assert action.kind == PromptKind.FOLDER_CHANGE
        assert action.options == (Choice.REPLACE_ALL, Choice.MERGE, Choice.NO_ACTION)
        assert action.old_tags == ("x",)
        assert action.new_tags == ("x", "y")

    def test_rename_in_same_folder(self, store, settings):
        assert isinstance(reconcile(NoteMoved("Old/renamed", "Old/note"), store, settings), NoOp)

    def test_equal_tag_sets_in_any_order(self, store, settings):
        assert isinstance(reconcile(NoteMoved("Same/note", "New/note"), store, settings), NoOp)

    def test_conflict_prompt(self, store, settings):
        action = reconcile(NoteMoved("Areas/Team/note", "Old/note"), store, settings)
        assert isinstance(action, Prompt)
        assert action.kind == PromptKind.CONFLICT
        assert action.options == (Choice.KEEP_ALL, Choice.KEEP_ONE, Choice.REMOVE_ALL)
        assert action.conflicts == ("shared",)

    def test_move_between_untagged_folders(self, store, settings):
        assert isinstance(reconcile(NoteMoved("B/note", "A/note"), store, settings), NoOp)


class TestReconcileFolderEvents:
    def test_folder_deleted(self, store, settings):
        assert reconcile(FolderDeleted("/Old/"), store, settings) == ForgetFolder("Old")

    def test_folder_tags_changed(self, store, settings):
        action = reconcile(FolderTagsChanged("Old", ("a", "a", " b ")), store, settings)
        assert action == StoreFolderTags("Old", ("a", "b"))

    def test_reconcile_does_not_mutate_store(self, store, settings):
        reconcile(FolderDeleted("Old"), store, settings)
        reconcile(FolderTagsChanged("New", ("z",)), store, settings)
        assert store.get("Old") == ["x"]
        assert store.get("New") == ["x", "y"]

    def test_unknown_event(self, store, settings):
        with pytest.raises(TypeError):
            reconcile(object(), store, settings)


class TestResolveChoice:
    @pytest.fixture
    def folder_change(self):
        return Prompt(
            note="New/note",
            kind=PromptKind.FOLDER_CHANGE,
            options=(Choice.REPLACE_ALL, Choice.MERGE, Choice.NO_ACTION),
            old_tags=("x",),
            new_tags=("x", "y"),
        )

    @pytest.fixture
    def conflict(self):
        return Prompt(
            note="Areas/Team/note",
            kind=PromptKind.CONFLICT,
            options=(Choice.KEEP_ALL, Choice.KEEP_ONE, Choice.REMOVE_ALL),
            conflicts=("shared",),
        )

    def test_merge_keeps_manual_tags(self, folder_change):
        tags = resolve_choice(Choice.MERGE, folder_change, ["x", "manual"])
        assert set(tags) == {"manual", "x", "y"}

    def test_replace_all(self, folder_change):
        assert resolve_choice(Choice.REPLACE_ALL, folder_change, ["x", "manual"]) == ["x", "y"]

    def test_no_action(self, folder_change):
        assert resolve_choice(Choice.NO_ACTION, folder_change, ["x"]) is None

    def test_keep_all(self, conflict):
        assert resolve_choice(Choice.KEEP_ALL, conflict, ["shared"]) is None

    def test_keep_one(self, conflict):
        assert resolve_choice(Choice.KEEP_ONE, conflict, ["shared", "a"], ["shared", "shared", "a"]) == ["shared", "a"]

    def test_remove_all(self, conflict):
        assert resolve_choice(Choice.REMOVE_ALL, conflict, ["shared", "a"]) == ["a"]

    def test_merged_tags_order(self):
        assert merged_tags(["x", "manual"], ["x"], ["x", "y"]) == ["manual", "x", "y"]


class TestReconciliationController:
    @pytest.fixture
    def controller(self, store, settings):
        return ReconciliationController(store, settings)

    def test_prompt_awaits_choice(self, controller):
        controller.dispatch(NoteMoved("New/note", "Old/note"))
        assert controller.state("New/note") == PromptState.AWAITING_CHOICE
        assert [prompt.note for prompt in controller.pending_prompts()] == ["New/note"]

    def test_idle_without_prompt(self, controller):
        assert controller.state("New/note") == PromptState.IDLE
        assert controller.prompt_for("New/note") is None

    def test_begin_and_finish(self, controller):
        controller.dispatch(NoteMoved("New/note", "Old/note"))
        prompt = controller.begin("New/note", Choice.MERGE)
        assert prompt.kind == PromptKind.FOLDER_CHANGE
        assert controller.state("New/note") == PromptState.APPLYING
        assert controller.pending_prompts() == []
        controller.finish("New/note")
        assert controller.state("New/note") == PromptState.IDLE

    def test_begin_rejects_foreign_choice(self, controller):
        controller.dispatch(NoteMoved("New/note", "Old/note"))
        with pytest.raises(ValueError):
            controller.begin("New/note", Choice.KEEP_ONE)
        assert controller.state("New/note") == PromptState.AWAITING_CHOICE

    def test_begin_without_prompt(self, controller):
        with pytest.raises(ValueError):
            controller.begin("New/note", Choice.MERGE)

    def test_begin_twice(self, controller):
        controller.dispatch(NoteMoved("New/note", "Old/note"))
        controller.begin("New/note", Choice.MERGE)
        with pytest.raises(ValueError):
            controller.begin("New/note", Choice.MERGE)

    def test_dismiss(self, controller):
        controller.dispatch(NoteMoved("New/note", "Old/note"))
        assert controller.dismiss("New/note") is True
        assert controller.dismiss("New/note") is False
        assert controller.state("New/note") == PromptState.IDLE

    def test_moving_again_replaces_stale_prompt(self, controller):
        controller.dispatch(NoteMoved("New/note", "Old/note"))
        action = controller.dispatch(NoteMoved("Old/note", "New/note"))
        assert isinstance(action, Prompt)
        assert controller.state("New/note") == PromptState.IDLE
        assert controller.prompt_for("Old/note").new_tags == ("x",)

    def test_noop_move_clears_stale_prompt(self, controller):
        controller.dispatch(NoteMoved("New/note", "Old/note"))
        controller.dispatch(NoteMoved("New/renamed", "New/note"))
        assert controller.pending_prompts() == []
