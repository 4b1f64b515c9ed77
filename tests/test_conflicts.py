"""Tests for ancestor tag conflict detection."""

import pytest

from folder_tags.core.conflicts import detect_conflicts
from folder_tags.core.tag_store import FolderTagStore


@pytest.fixture
def store():
    return FolderTagStore(
        {
            "Areas": ["work", "shared"],
            "Areas/Team": ["team", "shared"],
            "Areas/Team/Plans": ["plan", "work"],
        }
    )


class TestDetectConflicts:
    def test_tag_on_two_ancestors_conflicts(self, store):
        assert detect_conflicts("Areas/Team/note", store) == ["shared"]

    def test_every_repeated_tag_is_reported_once(self, store):
        conflicts = detect_conflicts("Areas/Team/Plans/note", store)
        assert conflicts == ["work", "shared"]
        assert len(conflicts) == len(set(conflicts))

    def test_tag_on_single_ancestor_is_not_a_conflict(self, store):
        conflicts = detect_conflicts("Areas/Team/Plans/note", store)
        assert "team" not in conflicts
        assert "plan" not in conflicts

    def test_sibling_folders_do_not_conflict(self):
        store = FolderTagStore({"A": ["x"], "B": ["x"]})
        assert detect_conflicts("A/note", store) == []

    def test_note_at_root_has_no_conflicts(self, store):
        assert detect_conflicts("note", store) == []

    @pytest.mark.parametrize(
        "folders, expected",
        [
            ({"A": ["x"], "A/B": ["x"]}, True),
            ({"A": ["x"], "A/B/C": ["x"]}, True),
            ({"A/B": ["x"]}, False),
            ({"A": ["x"], "Z": ["x"]}, False),
        ],
    )
    def test_symmetry(self, folders, expected):
        store = FolderTagStore(folders)
        assert ("x" in detect_conflicts("A/B/C/note", store)) is expected
