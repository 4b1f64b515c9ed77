import pytest

from folder_tags.core.vault_operations import (
    construct_note_path,
    parent_folder_path,
    resolve_folder_path,
    resolve_note_path,
)
from folder_tags.data_models import VaultMetadata, normalize_folder_path


@pytest.fixture
def vault(tmp_path):
    return VaultMetadata(name="test", path=tmp_path.resolve(), description="", exists=True)


def test_construct_preserves_dot_in_basename():
    """Dots within the note name are preserved before the .md suffix."""
    identifier = "v1.4 Release Changelog"
    assert construct_note_path(identifier).as_posix() == "v1.4 Release Changelog.md"


def test_construct_preserves_dots_in_nested_paths():
    identifier = "Projects/v1.4 Release Notes"
    assert construct_note_path(identifier).as_posix() == "Projects/v1.4 Release Notes.md"


@pytest.mark.parametrize(
    "path, expected",
    [
        ("Projects/Alpha", "Projects/Alpha"),
        ("/Projects/Alpha/", "Projects/Alpha"),
        ("Projects//Alpha", "Projects/Alpha"),
        ("Projects\\Alpha", "Projects/Alpha"),
        ("/", ""),
        ("", ""),
    ],
)
def test_normalize_folder_path(path, expected):
    assert normalize_folder_path(path) == expected


def test_parent_folder_of_note():
    assert parent_folder_path("Projects/Alpha/plan") == "Projects/Alpha"
    assert parent_folder_path("plan") == ""


def test_resolve_note_rejects_directory_traversal(vault):
    with pytest.raises(ValueError):
        resolve_note_path(vault, "../outside")


def test_resolve_folder_rejects_directory_traversal(vault):
    with pytest.raises(ValueError):
        resolve_folder_path(vault, "../outside")


def test_resolve_root_folder(vault):
    assert resolve_folder_path(vault, "") == vault.path
