"""Tests for the leading hashtag line used when front matter is disabled."""

import pytest

from folder_tags.core.tag_codec import (
    add_tags_as_plain_text,
    clear_tags,
    declared_tags,
    drop_plain_text_tags,
    extract_plain_text_tags,
    merge_tags_into,
    remove_tags_from_plain_text,
    set_tags_as_plain_text,
    write_tags,
)


class TestPlainTextTags:
    def test_extract_leading_run(self):
        assert extract_plain_text_tags("#a #b\n\nBody #c") == ["a", "b"]

    def test_extract_without_run(self):
        assert extract_plain_text_tags("Body #c") == []

    def test_heading_is_not_a_run(self):
        assert extract_plain_text_tags("# Title\n") == []

    def test_set_on_plain_body(self):
        assert set_tags_as_plain_text("Body", ["a", "b"]) == "#a #b\n\nBody"

    def test_set_replaces_existing_run(self):
        assert set_tags_as_plain_text("#old\n\nBody", ["new"]) == "#new\n\nBody"

    def test_set_empty_removes_run(self):
        assert set_tags_as_plain_text("#old\n\nBody", []) == "Body"

    def test_set_on_empty_content(self):
        assert set_tags_as_plain_text("", ["a"]) == "#a\n"

    def test_add_unions_tags(self):
        assert add_tags_as_plain_text("#a\n\nBody", ["a", "b"]) == "#a #b\n\nBody"

    def test_add_nothing_new_is_unchanged(self):
        assert add_tags_as_plain_text("#a #b\n\nBody", ["b"]) == "#a #b\n\nBody"

    def test_remove_strips_run_and_blank_lines(self):
        assert remove_tags_from_plain_text("#a #b\n\n\nBody") == "Body"

    def test_drop_named_tags(self):
        assert drop_plain_text_tags("#a #b\n\nBody", ["a"]) == "#b\n\nBody"

    @pytest.mark.parametrize("body", ["Body", "# Heading\n\nText\n", ""])
    def test_remove_after_set_restores_body(self, body):
        assert remove_tags_from_plain_text(set_tags_as_plain_text(body, ["x", "y"])) == body

    def test_declared_tags_keep_duplicates(self):
        assert declared_tags("#a #a #b\n\nBody", use_front_matter=False) == ["a", "a", "b"]


class TestFormDispatch:
    def test_write_uses_front_matter_by_default(self):
        assert write_tags("Body", ["a"]) == "---\ntags:\n  - a\n---\nBody"

    def test_write_as_plain_text(self):
        assert write_tags("Body", ["a"], use_front_matter=False) == "#a\n\nBody"

    def test_merge_as_plain_text(self):
        assert merge_tags_into("#a\n\nBody", ["b"], use_front_matter=False) == "#a #b\n\nBody"

    def test_clear_as_plain_text(self):
        assert clear_tags("#a\n\nBody", use_front_matter=False) == "Body"

    def test_clear_front_matter(self):
        assert clear_tags("---\ntags: [a]\n---\nBody") == "Body"
