"""Tests for reading and writing note tags in front matter and inline form."""

import frontmatter
import pytest

from folder_tags.core.tag_codec import (
    add_tags,
    block_tags,
    convert_inline_tags,
    convert_leading_inline_tags,
    extract_tags,
    parse_tag_block,
    remove_all_tags,
    remove_tags,
    set_tags,
    strip_inline_tag,
)

TAG_FREE_CONTENTS = [
    "",
    "body",
    "Body text\n",
    "# Heading\n\nParagraph without tags.\n",
    "---\ntitle: Example\n---\nBody\n",
    "---\ntitle: Example\naliases:\n  - first\n  - second\n---\n",
]


class TestParseTagBlock:
    def test_no_block(self):
        block = parse_tag_block("just text")
        assert not block.present
        assert block.tags == []

    def test_unclosed_block_is_not_a_block(self):
        block = parse_tag_block("---\ntags: [a]\nbody")
        assert not block.present

    def test_block_must_start_on_first_line(self):
        assert not parse_tag_block("\n---\ntags: [a]\n---\n").present

    def test_bracket_form(self):
        block = parse_tag_block("---\ntags: [a, \"b\", '#c']\n---\n")
        assert block.tags == ["a", "b", "c"]
        assert block.style == "bracket"

    def test_list_form_with_and_without_indent(self):
        block = parse_tag_block("---\ntags:\n  - a\n- b\n---\n")
        assert block.tags == ["a", "b"]
        assert block.style == "list"

    def test_scalar_form(self):
        assert parse_tag_block("---\ntags: a, b\n---\n").tags == ["a", "b"]
        assert parse_tag_block("---\ntags: a b\n---\n").tags == ["a", "b"]

    def test_duplicates_are_kept(self):
        assert block_tags("---\ntags: [a, a, b]\n---\n") == ["a", "a", "b"]

    def test_other_keys_are_kept_verbatim(self):
        block = parse_tag_block("---\ntitle: T\ntags: [a]\nauthor: me\n---\nBody")
        assert block.lines == ["title: T", "author: me"]
        assert block.tags_index == 1
        assert block.body == "Body"

    def test_crlf_delimiters(self):
        block = parse_tag_block("---\r\ntags: [a]\r\n---\r\nBody")
        assert block.present
        assert block.tags == ["a"]


class TestExtractTags:
    def test_inline_tags_without_block(self):
        assert extract_tags("hello #foo #bar world") == ["foo", "bar"]

    def test_block_then_inline(self):
        assert extract_tags("---\ntags: [a, b]\n---\nsee #c and #a") == ["a", "b", "c"]

    def test_hash_inside_word_is_a_tag(self):
        assert extract_tags("issue#12 and a#b") == ["12", "b"]

    def test_token_runs_to_whitespace_or_hash(self):
        assert extract_tags("todo (#urgent) and foo#bar") == ["urgent)", "bar"]
        assert extract_tags("**#tag**#next") == ["tag**", "next"]

    def test_heading_is_not_a_tag(self):
        assert extract_tags("# Heading\n## Sub") == []

    def test_empty_content(self):
        assert extract_tags("") == []

    def test_empty_tags_value(self):
        assert extract_tags("---\ntags:\n---\nbody") == []


class TestSetTags:
    def test_replaces_list(self):
        content = "---\ntags:\n  - a\n---\nbody"
        assert set_tags(content, ["b", "c"]) == "---\ntags:\n  - b\n  - c\n---\nbody"

    def test_synthesizes_block(self):
        assert set_tags("body", ["a"]) == "---\ntags:\n  - a\n---\nbody"

    def test_appends_key_to_existing_block(self):
        content = "---\ntitle: T\n---\nBody"
        assert set_tags(content, ["x"]) == "---\ntitle: T\ntags:\n  - x\n---\nBody"

    def test_keeps_key_position(self):
        content = "---\ntitle: T\ntags: [a]\nauthor: me\n---\n"
        assert set_tags(content, ["b"]) == "---\ntitle: T\ntags:\n  - b\nauthor: me\n---\n"

    def test_empty_tags_value_keeps_position(self):
        content = "---\ntitle: T\ntags:\nauthor: me\n---\n"
        assert set_tags(content, ["x"]) == "---\ntitle: T\ntags:\n  - x\nauthor: me\n---\n"

    def test_other_list_items_are_preserved(self):
        content = "---\naliases:\n  - one\ntags:\n  - a\n---\n"
        assert set_tags(content, ["b"]) == "---\naliases:\n  - one\ntags:\n  - b\n---\n"

    def test_no_trailing_newline(self):
        assert set_tags("---\ntags: [a]\n---", ["b"]) == "---\ntags:\n  - b\n---"

    def test_empty_tags_without_block_is_unchanged(self):
        assert set_tags("body", []) == "body"

    def test_empty_tags_drops_empty_block(self):
        assert set_tags("---\ntags: [a]\n---\nbody", []) == "body"

    def test_empty_tags_keeps_other_keys(self):
        assert set_tags("---\ntitle: T\ntags: [a]\n---\nbody", []) == "---\ntitle: T\n---\nbody"

    def test_duplicates_are_collapsed(self):
        assert block_tags(set_tags("body", ["a", "a", "b"])) == ["a", "b"]

    @pytest.mark.parametrize("content", TAG_FREE_CONTENTS)
    @pytest.mark.parametrize("tags", [["a"], ["a", "b", "c"], ["project/alpha", "c++"]])
    def test_round_trip(self, content, tags):
        assert set(extract_tags(set_tags(content, tags))) == set(tags)

    @pytest.mark.parametrize(
        "content",
        TAG_FREE_CONTENTS + ["---\ntags: [x, y]\ntitle: T\n---\nbody", "---\ntags: x\n---"],
    )
    def test_idempotent(self, content):
        once = set_tags(content, ["a", "b"])
        assert set_tags(once, ["a", "b"]) == once

    @pytest.mark.parametrize("tag", ["'draft'", '"draft"', "''", "it's", "'a'b'"])
    def test_quoted_tokens_round_trip(self, tag):
        assert extract_tags(set_tags("body", [tag])) == [tag]

    def test_quoted_token_is_written_as_yaml_string(self):
        content = set_tags("body", ["'draft'", "plain"])
        assert content == "---\ntags:\n  - '''draft'''\n  - plain\n---\nbody"
        assert frontmatter.loads(content).metadata == {"tags": ["'draft'", "plain"]}

    def test_written_block_is_valid_yaml(self):
        content = set_tags("---\ntitle: Plan\n---\n# Plan\n", ["project", "alpha"])
        post = frontmatter.loads(content)
        assert post.metadata == {"title": "Plan", "tags": ["project", "alpha"]}
        assert post.content.strip() == "# Plan"


class TestAddAndRemoveTags:
    def test_add_merges_without_duplicates(self):
        content = "---\ntags: [a]\n---\nbody"
        assert block_tags(add_tags(content, ["a", "b"])) == ["a", "b"]

    def test_add_nothing_new_is_unchanged(self):
        content = "---\ntags: [a, b]\n---\nbody"
        assert add_tags(content, ["b"]) == content

    def test_add_does_not_copy_inline_tags(self):
        content = "see #inline"
        assert block_tags(add_tags(content, ["a"])) == ["a"]

    def test_remove_named_tags_only(self):
        content = "---\ntags:\n  - a\n  - b\n---\nbody"
        assert remove_tags(content, ["a"]) == "---\ntags:\n  - b\n---\nbody"

    def test_remove_missing_tag_is_unchanged(self):
        content = "---\ntags: [a]\n---\nbody"
        assert remove_tags(content, ["z"]) == content

    def test_remove_all_keeps_other_list_items(self):
        content = "---\naliases:\n  - one\ntags:\n  - a\n---\nbody"
        assert remove_all_tags(content) == "---\naliases:\n  - one\n---\nbody"

    def test_remove_all_without_tags_is_unchanged(self):
        assert remove_all_tags("---\ntitle: T\n---\n") == "---\ntitle: T\n---\n"

    @pytest.mark.parametrize("content", TAG_FREE_CONTENTS)
    def test_remove_all_after_add_restores_content(self, content):
        assert remove_all_tags(add_tags(content, ["x", "y"])) == content

    def test_added_block_is_valid_yaml(self):
        post = frontmatter.loads(add_tags("Body", ["x", "y"]))
        assert post.metadata["tags"] == ["x", "y"]
        assert post.content.strip() == "Body"


class TestStripInlineTag:
    def test_removes_whole_token(self):
        assert strip_inline_tag("see #foo and #foobar", "foo") == "see and #foobar"

    def test_regex_metacharacters_are_literal(self):
        assert strip_inline_tag("Use #c++ and #c", "c++") == "Use and #c"
        assert strip_inline_tag("Use #c++ and #c", "c") == "Use #c++ and "

    def test_dot_does_not_match_any_character(self):
        assert strip_inline_tag("#a.b #axb", "a.b") == "#axb"

    def test_block_is_untouched(self):
        content = "---\ntags: [foo]\n---\nbody #foo"
        assert strip_inline_tag(content, "foo") == "---\ntags: [foo]\n---\nbody "

    def test_missing_tag_is_unchanged(self):
        assert strip_inline_tag("plain", "foo") == "plain"


class TestInlineConversion:
    def test_convert_all_inline_tags(self):
        result = convert_inline_tags("Body #a text #b")
        assert block_tags(result) == ["a", "b"]
        assert "#" not in parse_tag_block(result).body

    def test_convert_selected_inline_tags(self):
        result = convert_inline_tags("Body #a text #b", ["b"])
        assert block_tags(result) == ["b"]
        assert "#a" in parse_tag_block(result).body

    def test_convert_without_inline_tags_is_unchanged(self):
        assert convert_inline_tags("no tags") == "no tags"

    def test_convert_leading_lines_only(self):
        content = "#a #b\nTitle line\nText #c\nFar #d"
        assert convert_leading_inline_tags(content) == (
            "---\ntags:\n  - a\n  - b\n  - c\n---\nTitle line\nText\nFar #d"
        )

    def test_convert_leading_lines_into_existing_block(self):
        content = "---\ntitle: T\n---\n#a\nBody"
        assert convert_leading_inline_tags(content) == "---\ntitle: T\ntags:\n  - a\n---\nBody"
