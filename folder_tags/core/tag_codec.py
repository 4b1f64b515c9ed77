"""Reading and writing the tags of a note's text.

Two surface forms are understood:

- the structured form, a ``tags:`` key inside the leading ``---`` block
  (bracket list ``tags: [a, b]``, dash list, or a plain scalar), and
- hashtags (``#token``) in the body, which are always read, and which make up
  the plain-text form (a leading run of hashtags) when front matter is off.

The block is parsed into a :class:`TagBlock` rather than rewritten with
pattern substitution: every line that is not part of the ``tags`` entry is
kept verbatim, so unrelated keys and list items survive any rewrite. All
functions here are pure and total; malformed input degrades to "no block".
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from folder_tags.constants import FRONTMATTER_DELIMITER, INLINE_CONVERSION_LINES, TAG_KEY
from folder_tags.core.tag_store import unique_tags

# A hashtag is any "#" followed by a run of characters up to the next whitespace or "#"
INLINE_TAG_PATTERN = re.compile(r"#([^\s#]+)")
PLAIN_TEXT_RUN_PATTERN = re.compile(r"\A(?:#[^\s#]+\s*)+")
TAG_KEY_PATTERN = re.compile(rf"^{TAG_KEY}\s*:(.*)$")
LIST_ITEM_PATTERN = re.compile(r"^\s*-(?:\s+(.*))?$")


@dataclass
class TagBlock:
    """Typed view of a note's leading metadata block.

    Attributes:
        present: Whether the note starts with a closed ``---`` block.
        lines: Block lines other than the ``tags`` entry, verbatim.
        tags: Tags declared by the ``tags`` entry, in file order, duplicates kept.
        tags_index: Position in ``lines`` where the ``tags`` entry sits, or None.
        style: ``"list"``, ``"bracket"`` or ``"scalar"`` for the declared entry.
        opening: The opening delimiter line as written.
        closing: The closing delimiter line as written.
        rest: Text after the closing delimiter, starting with its newline ("" at EOF).
    """

    present: bool = False
    lines: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    tags_index: Optional[int] = None
    style: Optional[str] = None
    opening: str = FRONTMATTER_DELIMITER
    closing: str = FRONTMATTER_DELIMITER
    rest: str = ""

    @property
    def body(self) -> str:
        return self.rest[1:] if self.rest else ""

    @property
    def has_tag_entry(self) -> bool:
        return self.tags_index is not None


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == FRONTMATTER_DELIMITER


def _clean_tag(raw: str) -> str:
    tag = raw.strip()
    if len(tag) >= 2 and tag[0] == tag[-1] and tag[0] in "'\"":
        quote = tag[0]
        tag = tag[1:-1]
        if quote == "'":
            tag = tag.replace("''", "'")
        tag = tag.strip()
    return tag.lstrip("#")


def _quote_tag(tag: str) -> str:
    """Write ``tag`` so that reading it back yields the same token.

    Tags the reader would alter (surrounding quotes) are written as YAML
    single-quoted scalars.
    """
    if _clean_tag(tag) == tag:
        return tag
    escaped = tag.replace("'", "''")
    return f"'{escaped}'"


def _split_values(values: Iterable[str]) -> list[str]:
    return [tag for tag in (_clean_tag(value) for value in values) if tag]


def parse_tag_block(content: str) -> TagBlock:
    """Parse the leading ``---`` block of ``content``.

    The block must open on the very first line and close on the next
    delimiter line; anything else means there is no block.
    """
    lines = content.split("\n")
    if not lines or not _is_delimiter(lines[0]):
        return TagBlock()

    end = next((index for index in range(1, len(lines)) if _is_delimiter(lines[index])), None)
    if end is None:
        return TagBlock()

    inner = lines[1:end]
    remaining = lines[end + 1:]
    block = TagBlock(
        present=True,
        opening=lines[0],
        closing=lines[end],
        rest="\n" + "\n".join(remaining) if remaining else "",
    )

    start = next(
        (index for index, line in enumerate(inner) if TAG_KEY_PATTERN.match(line.rstrip("\r"))),
        None,
    )
    if start is None:
        block.lines = inner
        return block

    value = TAG_KEY_PATTERN.match(inner[start].rstrip("\r")).group(1).strip()
    stop = start + 1
    if value.startswith("["):
        closing_bracket = value.rfind("]")
        inside = value[1:closing_bracket] if closing_bracket > 0 else value[1:]
        block.tags = _split_values(inside.split(","))
        block.style = "bracket"
    elif value:
        block.tags = _split_values(re.split(r"[,\s]+", value))
        block.style = "scalar"
    else:
        items: list[str] = []
        while stop < len(inner):
            item = LIST_ITEM_PATTERN.match(inner[stop].rstrip("\r"))
            if item is None:
                break
            items.append(item.group(1) or "")
            stop += 1
        block.tags = _split_values(items)
        block.style = "list"

    block.lines = inner[:start] + inner[stop:]
    block.tags_index = start
    return block


def _tag_entry(tags: list[str]) -> list[str]:
    return [f"{TAG_KEY}:"] + [f"  - {_quote_tag(tag)}" for tag in tags]


def _new_block(tags: list[str], content: str) -> str:
    entry = "\n".join(_tag_entry(tags))
    return f"{FRONTMATTER_DELIMITER}\n{entry}\n{FRONTMATTER_DELIMITER}\n{content}"


def _render(block: TagBlock, tags: list[str]) -> str:
    """Serialize ``block`` with ``tags`` as its tag entry (omitted when empty).

    A block left with nothing but blank lines is dropped entirely.
    """
    inner = list(block.lines)
    if tags:
        index = block.tags_index if block.tags_index is not None else len(inner)
        inner[index:index] = _tag_entry(tags)
    elif not any(line.strip() for line in inner):
        return block.body

    rendered = "".join(f"{line}\n" for line in inner)
    return f"{block.opening}\n{rendered}{block.closing}{block.rest}"


def _with_body(content: str, block: TagBlock, body: str) -> str:
    if not block.present:
        return body
    head = content[: len(content) - len(block.rest)]
    return f"{head}\n{body}" if (body or block.rest) else head


def _inline_tags(text: str) -> list[str]:
    return unique_tags(INLINE_TAG_PATTERN.findall(text))


# ==============================================================================
# STRUCTURED FORM
# ==============================================================================


def block_tags(content: str) -> list[str]:
    """Tags declared in the block only, duplicates kept."""
    return list(parse_tag_block(content).tags)


def extract_tags(content: str) -> list[str]:
    """Every tag of a note: block tags in file order, then body hashtags.

    Examples:
        >>> extract_tags("hello #foo #bar world")
        ['foo', 'bar']
        >>> extract_tags("---\\ntags: [a, b]\\n---\\nsee #c")
        ['a', 'b', 'c']
    """
    block = parse_tag_block(content)
    body = block.body if block.present else content
    return unique_tags([*block.tags, *INLINE_TAG_PATTERN.findall(body)])


def set_tags(content: str, tags: Iterable[str]) -> str:
    """Replace the declared tags with ``tags`` written as a dash list.

    Creates the block when missing. With no tags the entry is removed, and the
    block too when nothing else is left in it.
    """
    wanted = unique_tags(tags)
    block = parse_tag_block(content)
    if not block.present:
        return _new_block(wanted, content) if wanted else content
    if not wanted and not block.has_tag_entry:
        return content
    return _render(block, wanted)


def add_tags(content: str, tags: Iterable[str]) -> str:
    """Merge ``tags`` into the declared tags, keeping everything else."""
    wanted = unique_tags(tags)
    if not wanted:
        return content

    block = parse_tag_block(content)
    if not block.present:
        return _new_block(wanted, content)

    declared = unique_tags(block.tags)
    missing = [tag for tag in wanted if tag not in declared]
    if not missing:
        return content
    return _render(block, declared + missing)


def remove_tags(content: str, tags: Iterable[str]) -> str:
    """Remove the named tags from the declared tags."""
    unwanted = set(unique_tags(tags))
    block = parse_tag_block(content)
    if not block.has_tag_entry or not unwanted.intersection(block.tags):
        return content
    return _render(block, [tag for tag in unique_tags(block.tags) if tag not in unwanted])


def remove_all_tags(content: str) -> str:
    """Remove the ``tags`` entry; drop the block when it ends up empty."""
    block = parse_tag_block(content)
    if not block.has_tag_entry:
        return content
    return _render(block, [])


def strip_inline_tag(content: str, tag: str) -> str:
    """Remove ``#tag`` hashtags from the body, matching the whole token only.

    ``#foo`` never matches the start of ``#foobar`` and regex metacharacters in
    ``tag`` are taken literally. The block itself is left untouched.
    """
    cleaned = tag.strip().lstrip("#")
    if not cleaned:
        return content
    pattern = re.compile(rf"(?<!\S)#{re.escape(cleaned)}(?![^\s#])[ \t]*")
    block = parse_tag_block(content)
    body = block.body if block.present else content
    stripped = pattern.sub("", body)
    return content if stripped == body else _with_body(content, block, stripped)


def convert_inline_tags(content: str, tags: Optional[Iterable[str]] = None) -> str:
    """Move body hashtags into the block and strip them from the body.

    Args:
        content: Note text.
        tags: Hashtags to convert; every body hashtag when None.
    """
    block = parse_tag_block(content)
    inline = _inline_tags(block.body if block.present else content)
    selected = inline if tags is None else [tag for tag in unique_tags(tags) if tag in inline]
    if not selected:
        return content

    updated = add_tags(content, selected)
    for tag in selected:
        updated = strip_inline_tag(updated, tag)
    return updated


def convert_leading_inline_tags(content: str, line_count: int = INLINE_CONVERSION_LINES) -> str:
    """Convert hashtags found in the first ``line_count`` body lines.

    Lines emptied by the conversion are dropped, as are blank lines left at the
    top of the body.
    """
    block = parse_tag_block(content)
    lines = (block.body if block.present else content).split("\n")

    found: list[str] = []
    head: list[str] = []
    for line in lines[:line_count]:
        line_tags = INLINE_TAG_PATTERN.findall(line)
        if not line_tags:
            head.append(line)
            continue
        found.extend(line_tags)
        remaining = re.sub(r"[ \t]{2,}", " ", INLINE_TAG_PATTERN.sub("", line)).strip()
        if remaining:
            head.append(remaining)

    if not found:
        return content

    body = "\n".join(head + lines[line_count:]).lstrip("\n")
    return add_tags(_with_body(content, block, body), found)


# ==============================================================================
# PLAIN-TEXT FORM
# ==============================================================================


def extract_plain_text_tags(content: str) -> list[str]:
    """Tags of the leading hashtag run, in order."""
    match = PLAIN_TEXT_RUN_PATTERN.match(content)
    if match is None:
        return []
    return unique_tags(INLINE_TAG_PATTERN.findall(match.group(0)))


def _plain_text(tags: list[str], body: str) -> str:
    line = " ".join(f"#{tag}" for tag in tags)
    return f"{line}\n\n{body}" if body else f"{line}\n"


def set_tags_as_plain_text(content: str, tags: Iterable[str]) -> str:
    """Replace the leading hashtag run with ``tags``."""
    wanted = unique_tags(tags)
    body = remove_tags_from_plain_text(content)
    return _plain_text(wanted, body) if wanted else body


def add_tags_as_plain_text(content: str, tags: Iterable[str]) -> str:
    """Union ``tags`` into the leading hashtag run, creating it when absent."""
    existing = extract_plain_text_tags(content)
    missing = [tag for tag in unique_tags(tags) if tag not in existing]
    if not missing:
        return content
    return _plain_text(existing + missing, remove_tags_from_plain_text(content))


def remove_tags_from_plain_text(content: str) -> str:
    """Strip the leading hashtag run and the blank lines after it."""
    match = PLAIN_TEXT_RUN_PATTERN.match(content)
    return content[match.end():] if match else content


def drop_plain_text_tags(content: str, tags: Iterable[str]) -> str:
    """Remove the named tags from the leading hashtag run."""
    unwanted = set(unique_tags(tags))
    existing = extract_plain_text_tags(content)
    if not unwanted.intersection(existing):
        return content
    return set_tags_as_plain_text(content, [tag for tag in existing if tag not in unwanted])


# ==============================================================================
# FORM DISPATCH
# ==============================================================================


def declared_tags(content: str, use_front_matter: bool = True) -> list[str]:
    """Tags written in the active surface form, duplicates kept."""
    if use_front_matter:
        return block_tags(content)
    match = PLAIN_TEXT_RUN_PATTERN.match(content)
    return INLINE_TAG_PATTERN.findall(match.group(0)) if match else []


def write_tags(content: str, tags: Iterable[str], use_front_matter: bool = True) -> str:
    if use_front_matter:
        return set_tags(content, tags)
    return set_tags_as_plain_text(content, tags)


def merge_tags_into(content: str, tags: Iterable[str], use_front_matter: bool = True) -> str:
    if use_front_matter:
        return add_tags(content, tags)
    return add_tags_as_plain_text(content, tags)


def discard_tags(content: str, tags: Iterable[str], use_front_matter: bool = True) -> str:
    if use_front_matter:
        return remove_tags(content, tags)
    return drop_plain_text_tags(content, tags)


def clear_tags(content: str, use_front_matter: bool = True) -> str:
    if use_front_matter:
        return remove_all_tags(content)
    return remove_tags_from_plain_text(content)
