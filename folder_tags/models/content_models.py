"""Pydantic input models for the content-level tag codec tools.

These tools operate on markdown text passed in by the caller and never touch
a vault.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .base import validate_tag_list


class ContentInput(BaseModel):
    """Input model for extract_tags_from_content and remove_all_tags_from_content.

    Examples:
        >>> ContentInput(content="---\\ntags:\\n  - a\\n---\\nBody")
    """

    content: str = Field(
        description="Full markdown text of a note, front matter included."
    )

    use_front_matter: bool = Field(
        True,
        description=(
            "Read and write tags in the front matter block (default) "
            "or as a leading '#tag' line."
        )
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"content": "---\ntags:\n  - project\n---\n# Kickoff\n", "use_front_matter": True},
                {"content": "#project #alpha\n\n# Kickoff\n", "use_front_matter": False}
            ]
        }


class ContentTagsInput(ContentInput):
    """Input model for update_tags_in_content and add_tags_to_content.

    Examples:
        >>> ContentTagsInput(content="Body", tags=["project"])
    """

    tags: list[str] = Field(
        description="Tags to write or add. A leading '#' is optional."
    )

    @field_validator('tags')
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return validate_tag_list(v)

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {"content": "# Kickoff\n", "tags": ["project"], "use_front_matter": True}
            ]
        }
