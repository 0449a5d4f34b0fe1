"""Form Schemas — Pydantic models for the comic and page edit forms.

Invariants:
    - Titles: 1-200 chars after stripping
    - Descriptions are BBCode source; markup validity is checked by the workflow,
      not here
    - Page content is kept verbatim; JSON validity is checked by the workflow

Design Decisions:
    - Only size limits and whitespace stripping live here, so markup/JSON
      errors re-display the form instead of producing a 400
"""

from pydantic import BaseModel, Field, field_validator


class ComicForm(BaseModel):
    """Create/update comic form."""
    title: str = Field(min_length=1, max_length=200)
    author: str = Field("", max_length=100)
    description: str = Field("", max_length=20_000)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v

    @field_validator("author")
    @classmethod
    def strip_author(cls, v: str) -> str:
        return v.strip()


class PageUpdateForm(BaseModel):
    """Edit page form."""
    title: str = Field("", max_length=200)
    description: str = Field("", max_length=20_000)
    content: str = Field(max_length=2_000_000)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        return v.strip()
