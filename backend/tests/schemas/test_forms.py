"""Form schema tests — size limits and whitespace handling.

Invariants:
    - Comic title is required and stripped
    - Markup and JSON are not validated here
"""

import pytest
from pydantic import ValidationError

from comic_site.schemas.forms import ComicForm, PageUpdateForm


# --- ComicForm ------------------------------------------------------------------

def test_comic_form_strips_title_and_author():
    form = ComicForm(title="  Title ", author=" Ann ")
    assert form.title == "Title"
    assert form.author == "Ann"
    assert form.description == ""


@pytest.mark.parametrize("title", ["", "   "])
def test_comic_form_rejects_blank_title(title):
    with pytest.raises(ValidationError):
        ComicForm(title=title)


def test_comic_form_title_max_length():
    with pytest.raises(ValidationError):
        ComicForm(title="x" * 201)


def test_comic_form_keeps_invalid_markup():
    assert ComicForm(title="t", description="[b]open").description == "[b]open"


# --- PageUpdateForm -------------------------------------------------------------

def test_page_form_requires_content():
    with pytest.raises(ValidationError):
        PageUpdateForm(title="t")


def test_page_form_keeps_content_verbatim():
    form = PageUpdateForm(title=" t ", content="not json")
    assert form.title == "t"
    assert form.content == "not json"


def test_page_form_empty_title_allowed():
    assert PageUpdateForm(content="{}").title == ""
