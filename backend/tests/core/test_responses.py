"""Site response tests — builder output and canonical locations."""

from comic_site.core.domain_types import Locale, SessionInfo
from comic_site.core.responses import (
    Error, NotFound, OK, Redirect, ResponseBuilder,
    comic_location, page_edit_location, page_location,
)
from comic_site.core.ui_strings import get_ui_strings


def _builder(locale=None):
    return ResponseBuilder(SessionInfo("127.0.0.1", locale), get_ui_strings)


def test_locations():
    assert comic_location(3) == "/comic/3"
    assert page_location(3, 2) == "/comic/3/page/2"
    assert page_edit_location(3, 2) == "/comic/3/page/2/edit"


def test_view_data_always_has_lang():
    data = _builder(Locale.ZH_TW).view_data(comic_id=1)
    assert data["comic_id"] == 1
    assert data["lang"] == get_ui_strings(Locale.ZH_TW)


def test_view_data_is_fresh_each_call():
    builder = _builder()
    first = builder.view_data()
    first["lang"]["submit"] = "x"
    assert builder.view_data()["lang"]["submit"] == "Submit"


def test_ok_defaults_to_lang_only():
    res = _builder().ok("main")
    assert res.status == OK("main", {"lang": get_ui_strings(None)})
    assert res.session.remote_address == "127.0.0.1"


def test_form_error_escapes_only_user_fields():
    res = _builder().form_error(
        "editpage", "Unclosed tag [b]",
        escaped={"title": "<a>", "description": "x & y"},
        content="<raw>", comic_id=2,
    )
    data = res.status.data
    assert data["title"] == "&lt;a&gt;"
    assert data["description"] == "x &amp; y"
    assert data["content"] == "<raw>"
    assert data["comic_id"] == 2
    assert data["error"] == "Unclosed tag [b]"


def test_terminal_variants():
    builder = _builder()
    assert builder.redirect("/comic/1").status == Redirect("/comic/1")
    assert builder.not_found().status == NotFound()
    assert builder.error().status == Error("DB failed")
    assert builder.error("update failed").status == Error("update failed")
