"""Site Responses — the closed status union handed to the view layer, plus its builder.

Invariants:
    - Exactly one SiteResponseStatus variant per handler invocation
    - Every OK view-data mapping is built fresh and carries a `lang` key
    - Form re-display never runs user input through the markup renderer again;
      it is HTML-escaped with encode_html()
    - Redirect locations follow /comic/{id}, /comic/{id}/page/{index},
      /comic/{id}/page/{index}/edit exactly

Design Decisions:
    - Frozen dataclasses for the four variants: the render layer branches with
      isinstance / match and the type checker sees the union as closed
    - ViewValue is a recursive alias of the value shapes templates can bind
"""

from dataclasses import dataclass, field
from typing import Union

from comic_site.core.domain_types import SessionInfo
from comic_site.core.html_encoding import encode_html
from comic_site.core.ui_strings import StringTable

ViewValue = Union[
    str, int, bool, dict[str, "ViewValue"], list[dict[str, "ViewValue"]],
]
ViewData = dict[str, ViewValue]

GENERIC_STORE_ERROR = "DB failed"


# ─── Status variants ─────────────────────────────────────────────

@dataclass(frozen=True)
class Error:
    message: str


@dataclass(frozen=True)
class OK:
    view: str
    data: ViewData = field(default_factory=dict)


@dataclass(frozen=True)
class Redirect:
    location: str


@dataclass(frozen=True)
class NotFound:
    pass


SiteResponseStatus = Error | OK | Redirect | NotFound


@dataclass(frozen=True)
class SiteResponse:
    status: SiteResponseStatus
    session: SessionInfo | None = None


# ─── Canonical locations ─────────────────────────────────────────

def comic_location(comic_id: int) -> str:
    return f"/comic/{comic_id}"


def page_location(comic_id: int, page_index: int) -> str:
    return f"/comic/{comic_id}/page/{page_index}"


def page_edit_location(comic_id: int, page_index: int) -> str:
    return f"/comic/{comic_id}/page/{page_index}/edit"


# ─── Builder ─────────────────────────────────────────────────────

class ResponseBuilder:
    """Assembles SiteResponse values for one session."""

    def __init__(self, session: SessionInfo, strings: StringTable):
        self.session = session
        self._strings = strings

    def view_data(self, **fields: ViewValue) -> ViewData:
        """Fresh view-data mapping with the session's UI string table bound."""
        data: ViewData = {"lang": self._strings(self.session.locale)}
        data.update(fields)
        return data

    def ok(self, view: str, data: ViewData | None = None) -> SiteResponse:
        return SiteResponse(OK(view, data if data is not None else self.view_data()), self.session)

    def form_error(
        self, view: str, error: str, *, escaped: dict[str, str], **fields: ViewValue,
    ) -> SiteResponse:
        """Re-display a rejected form: user input via encode_html, other fields as given."""
        data = self.view_data(**fields)
        for key, value in escaped.items():
            data[key] = encode_html(value)
        data["error"] = error
        return self.ok(view, data)

    def redirect(self, location: str) -> SiteResponse:
        return SiteResponse(Redirect(location), self.session)

    def not_found(self) -> SiteResponse:
        return SiteResponse(NotFound(), self.session)

    def error(self, message: str = GENERIC_STORE_ERROR) -> SiteResponse:
        return SiteResponse(Error(message), self.session)
