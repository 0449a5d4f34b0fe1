"""Response Rendering — maps SiteResponse onto HTTP for the view layer.

Invariants:
    - OK → 200 JSON {"view", "data"}; the client renders the named view
    - Redirect → 303 with Location
    - NotFound → 404 JSON {"view": "notfound"}
    - Error → 500 JSON {"view": "error", "data": {"message", "lang"}}
    - A locale chosen by query parameter is persisted in the `locale` cookie
"""

import logging

from fastapi import status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from comic_site.api.dependencies import LOCALE_PARAM
from comic_site.core.responses import Error, NotFound, OK, Redirect, SiteResponse
from comic_site.core.ui_strings import get_ui_strings

logger = logging.getLogger(__name__)


def render_site_response(site_response: SiteResponse) -> Response:
    """Translate one SiteResponse into a Starlette response."""
    session = site_response.session
    locale = session.locale if session else None
    extra = {"remote_address": session.remote_address if session else None}

    match site_response.status:
        case OK(view=view, data=data):
            response: Response = JSONResponse({"view": view, "data": data})
        case Redirect(location=location):
            response = RedirectResponse(location, status_code=status.HTTP_303_SEE_OTHER)
        case NotFound():
            response = JSONResponse(
                {"view": "notfound", "data": {"lang": get_ui_strings(locale)}},
                status_code=status.HTTP_404_NOT_FOUND,
            )
        case Error(message=message):
            logger.warning(f"Error response: {message}", extra=extra)
            response = JSONResponse(
                {
                    "view": "error",
                    "data": {"message": message, "lang": get_ui_strings(locale)},
                },
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        case _:
            raise TypeError(f"Unknown response status: {site_response.status!r}")

    if locale is not None:
        response.set_cookie(LOCALE_PARAM, locale.value, samesite="lax")
    return response
