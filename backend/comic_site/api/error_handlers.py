"""Error Handlers — failures raised outside the workflow, rendered as the error view.

Invariants:
    - Every handler answers with the same body shape as a workflow Error:
      {"view": "error", "data": {"message", "lang"}} plus an "error" envelope
    - ComicSiteError → its own http_status and to_response() envelope
    - RequestValidationError → 400 with one entry per rejected form field
    - Anything else → 500; internal details go to the log only

Design Decisions:
    - Workflow handlers already turn expected failures into SiteResponse values;
      these handlers only see dependency wiring, session setup and form parsing
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from comic_site.api.dependencies import get_session_info
from comic_site.core.errors import ComicSiteError, ErrorCategory, ErrorSeverity
from comic_site.core.ui_strings import get_ui_strings

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ComicSiteError, _site_error)
    app.add_exception_handler(RequestValidationError, _form_error)
    app.add_exception_handler(Exception, _unexpected_error)


def _error_view(request: Request, status_code: int, envelope: dict) -> JSONResponse:
    locale = get_session_info(request).locale
    return JSONResponse(
        status_code=status_code,
        content={
            "view": "error",
            "data": {"message": envelope["message"], "lang": get_ui_strings(locale)},
            "error": envelope,
        },
    )


async def _site_error(request: Request, exc: ComicSiteError) -> JSONResponse:
    level = logging.WARNING if exc.severity is ErrorSeverity.WARNING else logging.ERROR
    logger.log(
        level, f"{type(exc).__name__}: {exc.message}",
        extra={**exc.log_extra(), "path": request.url.path},
    )
    return _error_view(request, exc.http_status, exc.to_response()["error"])


async def _form_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [
        {
            # drop the "body"/"query" location prefix; templates key on field names
            "field": ".".join(str(loc) for loc in e["loc"][1:]) or str(e["loc"][0]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected request to {request.url.path}: "
        f"{', '.join(f['field'] for f in fields)}",
        extra={"path": request.url.path},
    )
    return _error_view(request, status.HTTP_400_BAD_REQUEST, {
        "code": "VALIDATION_ERROR",
        "message": "Invalid form data",
        "category": ErrorCategory.VALIDATION.value,
        "severity": ErrorSeverity.WARNING.value,
        "details": fields,
    })


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True, extra={"path": request.url.path},
    )
    return _error_view(request, status.HTTP_500_INTERNAL_SERVER_ERROR, {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
        "category": ErrorCategory.INTERNAL.value,
        "severity": ErrorSeverity.CRITICAL.value,
    })
