"""Comic Routes — catalog listing, comic detail, create and edit forms.

Invariants:
    - Every route returns render_site_response(...) of exactly one controller call
    - Form bodies are validated by ComicForm before reaching the controller
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Query

from comic_site.api.dependencies import get_controller, get_session_info
from comic_site.api.rendering import render_site_response
from comic_site.core.domain_types import ComicId, SessionInfo
from comic_site.schemas.forms import ComicForm
from comic_site.services.site_controller import SiteController

router = APIRouter(tags=["comics"])

Session = Annotated[SessionInfo, Depends(get_session_info)]
Controller = Annotated[SiteController, Depends(get_controller)]


@router.get("/")
async def main(session: Session, controller: Controller):
    return render_site_response(await controller.main(session))


@router.get("/error")
async def error(
    session: Session, controller: Controller,
    message: str = Query("", max_length=500),
):
    return render_site_response(await controller.error(session, message))


@router.get("/comics")
async def view_comic_list(
    session: Session, controller: Controller, page: int = Query(1, ge=0),
):
    return render_site_response(await controller.view_comic_list(session, page))


@router.get("/comic/add")
async def add_comic(session: Session, controller: Controller):
    return render_site_response(await controller.add_comic(session))


@router.post("/comic/add")
async def post_add_comic(
    session: Session, controller: Controller, form: Annotated[ComicForm, Form()],
):
    return render_site_response(await controller.post_add_comic(
        session, form.title, form.author, form.description,
    ))


@router.get("/comic/{comic_id}")
async def view_comic(comic_id: int, session: Session, controller: Controller):
    return render_site_response(
        await controller.view_comic(session, ComicId(comic_id)),
    )


@router.get("/comic/{comic_id}/edit")
async def edit_comic(comic_id: int, session: Session, controller: Controller):
    return render_site_response(
        await controller.edit_comic(session, ComicId(comic_id)),
    )


@router.post("/comic/{comic_id}/edit")
async def post_update_comic(
    comic_id: int,
    session: Session,
    controller: Controller,
    form: Annotated[ComicForm, Form()],
):
    return render_site_response(await controller.post_update_comic(
        session, ComicId(comic_id), form.title, form.author, form.description,
    ))
