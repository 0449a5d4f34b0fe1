"""Page Routes — page viewer, create (with optional image upload) and edit forms.

Invariants:
    - /page/add and /page/last are registered before /page/{page_index}
    - An uploaded image is written to disk before the workflow runs and recorded
      with add_file inside the page-creation transaction; if the page is not
      created the file is removed again
    - Uploads over settings.max_upload_bytes are rejected with 413 before
      the workflow runs
    - Form bodies are validated before reaching the controller
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile

from comic_site.api.dependencies import get_controller, get_session_info
from comic_site.api.rendering import render_site_response
from comic_site.config import Settings, get_settings
from comic_site.core.domain_types import ComicId, PageId, SessionInfo
from comic_site.core.responses import Redirect
from comic_site.infrastructure.uploads import StoredUpload, discard_upload, save_upload
from comic_site.schemas.forms import PageUpdateForm
from comic_site.services.site_controller import SiteController

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/comic/{comic_id}/page", tags=["pages"])

Session = Annotated[SessionInfo, Depends(get_session_info)]
Controller = Annotated[SiteController, Depends(get_controller)]


@router.get("/add")
async def add_page(comic_id: int, session: Session, controller: Controller):
    return render_site_response(await controller.add_page(session, ComicId(comic_id)))


@router.post("/add")
async def post_add_page(
    comic_id: int,
    session: Session,
    controller: Controller,
    settings: Annotated[Settings, Depends(get_settings)],
    title: Annotated[str, Form(max_length=200)] = "",
    description: Annotated[str, Form(max_length=20_000)] = "",
    image_url: Annotated[str, Form(max_length=2_000)] = "",
    image: Annotated[UploadFile | None, File()] = None,
):
    stored: StoredUpload | None = None
    if image is not None and image.filename:
        stored = await save_upload(
            image, settings.upload_dir, settings.max_upload_bytes,
        )
        if not image_url:
            image_url = f"{settings.upload_url_prefix}/{stored.localname}"

    async def record_upload(page_id: PageId) -> None:
        if stored is not None:
            await controller.add_file(
                page_id, stored.filename, stored.localname, stored.mimetype,
                stored.size,
            )

    response = await controller.post_add_page(
        session, ComicId(comic_id), title.strip(), description, image_url,
        record_upload,
    )
    if stored is not None and not isinstance(response.status, Redirect):
        await discard_upload(stored, settings.upload_dir)
    return render_site_response(response)


@router.get("/last")
async def view_last_page(comic_id: int, session: Session, controller: Controller):
    return render_site_response(
        await controller.view_last_page(session, ComicId(comic_id)),
    )


@router.get("/{page_index}")
async def view_page(
    comic_id: int, page_index: int, session: Session, controller: Controller,
):
    return render_site_response(
        await controller.view_page(session, ComicId(comic_id), page_index),
    )


@router.get("/{page_index}/edit")
async def edit_page(
    comic_id: int, page_index: int, session: Session, controller: Controller,
):
    return render_site_response(
        await controller.edit_page(session, ComicId(comic_id), page_index),
    )


@router.post("/{page_index}/edit")
async def post_update_page(
    comic_id: int,
    page_index: int,
    session: Session,
    controller: Controller,
    form: Annotated[PageUpdateForm, Form()],
):
    return render_site_response(await controller.post_update_page(
        session, ComicId(comic_id), page_index, form.title, form.description,
        form.content,
    ))
