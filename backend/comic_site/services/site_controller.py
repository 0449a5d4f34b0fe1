"""Site Controller — content workflow engine for comics and pages.

Invariants:
    - Every handler returns exactly one SiteResponse
    - Multi-step mutations (page creation) run inside one ScopedTransaction that
      covers the store writes and the on_success side effect; it commits only on
      the success exit and rolls back on every other exit
    - Collaborator calls are captured as Ok | WorkflowFailure; rollback and
      response shape are decided by branching on the failure tag
    - User input re-displayed after a failure is HTML-escaped, never re-rendered
    - Display text (titles, rendered descriptions, content) goes through
      script conversion for the session locale on every read path

Design Decisions:
    - One controller per request: the store wraps the request's DB session
    - Terminal messages are generic ("DB failed", "update failed", "Invalid JSON");
      store details go to the log only
"""

import logging
from typing import Awaitable, Callable

from comic_site.core.domain_types import ComicId, FileId, Locale, PageId, SessionInfo
from comic_site.core.html_encoding import encode_html
from comic_site.core.json_canonical import canonicalize, default_page_content
from comic_site.core.outcomes import (
    ContentFormatFailure, Ok, RuntimeFailure, WorkflowFailure, attempt,
    classify_failure,
)
from comic_site.core.repository_protocols import ContentStore, TextTransformer
from comic_site.core.responses import (
    GENERIC_STORE_ERROR, ResponseBuilder, SiteResponse, ViewData,
    comic_location, page_edit_location, page_location,
)
from comic_site.core.ui_strings import StringTable, get_ui_strings
from comic_site.services.scoped_transaction import ScopedTransaction

logger = logging.getLogger(__name__)

OnPageCreated = Callable[[PageId], Awaitable[None]]


class SiteController:
    """Request handlers for the comic catalog."""

    def __init__(
        self,
        store: ContentStore,
        transformer: TextTransformer,
        strings: StringTable = get_ui_strings,
        *,
        comic_list_page_size: int = 25,
        newest_list_size: int = 5,
        guest_poster: str = "guest",
    ):
        self.store = store
        self.transformer = transformer
        self.strings = strings
        self.comic_list_page_size = comic_list_page_size
        self.newest_list_size = newest_list_size
        self.guest_poster = guest_poster

    # ─── helpers ─────────────────────────────────────────────────

    def _respond(self, session: SessionInfo) -> ResponseBuilder:
        return ResponseBuilder(session, self.strings)

    def i18n(self, text: str, locale: Locale | None) -> str:
        return self.transformer.convert_script(text, locale)

    def _render(self, source: str, locale: Locale | None) -> Ok[str] | WorkflowFailure:
        """Render markup, capturing a renderer crash as a failure value."""
        try:
            return self.transformer.render_markup(source, locale)
        except Exception as e:
            return classify_failure(e)

    def _render_for_display(
        self, source: str, locale: Locale | None,
    ) -> Ok[str] | WorkflowFailure:
        rendered = self._render(source, locale)
        if not isinstance(rendered, Ok):
            return rendered
        return Ok(self.i18n(rendered.value, locale))

    def _read_failure(
        self, respond: ResponseBuilder, failure: WorkflowFailure, where: str,
    ) -> SiteResponse:
        if isinstance(failure, ContentFormatFailure):
            logger.warning(f"Stored markup failed to render in {where}: {failure.detail}")
            return respond.error(failure.detail)
        logger.error(f"Failure in {where}: {failure}")
        return respond.error(GENERIC_STORE_ERROR)

    # ─── simple views ────────────────────────────────────────────

    async def main(self, session: SessionInfo) -> SiteResponse:
        respond = self._respond(session)
        return respond.ok("main")

    async def add_comic(self, session: SessionInfo) -> SiteResponse:
        respond = self._respond(session)
        return respond.ok("addcomic")

    async def error(self, session: SessionInfo, message: str) -> SiteResponse:
        respond = self._respond(session)
        return respond.ok("error", respond.view_data(message=message))

    # ─── page read paths ─────────────────────────────────────────

    async def view_page(
        self, session: SessionInfo, comic_id: ComicId, page_index: int,
    ) -> SiteResponse:
        respond = self._respond(session)
        locale = session.locale

        loaded = await attempt(self.store.get_comic(comic_id))
        if not isinstance(loaded, Ok):
            return self._read_failure(respond, loaded, "view_page")
        comic = loaded.value
        if comic is None or not 0 < page_index <= comic.page_count:
            return respond.not_found()

        loaded = await attempt(self.store.get_page(comic_id, page_index))
        if not isinstance(loaded, Ok):
            return self._read_failure(respond, loaded, "view_page")
        page = loaded.value
        if page is None:
            return respond.not_found()

        description = self._render_for_display(page.description, locale)
        if not isinstance(description, Ok):
            return self._read_failure(respond, description, "view_page")

        title = self.i18n(page.title, locale)
        data = respond.view_data(
            comic_id=comic_id,
            page_index=page_index,
            page_title=f"《{self.i18n(comic.title, locale)}》{title} / {page_index}",
            title=title,
            description=description.value,
            content=self.i18n(page.content, locale),
        )
        if page_index > 1:
            data["previous_page_index"] = {"index": page_index - 1}
        if page_index < comic.page_count:
            data["next_page_index"] = {"index": page_index + 1}
        quick_jump: list[ViewData] = [
            {"index": i} for i in range(1, comic.page_count + 1)
        ]
        quick_jump[page_index - 1]["selected"] = "selected"
        data["quick_jump"] = quick_jump
        return respond.ok("viewpage", data)

    async def view_last_page(
        self, session: SessionInfo, comic_id: ComicId,
    ) -> SiteResponse:
        respond = self._respond(session)
        loaded = await attempt(self.store.get_comic(comic_id))
        if not isinstance(loaded, Ok):
            return self._read_failure(respond, loaded, "view_last_page")
        comic = loaded.value
        if comic is None:
            return respond.not_found()
        if comic.page_count < 1:
            return respond.redirect(comic_location(comic_id))
        return respond.redirect(page_location(comic_id, comic.page_count))

    async def edit_page(
        self, session: SessionInfo, comic_id: ComicId, page_index: int,
    ) -> SiteResponse:
        respond = self._respond(session)
        loaded = await attempt(self.store.get_page(comic_id, page_index))
        if not isinstance(loaded, Ok):
            return self._read_failure(respond, loaded, "edit_page")
        page = loaded.value
        if page is None:
            return respond.not_found()
        return respond.ok("editpage", respond.view_data(
            comic_id=comic_id,
            page_index=page_index,
            title=encode_html(page.title),
            description=encode_html(page.description),
            content=page.content,
        ))

    async def add_page(self, session: SessionInfo, comic_id: ComicId) -> SiteResponse:
        respond = self._respond(session)
        loaded = await attempt(self.store.get_comic(comic_id))
        if not isinstance(loaded, Ok):
            return self._read_failure(respond, loaded, "add_page")
        if loaded.value is None:
            return respond.not_found()
        return respond.ok("addpage", respond.view_data(comic_id=comic_id))

    # ─── page mutations ──────────────────────────────────────────

    async def post_add_page(
        self,
        session: SessionInfo,
        comic_id: ComicId,
        title: str,
        description: str,
        image_url: str,
        on_success: OnPageCreated,
    ) -> SiteResponse:
        """Append a page to a comic and run on_success inside the same transaction."""
        respond = self._respond(session)
        try:
            async with ScopedTransaction(self.store, "add_page") as tx:
                return await self._add_page_in(
                    tx, respond, comic_id, title, description, image_url, on_success,
                )
        except Exception as e:
            logger.error(
                f"Unexpected failure creating page for comic {comic_id}: {e}",
                exc_info=True, extra={"comic_id": comic_id},
            )
            return respond.error(GENERIC_STORE_ERROR)

    async def _add_page_in(
        self,
        tx: ScopedTransaction,
        respond: ResponseBuilder,
        comic_id: ComicId,
        title: str,
        description: str,
        image_url: str,
        on_success: OnPageCreated,
    ) -> SiteResponse:
        def form_error(detail: str) -> SiteResponse:
            return respond.form_error(
                "addpage", detail,
                escaped={"title": title, "description": description},
                comic_id=comic_id,
            )

        loaded = await attempt(self.store.get_comic(comic_id))
        if not isinstance(loaded, Ok):
            await tx.rollback(f"comic lookup failed: {loaded}")
            return respond.error(GENERIC_STORE_ERROR)
        comic = loaded.value
        if comic is None:
            # nothing written yet; the scope releases the transaction
            return respond.not_found()

        rendered = self._render(description, respond.session.locale)
        if isinstance(rendered, ContentFormatFailure):
            await tx.rollback("invalid description markup")
            return form_error(rendered.detail)
        if not isinstance(rendered, Ok):
            await tx.rollback(f"markup renderer failed: {rendered}")
            return respond.error(GENERIC_STORE_ERROR)

        page_index = comic.page_count + 1
        added = await attempt(self.store.add_page(
            comic_id, page_index, title, self.guest_poster, description,
            default_page_content(image_url),
        ))
        if not isinstance(added, Ok):
            await tx.rollback(f"add_page failed: {added}")
            return respond.error(GENERIC_STORE_ERROR)
        page_id = added.value

        updated = await attempt(self.store.update_comic(
            comic_id, comic.title, comic.author, page_index, comic.description,
        ))
        if not isinstance(updated, Ok) or not updated.value:
            await tx.rollback("page count update refused")
            return respond.error(GENERIC_STORE_ERROR)

        side_effect = await attempt(on_success(page_id))
        if not isinstance(side_effect, Ok):
            await tx.rollback(f"on_success failed: {side_effect}")
            if isinstance(side_effect, RuntimeFailure):
                return respond.error(side_effect.message)
            if isinstance(side_effect, ContentFormatFailure):
                return form_error(side_effect.detail)
            logger.error(
                f"Unclassified on_success failure for comic {comic_id}",
                exc_info=side_effect.cause, extra={"comic_id": comic_id},
            )
            return respond.error(GENERIC_STORE_ERROR)

        committed = await tx.commit()
        if not isinstance(committed, Ok):
            return respond.error(GENERIC_STORE_ERROR)
        logger.info(
            f"Created page {page_index} of comic {comic_id}",
            extra={"comic_id": comic_id, "page_index": page_index},
        )
        return respond.redirect(page_edit_location(comic_id, page_index))

    async def post_update_page(
        self,
        session: SessionInfo,
        comic_id: ComicId,
        page_index: int,
        title: str,
        description: str,
        content: str,
    ) -> SiteResponse:
        respond = self._respond(session)
        document = canonicalize(content)
        if document is None:
            return respond.error("Invalid JSON")

        rendered = self._render(description, session.locale)
        if isinstance(rendered, ContentFormatFailure):
            return respond.form_error(
                "editpage", rendered.detail,
                escaped={"title": title, "description": description},
                comic_id=comic_id, page_index=page_index, content=content,
            )
        if not isinstance(rendered, Ok):
            logger.error(f"Markup renderer failed: {rendered}")
            return respond.error("Unknown BBCode error")

        updated = await attempt(self.store.update_page(
            comic_id, page_index, title, description, document,
        ))
        if isinstance(updated, Ok) and updated.value:
            return respond.redirect(page_location(comic_id, page_index))
        logger.error(
            f"update_page refused for comic {comic_id} page {page_index}: {updated}",
            extra={"comic_id": comic_id, "page_index": page_index},
        )
        return respond.error("update failed")

    # ─── comic read paths ────────────────────────────────────────

    async def view_comic_list(self, session: SessionInfo, page: int) -> SiteResponse:
        respond = self._respond(session)
        locale = session.locale
        limit = self.comic_list_page_size
        offset = (0 if page <= 1 else page - 1) * limit

        loaded = await attempt(self.store.get_comic_list(offset, limit))
        if not isinstance(loaded, Ok):
            return self._read_failure(respond, loaded, "view_comic_list")

        data = respond.view_data(page_title="")
        entries: list[ViewData] = []
        for comic in loaded.value:
            description = self._render_for_display(comic.description, locale)
            if not isinstance(description, Ok):
                return self._read_failure(respond, description, "view_comic_list")
            entries.append({
                "id": comic.id,
                "title": self.i18n(comic.title, locale),
                "poster": comic.poster,
                "description": description.value,
                "page_count": comic.page_count,
            })
        if entries:
            data["comic_list"] = entries
        return respond.ok("viewcomiclist", data)

    async def view_comic(self, session: SessionInfo, comic_id: ComicId) -> SiteResponse:
        respond = self._respond(session)
        locale = session.locale

        loaded = await attempt(self.store.get_comic(comic_id))
        if not isinstance(loaded, Ok):
            return self._read_failure(respond, loaded, "view_comic")
        comic = loaded.value
        if comic is None:
            return respond.not_found()

        description = self._render_for_display(comic.description, locale)
        if not isinstance(description, Ok):
            return self._read_failure(respond, description, "view_comic")

        title = self.i18n(comic.title, locale)
        data = respond.view_data(
            page_title=f"《{title}》",
            comic_id=comic.id,
            title=title,
            author=comic.author,
            poster=comic.poster,
            description=description.value,
            page_count=comic.page_count,
        )

        pages = await attempt(self.store.get_page_list_of_comic(comic_id))
        if not isinstance(pages, Ok):
            return self._read_failure(respond, pages, "view_comic")
        page_list: list[ViewData] = [
            {"index": p.index, "title": self.i18n(p.title, locale)}
            for p in pages.value
        ]
        if page_list:
            data["page_list"] = page_list
            data["newest_list"] = list(reversed(page_list[-self.newest_list_size:]))
        return respond.ok("viewcomic", data)

    async def edit_comic(self, session: SessionInfo, comic_id: ComicId) -> SiteResponse:
        respond = self._respond(session)
        loaded = await attempt(self.store.get_comic(comic_id))
        if not isinstance(loaded, Ok):
            return self._read_failure(respond, loaded, "edit_comic")
        comic = loaded.value
        if comic is None:
            return respond.not_found()
        return respond.ok("editcomic", respond.view_data(
            comic_id=comic.id,
            title=encode_html(comic.title),
            author=encode_html(comic.author),
            poster=comic.poster,
            description=encode_html(comic.description),
        ))

    # ─── comic mutations ─────────────────────────────────────────

    async def post_add_comic(
        self, session: SessionInfo, title: str, author: str, description: str,
    ) -> SiteResponse:
        respond = self._respond(session)

        def form_error(detail: str) -> SiteResponse:
            return respond.form_error(
                "addcomic", detail,
                escaped={"title": title, "author": author, "description": description},
            )

        rendered = self._render(description, session.locale)
        if isinstance(rendered, ContentFormatFailure):
            return form_error(rendered.detail)
        if not isinstance(rendered, Ok):
            logger.error(f"Markup renderer failed in post_add_comic: {rendered}")
            return respond.error(GENERIC_STORE_ERROR)

        added = await attempt(self.store.add_comic(
            title, author, self.guest_poster, description,
        ))
        if isinstance(added, Ok):
            return respond.redirect(comic_location(added.value))
        if isinstance(added, (RuntimeFailure, ContentFormatFailure)):
            logger.warning(f"add_comic rejected: {added}")
            return form_error(
                added.message if isinstance(added, RuntimeFailure) else added.detail,
            )
        logger.error("Unclassified add_comic failure", exc_info=added.cause)
        return respond.error(GENERIC_STORE_ERROR)

    async def post_update_comic(
        self,
        session: SessionInfo,
        comic_id: ComicId,
        title: str,
        author: str,
        description: str,
    ) -> SiteResponse:
        respond = self._respond(session)

        def form_error(detail: str) -> SiteResponse:
            return respond.form_error(
                "editcomic", detail,
                escaped={"title": title, "author": author, "description": description},
                comic_id=comic_id,
            )

        loaded = await attempt(self.store.get_comic(comic_id))
        if isinstance(loaded, RuntimeFailure):
            return form_error(loaded.message)
        if not isinstance(loaded, Ok):
            return self._read_failure(respond, loaded, "post_update_comic")
        comic = loaded.value
        if comic is None:
            return respond.not_found()

        rendered = self._render(description, session.locale)
        if isinstance(rendered, ContentFormatFailure):
            return form_error(rendered.detail)
        if not isinstance(rendered, Ok):
            logger.error(f"Markup renderer failed in post_update_comic: {rendered}")
            return respond.error(GENERIC_STORE_ERROR)

        updated = await attempt(self.store.update_comic(
            comic_id, title, author, comic.page_count, description,
        ))
        if not isinstance(updated, Ok) or not updated.value:
            logger.error(
                f"update_comic refused for comic {comic_id}: {updated}",
                extra={"comic_id": comic_id},
            )
            return respond.error(GENERIC_STORE_ERROR)
        return respond.redirect(comic_location(comic_id))

    # ─── tools ───────────────────────────────────────────────────

    async def add_file(
        self, page_id: PageId, filename: str, localname: str, mimetype: str,
        size: int,
    ) -> FileId:
        """Record an uploaded file against a page. Raises StoreError on failure."""
        return await self.store.add_file(page_id, filename, localname, mimetype, size)
