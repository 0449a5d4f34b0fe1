"""Comic create/update workflow tests.

Tests cover:
    - post_add_comic: redirect to the new comic, guest poster, markup rejection
    - post_update_comic: keeps page_count, NotFound for unknown comics,
      markup rejection with escaped re-display
    - Store refusals surface as terminal errors or form errors by failure kind
"""

from comic_site.core.errors import StoreError
from comic_site.core.responses import Error, NotFound, OK, Redirect
from comic_site.infrastructure.content_store import SqlContentStore
from comic_site.services.site_controller import SiteController


# -- post_add_comic ------------------------------------------------------------

async def test_add_comic_redirects_to_new_comic(
    controller, session_info, read_committed,
):
    res = await controller.post_add_comic(session_info, "My Comic", "Bob", "[i]hi[/i]")

    assert isinstance(res.status, Redirect)
    comics = await read_committed("get_comic_list", 0, 10)
    assert len(comics) == 1
    assert res.status.location == f"/comic/{comics[0].id}"
    assert comics[0].poster == "guest"
    assert comics[0].page_count == 0


async def test_add_comic_invalid_markup_redisplays_form(
    controller, session_info, read_committed,
):
    """Nothing is written and every field comes back HTML-escaped."""
    res = await controller.post_add_comic(session_info, "<T>", "O'Neil", "[broken]")

    assert isinstance(res.status, OK)
    assert res.status.view == "addcomic"
    data = res.status.data
    assert data["error"] == "Unclosed tag [broken]"
    assert data["title"] == "&lt;T&gt;"
    assert data["author"] == "O&#39;Neil"
    assert data["description"] == "[broken]"
    assert await read_committed("get_comic_list", 0, 10) == []


async def test_add_comic_store_failure_redisplays_form(
    test_db, fake_transformer, session_info,
):
    """A classified store failure is shown on the form, not as a dead end."""
    class FailingStore(SqlContentStore):
        async def add_comic(self, *args, **kwargs):
            raise StoreError("locked", "insert")

    controller = SiteController(FailingStore(test_db), fake_transformer)

    res = await controller.post_add_comic(session_info, "t", "a", "d")

    assert isinstance(res.status, OK)
    assert res.status.view == "addcomic"
    assert res.status.data["error"] == "Database insert failed: locked"


async def test_add_comic_unexpected_failure_is_generic_error(
    test_db, fake_transformer, session_info,
):
    class BrokenStore(SqlContentStore):
        async def add_comic(self, *args, **kwargs):
            raise KeyError("boom")

    controller = SiteController(BrokenStore(test_db), fake_transformer)

    res = await controller.post_add_comic(session_info, "t", "a", "d")

    assert res.status == Error("DB failed")


async def test_add_comic_uses_configured_guest_poster(
    store, fake_transformer, session_info, read_committed,
):
    controller = SiteController(store, fake_transformer, guest_poster="anon")

    await controller.post_add_comic(session_info, "t", "a", "d")

    comics = await read_committed("get_comic_list", 0, 10)
    assert comics[0].poster == "anon"


# -- post_update_comic ---------------------------------------------------------

async def test_update_comic_keeps_page_count(
    controller, store, seed_comic, session_info, read_committed,
):
    await store.add_page(seed_comic.id, 1, "p", "guest", "", "{}")
    await store.update_comic(
        seed_comic.id, seed_comic.title, seed_comic.author, 1, seed_comic.description,
    )

    res = await controller.post_update_comic(
        session_info, seed_comic.id, "Renamed", "Carol", "new",
    )

    assert res.status == Redirect(f"/comic/{seed_comic.id}")
    comic = await read_committed("get_comic", seed_comic.id)
    assert (comic.title, comic.author, comic.description) == ("Renamed", "Carol", "new")
    assert comic.page_count == 1


async def test_update_unknown_comic_is_not_found(controller, session_info):
    res = await controller.post_update_comic(session_info, 404, "t", "a", "d")

    assert res.status == NotFound()


async def test_update_comic_invalid_markup_redisplays_form(
    controller, seed_comic, session_info, read_committed,
):
    res = await controller.post_update_comic(
        session_info, seed_comic.id, "漢", "a", "[broken]",
    )

    assert isinstance(res.status, OK)
    assert res.status.view == "editcomic"
    data = res.status.data
    assert data["title"] == "&#28450;"
    assert data["comic_id"] == seed_comic.id
    assert data["error"] == "Unclosed tag [broken]"
    comic = await read_committed("get_comic", seed_comic.id)
    assert comic.description == seed_comic.description


async def test_update_comic_lookup_failure_redisplays_form(
    test_db, fake_transformer, session_info,
):
    class FailingStore(SqlContentStore):
        async def get_comic(self, comic_id):
            raise StoreError("timeout", "query")

    controller = SiteController(FailingStore(test_db), fake_transformer)

    res = await controller.post_update_comic(session_info, 1, "t", "a", "d")

    assert isinstance(res.status, OK)
    assert res.status.view == "editcomic"
    assert res.status.data["error"] == "Database query failed: timeout"


async def test_update_comic_refused_is_generic_error(
    test_db, fake_transformer, seed_comic, session_info,
):
    class RefusingStore(SqlContentStore):
        async def update_comic(self, *args, **kwargs):
            return False

    controller = SiteController(RefusingStore(test_db), fake_transformer)

    res = await controller.post_update_comic(session_info, seed_comic.id, "t", "a", "d")

    assert res.status == Error("DB failed")


# -- renderer crashes ----------------------------------------------------------

async def test_add_comic_renderer_crash_is_generic_error(
    controller, session_info, crashing_renderer, read_committed,
):
    res = await controller.post_add_comic(session_info, "t", "a", "d")

    assert res.status == Error("DB failed")
    assert await read_committed("get_comic_list", 0, 10) == []


async def test_update_comic_renderer_crash_is_generic_error(
    controller, seed_comic, session_info, crashing_renderer, read_committed,
):
    res = await controller.post_update_comic(
        session_info, seed_comic.id, "Renamed", "Carol", "new",
    )

    assert res.status == Error("DB failed")
    comic = await read_committed("get_comic", seed_comic.id)
    assert comic.title == seed_comic.title
