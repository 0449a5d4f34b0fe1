"""Service test fixtures — controller over the real SQL store, seeded comic.

Invariants:
    - Every test gets a fresh SQLite file under tmp_path (root conftest)
    - The controller under test uses the real SqlContentStore and FakeTransformer
"""

import pytest

from comic_site.services.site_controller import SiteController


@pytest.fixture
def controller(store, fake_transformer):
    return SiteController(store, fake_transformer)


@pytest.fixture
async def seed_comic(store):
    """A comic with no pages."""
    comic_id = await store.add_comic("漢字 Comic", "Alice", "guest", "About [b]it[/b]")
    return await store.get_comic(comic_id)


@pytest.fixture
def crashing_renderer(fake_transformer):
    """The shared FakeTransformer with a render_markup that raises."""
    def explode(source, locale):
        raise RuntimeError("renderer bug")

    fake_transformer.render_markup = explode
    return fake_transformer
