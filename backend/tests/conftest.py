"""Root conftest — shared test configuration and fakes."""

import os

# Keep tests away from any real database or upload directory
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("UPLOAD_DIR", "test-uploads")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402

import comic_site.models  # noqa: E402,F401
from comic_site.core.domain_types import Locale, SessionInfo  # noqa: E402
from comic_site.core.outcomes import ContentFormatFailure, Ok  # noqa: E402
from comic_site.db.base import Base  # noqa: E402
from comic_site.db.session import create_engine, create_session_factory  # noqa: E402
from comic_site.infrastructure.content_store import SqlContentStore  # noqa: E402


class FakeTransformer:
    """TextTransformer double with a tiny conversion table.

    Markup containing "[broken]" fails to render; everything else renders to
    "<p>{source}</p>". Calls are recorded so tests can assert that rejected
    input is never rendered twice.
    """

    _TO_SIMPLIFIED = {"漢": "汉", "畫": "画", "頁": "页"}

    def __init__(self):
        self.rendered: list[str] = []

    def convert_script(self, text, locale):
        if locale is None:
            return text
        if locale is Locale.ZH_CN:
            table = self._TO_SIMPLIFIED
        else:
            table = {v: k for k, v in self._TO_SIMPLIFIED.items()}
        return "".join(table.get(ch, ch) for ch in text)

    def render_markup(self, source, locale):
        self.rendered.append(source)
        if "[broken]" in source:
            return ContentFormatFailure("Unclosed tag [broken]")
        return Ok(f"<p>{source}</p>")


@pytest.fixture
def fake_transformer():
    return FakeTransformer()


@pytest.fixture
def session_info():
    return SessionInfo(remote_address="127.0.0.1", locale=None)


@pytest.fixture
def cn_session():
    return SessionInfo(remote_address="127.0.0.1", locale=Locale.ZH_CN)


# -- database fixtures ---------------------------------------------------------

@pytest.fixture
async def test_engine(tmp_path):
    """Fresh SQLite file database with the full schema."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'comic_site.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(engine=test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def store(test_db):
    return SqlContentStore(test_db)


@pytest.fixture
def read_committed(test_session_factory):
    """Call a store read on a fresh session; sees only committed data."""
    async def read(method: str, *args):
        async with test_session_factory() as session:
            return await getattr(SqlContentStore(session), method)(*args)
    return read
