"""Request Dependencies — SessionInfo extraction and per-request controller wiring.

Invariants:
    - SessionInfo is built once per request and never mutated
    - Locale: `locale` query parameter first, then the `locale` cookie; unknown
      values mean no locale
    - Each request gets its own SqlContentStore over its own AsyncSession
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from comic_site.config import Settings, get_settings
from comic_site.core.domain_types import SessionInfo, parse_locale
from comic_site.core.ui_strings import get_ui_strings
from comic_site.infrastructure.content_store import SqlContentStore
from comic_site.infrastructure.database import get_db
from comic_site.infrastructure.text_transform import ChineseBBCodeTransformer
from comic_site.services.site_controller import SiteController

LOCALE_PARAM = "locale"

_transformer = ChineseBBCodeTransformer()


def get_transformer() -> ChineseBBCodeTransformer:
    return _transformer


def get_session_info(request: Request) -> SessionInfo:
    raw = request.query_params.get(LOCALE_PARAM) or request.cookies.get(LOCALE_PARAM)
    remote = request.client.host if request.client else ""
    return SessionInfo(remote_address=remote, locale=parse_locale(raw))


def get_controller(
    db: AsyncSession = Depends(get_db),
    transformer: ChineseBBCodeTransformer = Depends(get_transformer),
    settings: Settings = Depends(get_settings),
) -> SiteController:
    return SiteController(
        SqlContentStore(db),
        transformer,
        get_ui_strings,
        comic_list_page_size=settings.comic_list_page_size,
        newest_list_size=settings.newest_list_size,
        guest_poster=settings.guest_poster,
    )
