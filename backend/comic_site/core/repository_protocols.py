"""Boundary Protocols — contracts between the workflow engine and its collaborators.

Invariants:
    - Core NEVER imports from the shell; dependency arrows point inward only
    - update_comic/update_page signal failure with False; every other store
      operation raises StoreError
    - Transactions are explicit and non-nested; mutations between
      transaction_start() and commit/rollback are provisional
    - render_markup never raises for bad markup; it returns ContentFormatFailure

Design Decisions:
    - Protocol over ABC: structural subtyping, implementations injected by the shell
    - Async store methods because implementations do IO; the text transformer is
      synchronous because it is a pure string function
"""

from typing import Protocol

from comic_site.core.domain_types import (
    Comic, ComicId, FileId, Locale, Page, PageId, PageSummary,
)
from comic_site.core.outcomes import ContentFormatFailure, Ok


class ContentStore(Protocol):
    """Persistence contract for comics, pages and attached files."""

    async def get_comic(self, comic_id: ComicId) -> Comic | None: ...
    async def get_page(self, comic_id: ComicId, page_index: int) -> Page | None: ...
    async def get_comic_list(self, offset: int, limit: int) -> list[Comic]: ...
    async def get_page_list_of_comic(self, comic_id: ComicId) -> list[PageSummary]: ...

    async def add_comic(
        self, title: str, author: str, poster: str, description: str,
    ) -> ComicId: ...
    async def add_page(
        self, comic_id: ComicId, page_index: int, title: str, poster: str,
        description: str, content: str,
    ) -> PageId: ...
    async def update_comic(
        self, comic_id: ComicId, title: str, author: str, page_count: int,
        description: str,
    ) -> bool: ...
    async def update_page(
        self, comic_id: ComicId, page_index: int, title: str, description: str,
        content: str,
    ) -> bool: ...
    async def add_file(
        self, page_id: PageId, filename: str, localname: str, mimetype: str,
        size: int,
    ) -> FileId: ...

    async def transaction_start(self) -> None: ...
    async def transaction_commit(self) -> None: ...
    async def transaction_rollback(self) -> None: ...


class TextTransformer(Protocol):
    """Script conversion + BBCode rendering, parameterized by locale."""

    def convert_script(self, text: str, locale: Locale | None) -> str: ...

    def render_markup(
        self, source: str, locale: Locale | None,
    ) -> Ok[str] | ContentFormatFailure: ...
