"""SQL Content Store — ContentStore implementation over one AsyncSession.

Invariants:
    - Returns transient domain records (core/domain_types.py), never ORM objects
    - Outside an explicit transaction every mutation commits immediately;
      inside one it is only flushed (provisional until commit/rollback)
    - transaction_start() is non-nested: a second start raises TransactionStateError
    - update_comic/update_page return False instead of raising; update_comic
      refuses to lower the stored page_count
    - Every other SQLAlchemy failure surfaces as StoreError

Design Decisions:
    - populate_existing on reads: values updated through bulk UPDATE statements
      are re-read instead of served from the identity map
    - Implicit read transactions are committed before an explicit one begins
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from comic_site.core.domain_types import (
    Comic, ComicId, FileId, Page, PageId, PageSummary,
)
from comic_site.core.errors import TransactionStateError
from comic_site.infrastructure.database import map_sqlalchemy_error
from comic_site.models.attached_file import AttachedFile as FileModel
from comic_site.models.comic import Comic as ComicModel
from comic_site.models.page import Page as PageModel

logger = logging.getLogger(__name__)


def _to_comic(row: ComicModel) -> Comic:
    return Comic(
        id=ComicId(row.id),
        title=row.title,
        author=row.author,
        poster=row.poster,
        description=row.description,
        page_count=row.page_count,
    )


def _to_page(row: PageModel) -> Page:
    return Page(
        id=PageId(row.id),
        comic_id=ComicId(row.comic_id),
        index=row.page_index,
        title=row.title,
        poster=row.poster,
        description=row.description,
        content=row.content,
    )


class SqlContentStore:
    """Comics, pages and attached files persisted through SQLAlchemy."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._explicit = False

    @property
    def in_transaction(self) -> bool:
        return self._explicit

    # ─── internals ───────────────────────────────────────────────

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncGenerator[None, None]:
        """Map SQLAlchemy failures to StoreError; roll back implicit work."""
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Store {operation} failed: {e}")
            if not self._explicit:
                await self.db.rollback()
            raise map_sqlalchemy_error(e, operation) from e

    async def _finish(self) -> None:
        if self._explicit:
            await self.db.flush()
        else:
            await self.db.commit()

    # ─── reads ───────────────────────────────────────────────────

    async def get_comic(self, comic_id: ComicId) -> Comic | None:
        async with self._guard("get_comic"):
            result = await self.db.execute(
                select(ComicModel)
                .where(ComicModel.id == comic_id)
                .execution_options(populate_existing=True),
            )
            row = result.scalar_one_or_none()
        return _to_comic(row) if row else None

    async def get_page(self, comic_id: ComicId, page_index: int) -> Page | None:
        async with self._guard("get_page"):
            result = await self.db.execute(
                select(PageModel)
                .where(PageModel.comic_id == comic_id)
                .where(PageModel.page_index == page_index)
                .execution_options(populate_existing=True),
            )
            row = result.scalar_one_or_none()
        return _to_page(row) if row else None

    async def get_comic_list(self, offset: int, limit: int) -> list[Comic]:
        async with self._guard("get_comic_list"):
            result = await self.db.execute(
                select(ComicModel)
                .order_by(ComicModel.id)
                .offset(offset)
                .limit(limit)
                .execution_options(populate_existing=True),
            )
            rows = result.scalars().all()
        return [_to_comic(row) for row in rows]

    async def get_page_list_of_comic(self, comic_id: ComicId) -> list[PageSummary]:
        async with self._guard("get_page_list_of_comic"):
            result = await self.db.execute(
                select(PageModel.page_index, PageModel.title)
                .where(PageModel.comic_id == comic_id)
                .order_by(PageModel.page_index),
            )
            rows = result.all()
        return [PageSummary(index=index, title=title) for index, title in rows]

    # ─── writes ──────────────────────────────────────────────────

    async def add_comic(
        self, title: str, author: str, poster: str, description: str,
    ) -> ComicId:
        async with self._guard("add_comic"):
            row = ComicModel(
                title=title, author=author, poster=poster,
                description=description, page_count=0,
            )
            self.db.add(row)
            await self.db.flush()
            comic_id = ComicId(row.id)
            await self._finish()
        return comic_id

    async def add_page(
        self, comic_id: ComicId, page_index: int, title: str, poster: str,
        description: str, content: str,
    ) -> PageId:
        async with self._guard("add_page"):
            row = PageModel(
                comic_id=comic_id, page_index=page_index, title=title,
                poster=poster, description=description, content=content,
            )
            self.db.add(row)
            await self.db.flush()
            page_id = PageId(row.id)
            await self._finish()
        return page_id

    async def add_file(
        self, page_id: PageId, filename: str, localname: str, mimetype: str,
        size: int,
    ) -> FileId:
        async with self._guard("add_file"):
            row = FileModel(
                page_id=page_id, filename=filename, localname=localname,
                mimetype=mimetype, size=size,
            )
            self.db.add(row)
            await self.db.flush()
            file_id = FileId(row.id)
            await self._finish()
        return file_id

    async def update_comic(
        self, comic_id: ComicId, title: str, author: str, page_count: int,
        description: str,
    ) -> bool:
        try:
            async with self._guard("update_comic"):
                result = await self.db.execute(
                    update(ComicModel)
                    .where(ComicModel.id == comic_id)
                    .where(ComicModel.page_count <= page_count)
                    .values(
                        title=title, author=author, page_count=page_count,
                        description=description,
                    )
                    .execution_options(synchronize_session=False),
                )
                if result.rowcount != 1:
                    logger.warning(
                        f"update_comic matched {result.rowcount} rows",
                        extra={"comic_id": comic_id},
                    )
                    if not self._explicit:
                        await self.db.rollback()
                    return False
                await self._finish()
        except Exception as e:
            logger.error(f"update_comic failed: {e}", extra={"comic_id": comic_id})
            return False
        return True

    async def update_page(
        self, comic_id: ComicId, page_index: int, title: str, description: str,
        content: str,
    ) -> bool:
        try:
            async with self._guard("update_page"):
                result = await self.db.execute(
                    update(PageModel)
                    .where(PageModel.comic_id == comic_id)
                    .where(PageModel.page_index == page_index)
                    .values(title=title, description=description, content=content)
                    .execution_options(synchronize_session=False),
                )
                if result.rowcount != 1:
                    if not self._explicit:
                        await self.db.rollback()
                    return False
                await self._finish()
        except Exception as e:
            logger.error(
                f"update_page failed: {e}",
                extra={"comic_id": comic_id, "page_index": page_index},
            )
            return False
        return True

    # ─── transaction control ─────────────────────────────────────

    async def transaction_start(self) -> None:
        if self._explicit:
            raise TransactionStateError("transaction already started")
        async with self._guard("transaction_start"):
            if self.db.in_transaction():
                await self.db.commit()
            await self.db.begin()
        self._explicit = True

    async def transaction_commit(self) -> None:
        if not self._explicit:
            raise TransactionStateError("commit without transaction")
        self._explicit = False
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Store commit failed: {e}")
            await self.db.rollback()
            raise map_sqlalchemy_error(e, "transaction_commit") from e

    async def transaction_rollback(self) -> None:
        self._explicit = False
        async with self._guard("transaction_rollback"):
            await self.db.rollback()
