"""Page ORM — one row per comic page.

Invariants:
    - (comic_id, page_index) is unique; page_index is 1-based and dense
    - content holds the canonical JSON canvas document as text
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from comic_site.db.base import Base


class Page(Base):
    __tablename__ = "pages"
    __table_args__ = (
        UniqueConstraint("comic_id", "page_index", name="uq_pages_comic_index"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    comic_id: Mapped[int] = mapped_column(
        ForeignKey("comics.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    page_index: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    poster: Mapped[str] = mapped_column(String(100), nullable=False, default="guest")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    comic: Mapped["Comic"] = relationship("Comic", back_populates="pages")
    files: Mapped[list["AttachedFile"]] = relationship(
        "AttachedFile", back_populates="page", cascade="all, delete-orphan",
    )
