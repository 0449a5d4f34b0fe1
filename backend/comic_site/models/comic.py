"""Comic ORM — one row per comic, owner of its pages.

Invariants:
    - page_count equals the highest committed page index
    - poster is the placeholder identity of the creator ("guest" for now)
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from comic_site.db.base import Base


class Comic(Base):
    __tablename__ = "comics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    author: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    poster: Mapped[str] = mapped_column(String(100), nullable=False, default="guest")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    page_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    pages: Mapped[list["Page"]] = relationship(
        "Page", back_populates="comic",
        cascade="all, delete-orphan", order_by="Page.page_index",
    )
