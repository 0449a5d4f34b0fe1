"""Domain Types — records and identifiers shared by the workflow and its adapters.

Invariants:
    - Locale is a closed enum; an absent locale (None) means "no script conversion"
    - SessionInfo is immutable for the duration of a request
    - Comic.page_count is the highest committed page index; Page.index is 1-based
    - Records are transient copies; the store owns the persisted rows

Design Decisions:
    - Frozen dataclasses over ORM objects: the workflow never sees SQLAlchemy
      state, so a rollback cannot leave stale attributes behind
    - str Enum for Locale: the value doubles as cookie/query parameter
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ComicId = NewType("ComicId", int)
PageId = NewType("PageId", int)
FileId = NewType("FileId", int)


# ─── Enums ───────────────────────────────────────────────────────

class Locale(str, Enum):
    """Script variants served by the site."""
    ZH_CN = "zh_CN"   # Simplified
    ZH_TW = "zh_TW"   # Traditional


def parse_locale(value: str | None) -> Locale | None:
    """Map a raw cookie/query value to a Locale; unknown values mean no locale."""
    if not value:
        return None
    normalized = value.strip().replace("-", "_")
    for locale in Locale:
        if locale.value.lower() == normalized.lower():
            return locale
    return None


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class SessionInfo:
    """Request-scoped caller identity, produced by the request-parsing layer."""
    remote_address: str
    locale: Locale | None = None


@dataclass(frozen=True)
class Comic:
    id: ComicId
    title: str
    author: str
    poster: str
    description: str
    page_count: int


@dataclass(frozen=True)
class Page:
    id: PageId
    comic_id: ComicId
    index: int
    title: str
    poster: str
    description: str
    content: str


@dataclass(frozen=True)
class PageSummary:
    """Index/title pair used by page listings."""
    index: int
    title: str
