"""ORM Models — SQLAlchemy declarative models for comics, pages and files.

Invariants:
    - All models inherit from Base (db/base.py)
    - Comic is the aggregate root; pages and files hang off it

Design Decisions:
    - One file per entity
    - All models imported here so string-based relationship() references
      resolve before any query runs
"""

from comic_site.models.comic import Comic  # noqa: F401
from comic_site.models.page import Page  # noqa: F401
from comic_site.models.attached_file import AttachedFile  # noqa: F401
