"""Infrastructure — database sessions, the SQL content store, text transforms, logging.

Invariants:
    - Implements the protocols declared in core/repository_protocols.py
    - All SQLAlchemy exceptions surface as StoreError
"""
