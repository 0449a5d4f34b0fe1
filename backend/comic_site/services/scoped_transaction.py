"""Scoped Transaction — guarantees every opened store transaction is terminated.

Invariants:
    - __aenter__ calls transaction_start(); the scope owns the transaction from then on
    - commit() is the only path that commits; a failed commit leaves the scope
      unresolved so __aexit__ rolls back
    - Any exit without a successful commit() or rollback() rolls back, including
      exceptions raised inside the block
    - Exceptions from the block are never suppressed

Design Decisions:
    - Async context manager over free-floating start/commit/rollback calls
    - commit()/rollback() return results instead of raising so the engine can
      branch on them like every other collaborator call
"""

import logging

from comic_site.core.outcomes import Ok, WorkflowFailure, attempt
from comic_site.core.repository_protocols import ContentStore

logger = logging.getLogger(__name__)


class ScopedTransaction:
    """One non-nested store transaction, released on scope exit."""

    def __init__(self, store: ContentStore, name: str = "workflow"):
        self._store = store
        self._name = name
        self._resolved = False

    @property
    def resolved(self) -> bool:
        return self._resolved

    async def __aenter__(self) -> "ScopedTransaction":
        await self._store.transaction_start()
        return self

    async def commit(self) -> Ok[None] | WorkflowFailure:
        result = await attempt(self._store.transaction_commit())
        if isinstance(result, Ok):
            self._resolved = True
        else:
            logger.error(f"Commit failed for {self._name} transaction: {result}")
        return result

    async def rollback(self, reason: str) -> Ok[None] | WorkflowFailure:
        logger.warning(f"Rolling back {self._name} transaction: {reason}")
        result = await attempt(self._store.transaction_rollback())
        if isinstance(result, Ok):
            self._resolved = True
        return result

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        if self._resolved:
            return False
        if exc_type is None:
            logger.debug(f"Releasing unresolved {self._name} transaction")
            result = await attempt(self._store.transaction_rollback())
            self._resolved = isinstance(result, Ok)
        else:
            result = await self.rollback(f"{exc_type.__name__}: {exc}")
        if not isinstance(result, Ok):
            logger.error(
                f"Rollback failed for {self._name} transaction: {result}",
            )
        return False
