"""Workflow Outcomes — explicit success-or-failure results for store/transform calls.

Invariants:
    - Every call the workflow engine makes into a collaborator yields Ok or a WorkflowFailure
    - RuntimeFailure: operational/store failure, never user-correctable
    - ContentFormatFailure: user input was invalid markup; carries a displayable detail
    - UnclassifiedFailure: anything else; handled as a terminal store error
    - Failures are never persisted

Design Decisions:
    - Frozen dataclasses + isinstance branches instead of exception unwinding in the
      engine: rollback decisions read as explicit branches on the failure tag
    - classify_failure() is the single place where exceptions become results
"""

from dataclasses import dataclass
from typing import Awaitable, Generic, TypeVar

from comic_site.core.errors import ComicSiteError, MarkupError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class RuntimeFailure:
    message: str


@dataclass(frozen=True)
class ContentFormatFailure:
    detail: str


@dataclass(frozen=True)
class UnclassifiedFailure:
    cause: BaseException | None = None


WorkflowFailure = RuntimeFailure | ContentFormatFailure | UnclassifiedFailure


def classify_failure(exc: Exception) -> WorkflowFailure:
    """Map an adapter/callback exception onto the failure taxonomy."""
    if isinstance(exc, MarkupError):
        return ContentFormatFailure(exc.detail)
    if isinstance(exc, ComicSiteError):
        return RuntimeFailure(exc.message)
    return UnclassifiedFailure(exc)


async def attempt(awaitable: Awaitable[T]) -> "Ok[T] | WorkflowFailure":
    """Await a collaborator call and capture its outcome as a result value."""
    try:
        return Ok(await awaitable)
    except Exception as e:
        return classify_failure(e)
