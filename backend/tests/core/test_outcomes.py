"""Workflow outcome tests — exception classification and attempt()."""

from comic_site.core.errors import MarkupError, StoreError, TransactionStateError
from comic_site.core.outcomes import (
    ContentFormatFailure, Ok, RuntimeFailure, UnclassifiedFailure,
    attempt, classify_failure,
)


def test_markup_error_is_content_format():
    assert classify_failure(MarkupError("Unclosed tag [b]")) == (
        ContentFormatFailure("Unclosed tag [b]")
    )


def test_site_errors_are_runtime():
    assert classify_failure(StoreError("busy", "insert")) == (
        RuntimeFailure("Database insert failed: busy")
    )
    assert classify_failure(TransactionStateError("commit without transaction")) == (
        RuntimeFailure("Database transaction failed: commit without transaction")
    )


def test_other_exceptions_are_unclassified():
    exc = OSError("disk")
    result = classify_failure(exc)
    assert isinstance(result, UnclassifiedFailure)
    assert result.cause is exc


async def test_attempt_wraps_value():
    async def ok():
        return 42

    assert await attempt(ok()) == Ok(42)


async def test_attempt_captures_exception():
    async def fail():
        raise MarkupError("bad")

    result = await attempt(fail())
    assert result == ContentFormatFailure("bad")
