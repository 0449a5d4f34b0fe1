"""SQL content store tests — commit modes, transaction control, update guards.

Tests cover:
    - Mutations outside a transaction are committed immediately
    - Mutations inside a transaction are invisible until commit, gone after rollback
    - transaction_start is non-nested; commit without start is refused
    - update_comic never lowers page_count; update_page/update_comic return False
      for missing rows
    - Duplicate page index surfaces as StoreError
"""

import pytest

from comic_site.core.errors import StoreError, TransactionStateError


async def test_add_comic_commits_immediately(store, read_committed):
    comic_id = await store.add_comic("t", "a", "guest", "d")

    comic = await read_committed("get_comic", comic_id)
    assert comic.title == "t"
    assert comic.page_count == 0


async def test_missing_rows_read_as_none(store):
    assert await store.get_comic(1) is None
    assert await store.get_page(1, 1) is None
    assert await store.get_page_list_of_comic(1) == []


async def test_comic_list_ordered_and_paged(store):
    ids = [await store.add_comic(f"c{n}", "a", "guest", "") for n in range(4)]

    page = await store.get_comic_list(1, 2)

    assert [c.id for c in page] == ids[1:3]


async def test_page_list_ordered_by_index(store):
    comic_id = await store.add_comic("t", "a", "guest", "")
    await store.add_page(comic_id, 2, "second", "guest", "", "{}")
    await store.add_page(comic_id, 1, "first", "guest", "", "{}")

    pages = await store.get_page_list_of_comic(comic_id)

    assert [(p.index, p.title) for p in pages] == [(1, "first"), (2, "second")]


async def test_duplicate_page_index_is_store_error(store):
    comic_id = await store.add_comic("t", "a", "guest", "")
    await store.add_page(comic_id, 1, "p", "guest", "", "{}")

    with pytest.raises(StoreError):
        await store.add_page(comic_id, 1, "again", "guest", "", "{}")

    assert [p.title for p in await store.get_page_list_of_comic(comic_id)] == ["p"]


# -- transactions --------------------------------------------------------------

async def test_transaction_commit_publishes_writes(store, read_committed):
    comic_id = await store.add_comic("t", "a", "guest", "")

    await store.transaction_start()
    assert store.in_transaction
    await store.add_page(comic_id, 1, "p", "guest", "", "{}")
    await store.update_comic(comic_id, "t", "a", 1, "")
    await store.transaction_commit()

    assert not store.in_transaction
    assert (await read_committed("get_comic", comic_id)).page_count == 1
    assert (await read_committed("get_page", comic_id, 1)).title == "p"


async def test_transaction_rollback_discards_writes(store, read_committed):
    comic_id = await store.add_comic("t", "a", "guest", "")

    await store.transaction_start()
    await store.add_page(comic_id, 1, "p", "guest", "", "{}")
    await store.update_comic(comic_id, "t", "a", 1, "")
    await store.transaction_rollback()

    assert not store.in_transaction
    assert await read_committed("get_page", comic_id, 1) is None
    assert (await store.get_comic(comic_id)).page_count == 0


async def test_nested_start_refused(store):
    await store.transaction_start()

    with pytest.raises(TransactionStateError):
        await store.transaction_start()

    await store.transaction_rollback()


async def test_commit_without_start_refused(store):
    with pytest.raises(TransactionStateError):
        await store.transaction_commit()


# -- update guards -------------------------------------------------------------

async def test_update_comic_never_lowers_page_count(store, read_committed):
    comic_id = await store.add_comic("t", "a", "guest", "")
    assert await store.update_comic(comic_id, "t", "a", 2, "")

    assert await store.update_comic(comic_id, "x", "a", 1, "") is False

    comic = await read_committed("get_comic", comic_id)
    assert (comic.title, comic.page_count) == ("t", 2)


async def test_update_comic_same_count_allowed(store):
    comic_id = await store.add_comic("t", "a", "guest", "")

    assert await store.update_comic(comic_id, "renamed", "b", 0, "new")
    assert (await store.get_comic(comic_id)).title == "renamed"


async def test_update_missing_rows_return_false(store):
    assert await store.update_comic(42, "t", "a", 1, "") is False
    assert await store.update_page(42, 1, "t", "d", "{}") is False


async def test_update_page_replaces_fields(store):
    comic_id = await store.add_comic("t", "a", "guest", "")
    await store.add_page(comic_id, 1, "p", "guest", "old", "{}")

    assert await store.update_page(comic_id, 1, "q", "new", '{"a":1}')

    page = await store.get_page(comic_id, 1)
    assert (page.title, page.description, page.content) == ("q", "new", '{"a":1}')
    assert page.poster == "guest"


async def test_add_file_returns_id(store):
    comic_id = await store.add_comic("t", "a", "guest", "")
    page_id = await store.add_page(comic_id, 1, "p", "guest", "", "{}")

    file_id = await store.add_file(page_id, "a.png", "x.png", "image/png", 10)

    assert file_id > 0


async def test_page_for_missing_comic_is_store_error(store):
    with pytest.raises(StoreError, match="Database add_page failed"):
        await store.add_page(999, 1, "orphan", "guest", "", "{}")
