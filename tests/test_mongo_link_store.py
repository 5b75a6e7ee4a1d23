"""Tests for the MongoDB link store against a mocked Motor collection."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError, ServerSelectionTimeoutError

from app.core.exceptions import DuplicateKeyError, StoreError
from app.db.mongo_link_store import MongoLinkStore
from app.models.link import LinkRecord

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

DOCUMENT = {
    "shortId": "abc123",
    "recipient": "+12345678900",
    "message": "Hi there!",
    "deepLink": "sms:+12345678900?body=Hi%20there!",
    "shortUrl": "https://x.test/s/abc123",
    "clickCount": 0,
    "createdAt": NOW,
    "updatedAt": NOW,
}


@pytest.fixture
def collection():
    collection = MagicMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.count_documents = AsyncMock(return_value=0)
    return collection


@pytest.fixture
def mongo_store(collection):
    return MongoLinkStore(collection, timeout_ms=200)


@pytest.mark.asyncio
async def test_exists(mongo_store, collection):
    assert not await mongo_store.exists("abc123")

    collection.find_one.return_value = {"_id": "x"}
    assert await mongo_store.exists("abc123")
    assert collection.find_one.await_args.args[0] == {"shortId": "abc123"}


@pytest.mark.asyncio
async def test_insert_writes_camel_case_document(mongo_store, collection):
    await mongo_store.insert(LinkRecord.from_document(DOCUMENT))

    collection.insert_one.assert_awaited_once_with(DOCUMENT)


@pytest.mark.asyncio
async def test_insert_maps_duplicate_key(mongo_store, collection):
    collection.insert_one.side_effect = MongoDuplicateKeyError("E11000 duplicate key")

    with pytest.raises(DuplicateKeyError):
        await mongo_store.insert(LinkRecord.from_document(DOCUMENT))


@pytest.mark.asyncio
async def test_find_by_short_id(mongo_store, collection):
    assert await mongo_store.find_by_short_id("abc123") is None

    collection.find_one.return_value = dict(DOCUMENT)
    record = await mongo_store.find_by_short_id("abc123")
    assert record.short_id == "abc123"
    assert record.last_clicked_at is None


@pytest.mark.asyncio
async def test_increment_click_is_single_atomic_update(mongo_store, collection):
    collection.find_one_and_update.return_value = {
        **DOCUMENT, "clickCount": 1, "updatedAt": NOW, "lastClickedAt": NOW
    }

    record = await mongo_store.increment_click("abc123", NOW)

    assert record.click_count == 1
    assert record.last_clicked_at == NOW
    collection.find_one_and_update.assert_awaited_once()
    call = collection.find_one_and_update.await_args
    assert call.args[0] == {"shortId": "abc123"}
    assert call.args[1] == {
        "$inc": {"clickCount": 1},
        "$max": {"updatedAt": NOW, "lastClickedAt": NOW},
    }
    assert call.kwargs["return_document"] == ReturnDocument.AFTER
    collection.find_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_increment_click_missing(mongo_store):
    assert await mongo_store.increment_click("nope", NOW) is None


@pytest.mark.asyncio
async def test_count_all(mongo_store, collection):
    collection.count_documents.return_value = 7
    assert await mongo_store.count_all() == 7


@pytest.mark.asyncio
async def test_driver_error_becomes_store_error(mongo_store, collection):
    collection.find_one.side_effect = ServerSelectionTimeoutError("no servers")

    with pytest.raises(StoreError) as exc_info:
        await mongo_store.find_by_short_id("abc123")
    assert exc_info.value.details == {"operation": "find"}


@pytest.mark.asyncio
async def test_slow_store_times_out(mongo_store, collection):
    async def hang(*args, **kwargs):
        await asyncio.sleep(5)

    collection.count_documents = hang

    with pytest.raises(StoreError) as exc_info:
        await mongo_store.count_all()
    assert exc_info.value.details["timeout_ms"] == 200
