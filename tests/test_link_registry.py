"""Tests for the link registry (create, resolve, analytics)."""

import asyncio
from unittest.mock import AsyncMock
from urllib.parse import unquote

import pytest

from app.core.exceptions import (
    DuplicateKeyError,
    IdGenerationError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from app.services.link_registry import LinkRegistry


@pytest.mark.asyncio
async def test_create_builds_record(registry, store, clock):
    record = await registry.create("+1 (234) 567-8900", "Hi there!", "https://x.test")

    assert record.recipient == "+12345678900"
    assert record.deep_link == "sms:+12345678900?body=Hi%20there!"
    assert record.short_url == f"https://x.test/s/{record.short_id}"
    assert record.click_count == 0
    assert record.created_at == record.updated_at == clock.calls[-1]
    assert record.last_clicked_at is None
    assert await store.find_by_short_id(record.short_id) == record


@pytest.mark.asyncio
async def test_create_trims_message(registry):
    record = await registry.create("2345678900", "   hello  \n", "https://x.test")
    assert record.message == "hello"
    assert record.deep_link == "sms:2345678900?body=hello"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "phone, message",
    [
        ("", "hello"),
        (None, "hello"),
        ("2345678900", ""),
        ("2345678900", None),
        ("2345678900", "   \t "),
        ("+1 234 567", "hello"),
        ("call me", "hello"),
    ],
)
async def test_create_rejects_invalid_input(registry, store, phone, message):
    with pytest.raises(ValidationError):
        await registry.create(phone, message, "https://x.test")
    assert await store.count_all() == 0


@pytest.mark.asyncio
async def test_minimum_digits_is_configurable(store):
    registry = LinkRegistry(store, min_phone_digits=3)
    record = await registry.create("123", "hello", "https://x.test")
    assert record.recipient == "123"


@pytest.mark.asyncio
async def test_create_regenerates_on_existing_id(store, sequence_generator):
    registry = LinkRegistry(store, id_generator=sequence_generator("taken", "taken", "fresh"))
    first = await registry.create("2345678900", "one", "https://x.test")
    second = await registry.create("2345678900", "two", "https://x.test")

    assert first.short_id == "taken"
    assert second.short_id == "fresh"
    assert (await store.find_by_short_id("taken")).message == "one"


@pytest.mark.asyncio
async def test_create_retries_when_insert_reports_duplicate(sequence_generator):
    store = AsyncMock()
    store.exists.return_value = False
    store.insert.side_effect = [DuplicateKeyError(), None]
    registry = LinkRegistry(store, id_generator=sequence_generator("raced", "winner"))

    record = await registry.create("2345678900", "hello", "https://x.test")

    assert record.short_id == "winner"
    assert store.insert.await_count == 2


@pytest.mark.asyncio
async def test_create_gives_up_after_max_attempts(store):
    await LinkRegistry(store, id_generator=lambda: "same").create("2345678900", "a", "https://x.test")
    registry = LinkRegistry(store, max_attempts=3, id_generator=lambda: "same")

    with pytest.raises(IdGenerationError) as exc_info:
        await registry.create("2345678900", "b", "https://x.test")

    assert isinstance(exc_info.value, StoreError)
    assert exc_info.value.details == {"attempts": 3}
    assert await store.count_all() == 1


@pytest.mark.asyncio
async def test_store_failure_is_not_retried():
    store = AsyncMock()
    store.exists.return_value = False
    store.insert.side_effect = StoreError()
    registry = LinkRegistry(store)

    with pytest.raises(StoreError):
        await registry.create("2345678900", "hello", "https://x.test")
    assert store.insert.await_count == 1


@pytest.mark.asyncio
async def test_concurrent_creates_get_distinct_ids(registry, store):
    records = await asyncio.gather(
        *(registry.create("2345678900", f"message {n}", "https://x.test") for n in range(50))
    )

    assert len({record.short_id for record in records}) == 50
    assert await store.count_all() == 50


@pytest.mark.asyncio
async def test_resolve_counts_clicks(registry, clock):
    record = await registry.create("+1 (234) 567-8900", "Hi there!", "https://x.test")

    for _ in range(4):
        deep_link = await registry.resolve(record.short_id)
        assert deep_link == record.deep_link

    view = await registry.get_analytics(record.short_id)
    assert view.click_count == 4
    assert view.last_clicked_at == clock.calls[-1]
    assert view.updated_at == clock.calls[-1]
    assert view.last_clicked_at >= view.created_at


@pytest.mark.asyncio
async def test_concurrent_resolves_are_all_counted(registry):
    record = await registry.create("+1 (234) 567-8900", "Hi there!", "https://x.test")

    await asyncio.gather(*(registry.resolve(record.short_id) for _ in range(3)))

    view = await registry.get_analytics(record.short_id)
    assert view.click_count == 3


@pytest.mark.asyncio
async def test_resolve_unknown_id_changes_nothing(registry, store):
    record = await registry.create("2345678900", "hello", "https://x.test")

    with pytest.raises(NotFoundError):
        await registry.resolve("doesnotexist")

    assert await store.count_all() == 1
    assert await store.find_by_short_id(record.short_id) == record


@pytest.mark.asyncio
async def test_resolved_link_round_trips_message(registry):
    message = "  Meet at 5pm? Bring snacks & drinks :)  "
    record = await registry.create("+44 20 7946 0958", message, "https://x.test")

    deep_link = await registry.resolve(record.short_id)

    prefix = f"sms:{record.recipient}?body="
    assert deep_link.startswith(prefix)
    assert unquote(deep_link[len(prefix):]) == message.strip()


@pytest.mark.asyncio
async def test_analytics_does_not_mutate(registry, store):
    record = await registry.create("2345678900", "hello", "https://x.test")
    await registry.resolve(record.short_id)
    before = await store.find_by_short_id(record.short_id)

    for _ in range(3):
        view = await registry.get_analytics(record.short_id)

    assert view.click_count == 1
    assert await store.find_by_short_id(record.short_id) == before


@pytest.mark.asyncio
async def test_analytics_reports_unset_last_click_as_none(registry):
    record = await registry.create("2345678900", "hello", "https://x.test")

    view = await registry.get_analytics(record.short_id)

    assert view.last_clicked_at is None
    assert view.model_dump(by_alias=True)["lastClickedAt"] is None


@pytest.mark.asyncio
async def test_analytics_unknown_id(registry):
    with pytest.raises(NotFoundError):
        await registry.get_analytics("missing")


@pytest.mark.asyncio
async def test_count_links(registry):
    assert await registry.count_links() == 0
    await registry.create("2345678900", "hello", "https://x.test")
    assert await registry.count_links() == 1


@pytest.mark.asyncio
async def test_create_rejects_non_ascii_digits(registry, store):
    with pytest.raises(ValidationError):
        await registry.create("١٢٣٤٥٦٧٨٩٠", "hi", "https://x.test")
    assert await store.count_all() == 0


@pytest.mark.asyncio
async def test_recipient_ignores_non_ascii_digits(registry):
    record = await registry.create("+1 234 567 8900 ٩٩", "hi", "https://x.test")

    assert record.recipient == "+12345678900"
    assert record.deep_link == "sms:+12345678900?body=hi"
