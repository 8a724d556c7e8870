"""Tests for NotificationService (webhook mocked with respx)."""

import httpx
import pytest
import respx
from httpx import Response

from hotel_offers.schemas.notifications import ActivityType, ActorRole, NotificationType
from hotel_offers.services.notifications import NotificationService
from hotel_offers.store import NOTIFICATIONS, DocumentStore

WEBHOOK_URL = "https://hooks.example.com/notify"


@pytest.fixture
def store():
    return DocumentStore()


@pytest.fixture
async def http_client():
    async with httpx.AsyncClient() as c:
        yield c


async def test_notify_stores_document(store):
    service = NotificationService(store)

    notification = await service.notify("g1", NotificationType.offer_created, {"offerId": "o1"})

    assert notification is not None
    stored = await store.get(NOTIFICATIONS, notification.id)
    assert stored["to"] == "g1"
    assert stored["read"] is False
    assert stored["payload"] == {"offerId": "o1"}


async def test_notify_without_recipient_is_noop(store):
    service = NotificationService(store)
    assert await service.notify(None, NotificationType.offer_created, {}) is None
    assert await store.query(NOTIFICATIONS) == []


@respx.mock
async def test_notify_posts_to_webhook(store, http_client):
    route = respx.post(WEBHOOK_URL).mock(return_value=Response(204))
    service = NotificationService(store, client=http_client, webhook_url=WEBHOOK_URL)

    await service.notify("h1", NotificationType.guest_counter, {"amount": 800})

    assert route.called
    body = route.calls[0].request.content
    assert b'"type":"guest_counter"' in body.replace(b" ", b"")


@respx.mock
async def test_webhook_error_does_not_raise(store, http_client):
    respx.post(WEBHOOK_URL).mock(return_value=Response(500, text="down"))
    service = NotificationService(store, client=http_client, webhook_url=WEBHOOK_URL)

    notification = await service.notify("h1", NotificationType.offer_rejected, {})

    assert notification is not None
    assert len(await store.query(NOTIFICATIONS)) == 1


@respx.mock
async def test_webhook_network_error_does_not_raise(store, http_client):
    respx.post(WEBHOOK_URL).mock(side_effect=httpx.ConnectError("refused"))
    service = NotificationService(store, client=http_client, webhook_url=WEBHOOK_URL)

    assert await service.notify("h1", NotificationType.offer_rejected, {}) is not None


async def test_list_for_recipient(store):
    service = NotificationService(store)
    await service.notify("g1", NotificationType.offer_created, {})
    await service.notify("g2", NotificationType.offer_created, {})

    items = await service.list_for("g1")
    assert [n.to for n in items] == ["g1"]


async def test_activity_log_newest_first_and_limited(store):
    service = NotificationService(store)
    for i in range(3):
        await service.log_activity(
            ActivityType.offer_created, ActorRole.hotel, "h1", f"offer {i}"
        )

    items = await service.list_activity(limit=2)

    assert len(items) == 2
    assert items[0].message == "offer 2"
