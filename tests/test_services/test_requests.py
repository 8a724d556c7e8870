"""Tests for RequestService."""

from datetime import date, datetime, timedelta, timezone

import pytest

from hotel_offers.exceptions.custom import (
    OfferStateError,
    OfferValidationError,
    PermissionDeniedError,
)
from hotel_offers.mappers.stay import is_request_expired
from hotel_offers.schemas.requests import RequestStatus
from hotel_offers.store import ACTIVITY_LOGS, REQUESTS


async def test_create_request_defaults(make_request, store):
    request = await make_request()

    assert request.status == RequestStatus.open
    assert request.response_deadline_minutes == 60
    assert request.created_at is not None

    stored = await store.get(REQUESTS, request.id)
    assert stored["guestId"] == "g1"
    assert stored["checkIn"] == request.check_in


async def test_create_request_clamps_deadline(make_request):
    short = await make_request(response_deadline_minutes=1)
    long = await make_request(response_deadline_minutes=10**6)

    assert short.response_deadline_minutes == 15
    assert long.response_deadline_minutes == 60 * 24 * 7


async def test_create_request_logs_activity(make_request, store):
    request = await make_request()

    logs = await store.query(ACTIVITY_LOGS)
    assert len(logs) == 1
    assert logs[0]["type"] == "request_created"
    assert logs[0]["ref"] == {"collection": REQUESTS, "id": request.id}


async def test_list_open_requests_skips_expired(make_request, request_service, store):
    fresh = await make_request()
    stale = await make_request()
    async with store.transaction(REQUESTS, stale.id) as doc:
        doc["createdAt"] = datetime.now(timezone.utc) - timedelta(hours=3)

    open_requests = await request_service.list_open_requests()

    assert [r.id for r in open_requests] == [fresh.id]


async def test_list_guest_requests_hides_deleted(make_request, request_service):
    kept = await make_request()
    gone = await make_request()
    await make_request(guest_id="g2")
    await request_service.delete_request(gone.id, "g1")

    listed = await request_service.list_guest_requests("g1")

    assert [r.id for r in listed] == [kept.id]


async def test_delete_request_by_other_guest(make_request, request_service):
    request = await make_request()
    with pytest.raises(PermissionDeniedError):
        await request_service.delete_request(request.id, "g2")


async def test_delete_accepted_request_refused(make_request, request_service, store):
    request = await make_request()
    async with store.transaction(REQUESTS, request.id) as doc:
        doc["status"] = RequestStatus.accepted

    with pytest.raises(OfferStateError):
        await request_service.delete_request(request.id, "g1")


async def _age(store, request_id, **delta):
    async with store.transaction(REQUESTS, request_id) as doc:
        doc["createdAt"] = datetime.now(timezone.utc) - timedelta(**delta)


async def test_restart_reopens_expired_request(make_request, request_service, store):
    request = await make_request()
    await _age(store, request.id, days=2)

    restarted = await request_service.restart_request(request.id, "g1")

    now = datetime.now(timezone.utc)
    assert not is_request_expired(restarted, now)
    assert restarted.status == RequestStatus.open
    assert restarted.restart_at == restarted.created_at
    assert restarted.check_in == request.check_in
    assert [r.id for r in await request_service.list_open_requests()] == [request.id]

    logs = await store.query(ACTIVITY_LOGS, {"type": "request_restarted"})
    assert len(logs) == 1


async def test_restart_with_past_check_in_needs_new_dates(make_request, request_service):
    today = date.today()
    request = await make_request(check_in=today - timedelta(days=2), check_out=today + timedelta(days=1))

    with pytest.raises(OfferValidationError):
        await request_service.restart_request(request.id, "g1")

    new_in = today + timedelta(days=10)
    restarted = await request_service.restart_request(
        request.id, "g1", check_in=new_in, check_out=new_in + timedelta(days=2)
    )
    assert (restarted.check_in, restarted.check_out) == (new_in, new_in + timedelta(days=2))


async def test_restart_rejects_reversed_dates(make_request, request_service):
    request = await make_request()

    with pytest.raises(OfferValidationError):
        await request_service.restart_request(request.id, "g1", check_out=request.check_in)


async def test_restart_by_other_guest(make_request, request_service):
    request = await make_request()
    with pytest.raises(PermissionDeniedError):
        await request_service.restart_request(request.id, "g2")


async def test_restart_refused_for_accepted_or_deleted(make_request, request_service, store):
    accepted = await make_request()
    async with store.transaction(REQUESTS, accepted.id) as doc:
        doc["status"] = RequestStatus.accepted
    deleted = await make_request()
    await request_service.delete_request(deleted.id, "g1")

    with pytest.raises(OfferStateError):
        await request_service.restart_request(accepted.id, "g1")
    with pytest.raises(OfferStateError):
        await request_service.restart_request(deleted.id, "g1")
