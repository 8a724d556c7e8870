from datetime import date, timedelta

import httpx
import pytest
from httpx import ASGITransport

from hotel_offers.schemas.requests import CreateStayRequest
from hotel_offers.services.bookings import BookingService
from hotel_offers.services.notifications import NotificationService
from hotel_offers.services.offers import OfferService
from hotel_offers.services.requests import RequestService
from hotel_offers.store import DocumentStore


@pytest.fixture
def mock_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DEFAULT_CURRENCY", "TRY")
    monkeypatch.setenv("NOTIFICATION_WEBHOOK_URL", "")


@pytest.fixture
async def client(mock_env):
    from hotel_offers.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c


@pytest.fixture
def store():
    return DocumentStore()


@pytest.fixture
def notifications(store):
    return NotificationService(store)


@pytest.fixture
def bookings(store):
    return BookingService(store)


@pytest.fixture
def request_service(store, notifications):
    return RequestService(store, notifications)


@pytest.fixture
def offer_service(store, bookings, notifications):
    return OfferService(store, bookings, notifications)


@pytest.fixture
def make_request(request_service):
    """Create an open 3-night stay request for guest g1."""

    async def _make(guest_id="g1", **overrides):
        check_in = date.today() + timedelta(days=30)
        fields = {
            "guest_id": guest_id,
            "city": "Antalya",
            "district": "Kaleiçi",
            "check_in": check_in,
            "check_out": check_in + timedelta(days=3),
            "adults": 2,
            "rooms_count": 1,
        }
        fields.update(overrides)
        return await request_service.create_request(CreateStayRequest(**fields))

    return _make
