from datetime import date, datetime, timedelta, timezone

import pytest

from hotel_offers.exceptions.custom import OfferValidationError
from hotel_offers.mappers.stay import (
    breakdown_matches,
    build_room_breakdown,
    calculate_nights,
    clamp_response_deadline,
    derived_booking_status,
    is_request_expired,
)
from hotel_offers.schemas.bookings import Booking, BookingStatus, PaymentMethod, PaymentStatus
from hotel_offers.schemas.offers import RoomQuote
from hotel_offers.schemas.requests import StayRequest

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _request(created_at=NOW, minutes=60):
    return StayRequest(
        id="r1",
        guest_id="g1",
        city="Antalya",
        check_in=date(2026, 4, 1),
        check_out=date(2026, 4, 4),
        response_deadline_minutes=minutes,
        created_at=created_at,
    )


def test_calculate_nights():
    assert calculate_nights(date(2026, 4, 1), date(2026, 4, 4)) == 3
    assert calculate_nights(date(2026, 4, 1), date(2026, 4, 1)) == 1
    assert calculate_nights(None, date(2026, 4, 1)) == 1


def test_clamp_response_deadline():
    assert clamp_response_deadline(None, 60, 15, 10080) == 60
    assert clamp_response_deadline(0, 60, 15, 10080) == 60
    assert clamp_response_deadline(5, 60, 15, 10080) == 15
    assert clamp_response_deadline(99999, 60, 15, 10080) == 10080
    assert clamp_response_deadline(120, 60, 15, 10080) == 120


def test_request_expiry():
    request = _request()
    assert not is_request_expired(request, NOW + timedelta(minutes=59))
    assert is_request_expired(request, NOW + timedelta(minutes=61))


def test_request_without_deadline_never_expires():
    assert not is_request_expired(_request(minutes=0), NOW + timedelta(days=30))
    assert not is_request_expired(_request(created_at=None), NOW + timedelta(days=30))


def test_build_room_breakdown():
    lines = build_room_breakdown([
        RoomQuote(room_type_id="dbl", room_type_name="Double", nightly_price=300),
        RoomQuote(room_type_id="sgl", nightly_price=200),
    ], nights=3)

    assert [line.total_price for line in lines] == [900, 600]
    assert lines[1].room_type_name == "Room"
    assert all(line.nights == 3 for line in lines)


def test_build_room_breakdown_requires_rooms():
    with pytest.raises(OfferValidationError):
        build_room_breakdown([], nights=2)


def test_build_room_breakdown_rejects_bad_prices():
    with pytest.raises(OfferValidationError):
        build_room_breakdown([RoomQuote(room_type_id="dbl", nightly_price=0)], nights=2)
    with pytest.raises(OfferValidationError):
        build_room_breakdown([RoomQuote(room_type_id=" ", nightly_price=100)], nights=2)


def test_breakdown_matches():
    lines = build_room_breakdown([RoomQuote(room_type_id="dbl", nightly_price=300)], nights=2)
    assert breakdown_matches(lines, 600)
    assert not breakdown_matches(lines, 550)
    assert breakdown_matches([], 550)


def _booking(status=BookingStatus.active, check_out=date(2026, 4, 4)):
    return Booking(
        id="b1",
        offer_id="o1",
        request_id="r1",
        guest_id="g1",
        hotel_id="h1",
        check_out=check_out,
        total_price=900,
        currency="TRY",
        payment_method=PaymentMethod.card3d,
        payment_status=PaymentStatus.paid,
        status=status,
        created_at=NOW,
    )


def test_derived_booking_status():
    assert derived_booking_status(_booking(), date(2026, 4, 3)) == BookingStatus.active
    assert derived_booking_status(_booking(), date(2026, 4, 5)) == BookingStatus.completed
    cancelled = _booking(status=BookingStatus.cancelled)
    assert derived_booking_status(cancelled, date(2026, 4, 5)) == BookingStatus.cancelled
