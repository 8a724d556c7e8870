from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum

from hotel_offers.schemas.base import CamelModel
from hotel_offers.schemas.offers import CancellationPolicyType, RoomLine


class BookingStatus(StrEnum):
    active = "active"
    cancelled = "cancelled"
    completed = "completed"
    deleted = "deleted"


class PaymentMethod(StrEnum):
    card3d = "card3d"
    pay_at_hotel = "payAtHotel"


class PaymentStatus(StrEnum):
    paid = "paid"
    pay_at_hotel = "payAtHotel"
    pending = "pending"


class Booking(CamelModel):
    id: str
    offer_id: str
    request_id: str
    guest_id: str
    hotel_id: str
    hotel_name: str | None = None
    city: str | None = None
    district: str | None = None
    check_in: date | None = None
    check_out: date | None = None
    adults: int | None = None
    children_count: int | None = None
    rooms_count: int | None = None
    total_price: float
    currency: str
    room_breakdown: list[RoomLine] = []
    cancellation_policy_type: CancellationPolicyType | None = None
    cancellation_policy_days: int | None = None
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    status: BookingStatus = BookingStatus.active
    created_at: datetime
    cancelled_at: datetime | None = None


class BookingView(Booking):
    display_status: BookingStatus


class AcceptOfferRequest(CamelModel):
    guest_id: str
    payment_method: PaymentMethod = PaymentMethod.card3d


class CancelBookingRequest(CamelModel):
    actor_id: str
