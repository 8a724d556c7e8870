from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import ConfigDict, Field

from hotel_offers.schemas.base import CamelModel


class OfferMode(StrEnum):
    simple = "simple"
    refreshable = "refreshable"
    negotiable = "negotiable"


class OfferStatus(StrEnum):
    sent = "sent"
    countered = "countered"
    accepted = "accepted"
    rejected = "rejected"
    withdrawn = "withdrawn"


class HistoryActor(StrEnum):
    hotel = "hotel"
    guest = "guest"


class HistoryKind(StrEnum):
    initial = "initial"
    update = "update"
    counter = "counter"
    final = "final"


class CancellationPolicyType(StrEnum):
    non_refundable = "non_refundable"
    flexible = "flexible"
    until_days_before = "until_days_before"


class RoomLine(CamelModel):
    room_type_id: str
    room_type_name: str
    nights: int = Field(ge=1)
    nightly_price: float
    total_price: float


class PriceHistoryEntry(CamelModel):
    model_config = ConfigDict(frozen=True)

    actor: HistoryActor
    kind: HistoryKind
    price: float
    currency: str
    note: str | None = None
    created_at: datetime


class Offer(CamelModel):
    id: str
    request_id: str
    hotel_id: str
    hotel_name: str | None = None
    mode: OfferMode
    commission_rate: int
    status: OfferStatus = OfferStatus.sent
    currency: str
    total_price: float
    note: str | None = None
    guest_counter_price: float | None = None
    guest_counter_at: datetime | None = None
    room_breakdown: list[RoomLine] = []
    cancellation_policy_type: CancellationPolicyType = CancellationPolicyType.non_refundable
    cancellation_policy_days: int | None = None
    price_history: list[PriceHistoryEntry] = []
    booking_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    accepted_at: datetime | None = None
    rejected_at: datetime | None = None
    withdrawn_at: datetime | None = None


# --- Request bodies ---


class RoomQuote(CamelModel):
    room_type_id: str
    room_type_name: str | None = None
    nightly_price: float


class CreateOfferRequest(CamelModel):
    request_id: str
    hotel_id: str
    hotel_name: str | None = None
    mode: OfferMode
    currency: str | None = None
    note: str | None = None
    rooms: list[RoomQuote]
    cancellation_policy_type: CancellationPolicyType = CancellationPolicyType.non_refundable
    cancellation_policy_days: int | None = None


class UpdatePriceRequest(CamelModel):
    hotel_id: str
    total_price: float | None = None
    rooms: list[RoomQuote] | None = None
    currency: str | None = None
    note: str | None = None


class CounterOfferRequest(CamelModel):
    guest_id: str
    price: float
    note: str | None = None


class GuestActionRequest(CamelModel):
    guest_id: str


class WithdrawOfferRequest(CamelModel):
    hotel_id: str
    note: str | None = None
