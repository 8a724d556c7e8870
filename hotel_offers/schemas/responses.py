from __future__ import annotations

from datetime import date
from enum import StrEnum

from hotel_offers.schemas.base import CamelModel
from hotel_offers.schemas.bookings import BookingView
from hotel_offers.schemas.offers import HistoryActor, Offer


class DeltaLabel(StrEnum):
    discount = "discount"
    increase = "increase"
    unchanged = "unchanged"


class PriceDelta(CamelModel):
    reference_price: float
    current_price: float
    delta: float
    percent: float | None = None
    label: DeltaLabel


class OfferView(CamelModel):
    offer: Offer
    commission_rate: int
    initial_price: float
    delta_from_initial: PriceDelta
    delta_from_counter: PriceDelta | None = None
    last_actor: HistoryActor | None = None
    breakdown_mismatch: bool = False
    can_update_price: bool
    can_counter: bool


class AcceptOfferResponse(CamelModel):
    offer: OfferView
    booking: BookingView


class AdminOfferRow(CamelModel):
    view: OfferView
    guest_id: str | None = None
    city: str | None = None
    district: str | None = None
    check_in: date | None = None
    check_out: date | None = None
