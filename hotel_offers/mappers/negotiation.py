import math
from typing import Any

from hotel_offers.exceptions.custom import OfferStateError, OfferValidationError
from hotel_offers.schemas.offers import Offer, OfferMode, OfferStatus

COMMISSION_RATES: dict[OfferMode, int] = {
    OfferMode.simple: 8,
    OfferMode.refreshable: 10,
    OfferMode.negotiable: 15,
}

REPRICEABLE_MODES = frozenset({OfferMode.refreshable, OfferMode.negotiable})
OPEN_STATUSES = frozenset({OfferStatus.sent, OfferStatus.countered})
TERMINAL_STATUSES = frozenset(
    {OfferStatus.accepted, OfferStatus.rejected, OfferStatus.withdrawn}
)


def commission_rate_for_mode(mode: OfferMode) -> int:
    """Commission tier charged for an offer mode.

      - simple:      8%  single shot, price frozen after creation
      - refreshable: 10% hotel may reprice, guest may not counter
      - negotiable:  15% hotel may reprice, guest may counter once
    """
    return COMMISSION_RATES[mode]


def validate_price(value: Any, field: str = "price") -> float:
    if isinstance(value, bool):
        raise OfferValidationError(f"{field} must be a number", field)
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise OfferValidationError(f"{field} must be a number", field) from None
    if not math.isfinite(price) or price <= 0:
        raise OfferValidationError(f"{field} must be greater than zero", field)
    return price


def is_terminal(status: OfferStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_update_price(offer: Offer) -> bool:
    return offer.status in OPEN_STATUSES and offer.mode in REPRICEABLE_MODES


def can_counter(offer: Offer) -> bool:
    return (
        offer.status in OPEN_STATUSES
        and offer.mode == OfferMode.negotiable
        and offer.guest_counter_price is None
    )


def ensure_open(offer: Offer, action: str) -> None:
    if is_terminal(offer.status):
        raise OfferStateError(
            f"Cannot {action} an offer that is {offer.status}", offer.id
        )


def ensure_can_update_price(offer: Offer) -> None:
    ensure_open(offer, "reprice")
    if offer.mode not in REPRICEABLE_MODES:
        raise OfferStateError(
            f"{offer.mode} offers cannot be repriced after creation", offer.id
        )


def ensure_can_counter(offer: Offer, price: Any) -> float:
    """Validate a guest counter-offer and return the parsed price."""
    ensure_open(offer, "counter")
    if offer.mode != OfferMode.negotiable:
        raise OfferStateError(
            f"{offer.mode} offers do not accept counter-offers", offer.id
        )
    if offer.guest_counter_price is not None:
        raise OfferStateError("Counter-offer already used for this offer", offer.id)

    value = validate_price(price)
    if value > offer.total_price:
        raise OfferValidationError(
            "Counter-offer cannot be higher than the hotel's price", "price"
        )
    return value


def ensure_can_accept(offer: Offer) -> None:
    ensure_open(offer, "accept")


def ensure_can_reject(offer: Offer) -> None:
    ensure_open(offer, "reject")


def ensure_can_withdraw(offer: Offer) -> None:
    ensure_open(offer, "withdraw")
