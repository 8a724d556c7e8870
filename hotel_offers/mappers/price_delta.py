from hotel_offers.schemas.offers import HistoryActor, HistoryKind, Offer, PriceHistoryEntry
from hotel_offers.schemas.responses import DeltaLabel, PriceDelta


def initial_price(history: list[PriceHistoryEntry], current_price: float) -> float:
    """Starting price used as the reference for deltas.

    First hotel ``initial`` entry, else the first entry, else the current price.
    """
    for entry in history:
        if entry.kind == HistoryKind.initial and entry.actor == HistoryActor.hotel:
            return entry.price
    if history:
        return history[0].price
    return current_price


def compute_delta(reference: float, current: float) -> PriceDelta:
    delta = current - reference
    percent = round(delta / reference * 100, 1) if reference else None

    if delta < 0:
        label = DeltaLabel.discount
    elif delta > 0:
        label = DeltaLabel.increase
    else:
        label = DeltaLabel.unchanged

    return PriceDelta(
        reference_price=reference,
        current_price=current,
        delta=delta,
        percent=percent,
        label=label,
    )


def delta_from_initial(offer: Offer) -> PriceDelta:
    return compute_delta(initial_price(offer.price_history, offer.total_price), offer.total_price)


def delta_from_counter(offer: Offer) -> PriceDelta | None:
    """How far the hotel's current price sits from the guest's ask."""
    if offer.guest_counter_price is None:
        return None
    return compute_delta(offer.guest_counter_price, offer.total_price)


def last_actor(history: list[PriceHistoryEntry]) -> HistoryActor | None:
    return history[-1].actor if history else None
