from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from operator import attrgetter

from hotel_offers.schemas.offers import Offer, OfferStatus

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _recency(offer: Offer) -> datetime:
    stamps = [ts for ts in (offer.updated_at, offer.created_at) if ts is not None]
    return max(stamps) if stamps else _EPOCH


def pick_better_offer(current: Offer | None, candidate: Offer) -> Offer:
    """Choose which of two offers from the same hotel/request to display.

    A live offer always beats a withdrawn one; otherwise the most recently
    touched wins and ties keep ``current``.
    """
    if current is None:
        return candidate

    current_withdrawn = current.status == OfferStatus.withdrawn
    candidate_withdrawn = candidate.status == OfferStatus.withdrawn
    if current_withdrawn != candidate_withdrawn:
        return current if candidate_withdrawn else candidate

    if _recency(candidate) > _recency(current):
        return candidate
    return current


def best_offers(
    offers: Iterable[Offer],
    key: Callable[[Offer], str] = attrgetter("request_id"),
) -> list[Offer]:
    """Fold offers into one per key, preserving first-seen key order."""
    best: dict[str, Offer] = {}
    for offer in offers:
        k = key(offer)
        best[k] = pick_better_offer(best.get(k), offer)
    return list(best.values())
