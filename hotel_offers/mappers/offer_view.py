from hotel_offers.mappers.negotiation import (
    can_counter,
    can_update_price,
    commission_rate_for_mode,
)
from hotel_offers.mappers.price_delta import (
    delta_from_counter,
    delta_from_initial,
    last_actor,
)
from hotel_offers.mappers.stay import breakdown_matches
from hotel_offers.schemas.offers import Offer
from hotel_offers.schemas.responses import OfferView


def build_offer_view(offer: Offer) -> OfferView:
    from_initial = delta_from_initial(offer)
    return OfferView(
        offer=offer,
        commission_rate=commission_rate_for_mode(offer.mode),
        initial_price=from_initial.reference_price,
        delta_from_initial=from_initial,
        delta_from_counter=delta_from_counter(offer),
        last_actor=last_actor(offer.price_history),
        breakdown_mismatch=not breakdown_matches(offer.room_breakdown, offer.total_price),
        can_update_price=can_update_price(offer),
        can_counter=can_counter(offer),
    )
