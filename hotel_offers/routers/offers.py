from fastapi import APIRouter

from hotel_offers.dependencies import OfferServiceDep
from hotel_offers.mappers.offer_view import build_offer_view
from hotel_offers.schemas.bookings import AcceptOfferRequest
from hotel_offers.schemas.offers import (
    CounterOfferRequest,
    CreateOfferRequest,
    GuestActionRequest,
    UpdatePriceRequest,
    WithdrawOfferRequest,
)
from hotel_offers.schemas.responses import AcceptOfferResponse, OfferView
from hotel_offers.services.bookings import to_view

router = APIRouter(tags=["offers"])


@router.post("/offers", response_model=OfferView, status_code=201)
async def create_offer(payload: CreateOfferRequest, service: OfferServiceDep) -> OfferView:
    return build_offer_view(await service.create_offer(payload))


@router.get("/offers", response_model=list[OfferView])
async def list_hotel_offers(
    hotel_id: str,
    service: OfferServiceDep,
    include_withdrawn: bool = False,
) -> list[OfferView]:
    offers = await service.list_hotel_offers(hotel_id, include_withdrawn=include_withdrawn)
    return [build_offer_view(o) for o in offers]


@router.get("/requests/{request_id}/offers", response_model=list[OfferView])
async def list_request_offers(request_id: str, service: OfferServiceDep) -> list[OfferView]:
    return [build_offer_view(o) for o in await service.list_request_offers(request_id)]


@router.get("/offers/{offer_id}", response_model=OfferView)
async def get_offer(offer_id: str, service: OfferServiceDep) -> OfferView:
    return build_offer_view(await service.get_offer(offer_id))


@router.post("/offers/{offer_id}/price", response_model=OfferView)
async def update_price(
    offer_id: str,
    payload: UpdatePriceRequest,
    service: OfferServiceDep,
) -> OfferView:
    return build_offer_view(await service.update_price(offer_id, payload))


@router.post("/offers/{offer_id}/withdraw", response_model=OfferView)
async def withdraw_offer(
    offer_id: str,
    payload: WithdrawOfferRequest,
    service: OfferServiceDep,
) -> OfferView:
    return build_offer_view(
        await service.withdraw_offer(offer_id, payload.hotel_id, note=payload.note)
    )


@router.post("/offers/{offer_id}/counter", response_model=OfferView)
async def submit_counter(
    offer_id: str,
    payload: CounterOfferRequest,
    service: OfferServiceDep,
) -> OfferView:
    return build_offer_view(await service.submit_counter(offer_id, payload))


@router.post("/offers/{offer_id}/accept", response_model=AcceptOfferResponse)
async def accept_offer(
    offer_id: str,
    payload: AcceptOfferRequest,
    service: OfferServiceDep,
) -> AcceptOfferResponse:
    offer, booking = await service.accept_offer(
        offer_id, payload.guest_id, payment_method=payload.payment_method
    )
    return AcceptOfferResponse(offer=build_offer_view(offer), booking=to_view(booking))


@router.post("/offers/{offer_id}/reject", response_model=OfferView)
async def reject_offer(
    offer_id: str,
    payload: GuestActionRequest,
    service: OfferServiceDep,
) -> OfferView:
    return build_offer_view(await service.reject_offer(offer_id, payload.guest_id))
