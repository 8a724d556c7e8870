from fastapi import APIRouter

from hotel_offers.dependencies import BookingServiceDep
from hotel_offers.schemas.bookings import BookingView, CancelBookingRequest
from hotel_offers.services.bookings import to_view

router = APIRouter(tags=["bookings"])


@router.get("/bookings", response_model=list[BookingView])
async def list_bookings(
    service: BookingServiceDep,
    guest_id: str | None = None,
    hotel_id: str | None = None,
) -> list[BookingView]:
    bookings = await service.list_bookings(guest_id=guest_id, hotel_id=hotel_id)
    return [to_view(b) for b in bookings]


@router.get("/bookings/{booking_id}", response_model=BookingView)
async def get_booking(booking_id: str, service: BookingServiceDep) -> BookingView:
    return to_view(await service.get_booking(booking_id))


@router.post("/bookings/{booking_id}/cancel", response_model=BookingView)
async def cancel_booking(
    booking_id: str,
    payload: CancelBookingRequest,
    service: BookingServiceDep,
) -> BookingView:
    return to_view(await service.cancel_booking(booking_id, payload.actor_id))
