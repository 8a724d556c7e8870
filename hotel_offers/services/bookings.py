import logging
from datetime import date, datetime, timezone

from hotel_offers.exceptions.custom import OfferStateError, PermissionDeniedError
from hotel_offers.mappers.stay import derived_booking_status
from hotel_offers.schemas.bookings import (
    Booking,
    BookingStatus,
    BookingView,
    PaymentMethod,
    PaymentStatus,
)
from hotel_offers.schemas.offers import Offer
from hotel_offers.schemas.requests import StayRequest
from hotel_offers.store import BOOKINGS, DocumentStore

logger = logging.getLogger(__name__)

_PAYMENT_STATUS = {
    PaymentMethod.card3d: PaymentStatus.paid,
    PaymentMethod.pay_at_hotel: PaymentStatus.pay_at_hotel,
}


def to_view(booking: Booking, today: date | None = None) -> BookingView:
    today = today or datetime.now(timezone.utc).date()
    return BookingView(
        **booking.model_dump(),
        display_status=derived_booking_status(booking, today),
    )


class BookingService:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def create_from_offer(
        self,
        offer: Offer,
        request: StayRequest,
        payment_method: PaymentMethod,
    ) -> Booking:
        """Freeze the offer's commercial terms into a new booking."""
        booking = Booking(
            id=self._store.new_id(),
            offer_id=offer.id,
            request_id=offer.request_id,
            guest_id=request.guest_id,
            hotel_id=offer.hotel_id,
            hotel_name=offer.hotel_name,
            city=request.city,
            district=request.district,
            check_in=request.check_in,
            check_out=request.check_out,
            adults=request.adults,
            children_count=request.children_count,
            rooms_count=request.rooms_count,
            total_price=offer.total_price,
            currency=offer.currency,
            room_breakdown=[line.model_copy() for line in offer.room_breakdown],
            cancellation_policy_type=offer.cancellation_policy_type,
            cancellation_policy_days=offer.cancellation_policy_days,
            payment_method=payment_method,
            payment_status=_PAYMENT_STATUS.get(payment_method, PaymentStatus.pending),
            status=BookingStatus.active,
            created_at=datetime.now(timezone.utc),
        )
        await self._store.add(BOOKINGS, booking.to_document())
        logger.info(
            "Booking %s created from offer %s (%.2f %s, payment=%s)",
            booking.id, offer.id, booking.total_price, booking.currency, payment_method,
        )
        return booking

    async def get_booking(self, booking_id: str) -> Booking:
        return Booking.model_validate(await self._store.require(BOOKINGS, booking_id))

    async def list_bookings(
        self,
        guest_id: str | None = None,
        hotel_id: str | None = None,
    ) -> list[Booking]:
        where: dict[str, str] = {}
        if guest_id:
            where["guestId"] = guest_id
        if hotel_id:
            where["hotelId"] = hotel_id

        docs = await self._store.query(BOOKINGS, where)
        bookings = [
            Booking.model_validate(d)
            for d in docs
            if d.get("status") != BookingStatus.deleted
        ]
        return sorted(bookings, key=lambda b: b.created_at, reverse=True)

    async def cancel_booking(self, booking_id: str, actor_id: str) -> Booking:
        async with self._store.transaction(BOOKINGS, booking_id) as doc:
            booking = Booking.model_validate(doc)
            if actor_id not in (booking.guest_id, booking.hotel_id):
                raise PermissionDeniedError(
                    f"Booking {booking_id} does not belong to {actor_id}", actor_id
                )
            if booking.status != BookingStatus.active:
                raise OfferStateError(
                    f"Cannot cancel a booking that is {booking.status}"
                )
            cancelled = booking.model_copy(update={
                "status": BookingStatus.cancelled,
                "cancelled_at": datetime.now(timezone.utc),
            })
            doc.update(cancelled.to_document())

        logger.info("Booking %s cancelled by %s", booking_id, actor_id)
        return cancelled
