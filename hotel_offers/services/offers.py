import logging
from datetime import datetime, timezone

from hotel_offers.cache import DocumentCache
from hotel_offers.exceptions.custom import (
    DuplicateOfferError,
    OfferStateError,
    OfferValidationError,
    PermissionDeniedError,
    RequestExpiredError,
)
from hotel_offers.mappers.negotiation import (
    commission_rate_for_mode,
    ensure_can_accept,
    ensure_can_counter,
    ensure_can_reject,
    ensure_can_update_price,
    ensure_can_withdraw,
    validate_price,
)
from hotel_offers.mappers.offer_picker import best_offers
from hotel_offers.mappers.offer_view import build_offer_view
from hotel_offers.mappers.stay import (
    breakdown_matches,
    breakdown_total,
    build_room_breakdown,
    calculate_nights,
    is_request_expired,
)
from hotel_offers.schemas.bookings import Booking, PaymentMethod
from hotel_offers.schemas.notifications import (
    ActivityType,
    ActorRole,
    DocumentRef,
    NotificationType,
)
from hotel_offers.schemas.offers import (
    CounterOfferRequest,
    CreateOfferRequest,
    HistoryActor,
    HistoryKind,
    Offer,
    OfferStatus,
    PriceHistoryEntry,
    UpdatePriceRequest,
)
from hotel_offers.schemas.requests import RequestStatus, StayRequest
from hotel_offers.schemas.responses import AdminOfferRow
from hotel_offers.services.bookings import BookingService
from hotel_offers.services.notifications import NotificationService
from hotel_offers.store import BOOKINGS, OFFERS, REQUESTS, DocumentStore

logger = logging.getLogger(__name__)


def _ensure_hotel(offer: Offer, hotel_id: str) -> None:
    if offer.hotel_id != hotel_id:
        raise PermissionDeniedError(
            f"Offer {offer.id} belongs to another hotel", hotel_id
        )


def _ensure_guest(request: StayRequest, guest_id: str) -> None:
    if request.guest_id != guest_id:
        raise PermissionDeniedError(
            f"Request {request.id} belongs to another guest", guest_id
        )


def _ensure_request_live(request: StayRequest, offer: Offer, now: datetime) -> None:
    if request.status != RequestStatus.open:
        raise OfferStateError(f"Request {request.id} is {request.status}", offer.id)
    if is_request_expired(request, now):
        raise RequestExpiredError(request.id)


class OfferService:
    def __init__(
        self,
        store: DocumentStore,
        bookings: BookingService,
        notifications: NotificationService,
        default_currency: str = "TRY",
    ) -> None:
        self._store = store
        self._bookings = bookings
        self._notifications = notifications
        self._default_currency = default_currency
        self._requests = DocumentCache(store, REQUESTS)

    async def _load_request(self, request_id: str) -> StayRequest:
        doc = await self._requests.get(request_id)
        if doc is None:
            return StayRequest.model_validate(await self._store.require(REQUESTS, request_id))
        return StayRequest.model_validate(doc)

    async def get_offer(self, offer_id: str) -> Offer:
        return Offer.model_validate(await self._store.require(OFFERS, offer_id))

    # --- Hotel actions ---

    async def create_offer(self, payload: CreateOfferRequest) -> Offer:
        # The request lock serialises duplicate checks for the same request
        async with self._store.locked(REQUESTS, payload.request_id):
            request = await self._load_request(payload.request_id)
            now = datetime.now(timezone.utc)

            if request.status != RequestStatus.open or is_request_expired(request, now):
                raise RequestExpiredError(request.id)

            existing = await self._store.query(
                OFFERS, {"requestId": request.id, "hotelId": payload.hotel_id}
            )
            live = [d for d in existing if d.get("status") != OfferStatus.withdrawn]
            if live:
                raise DuplicateOfferError(request.id, payload.hotel_id, live[0]["id"])

            nights = calculate_nights(request.check_in, request.check_out)
            breakdown = build_room_breakdown(payload.rooms, nights)
            total = breakdown_total(breakdown)
            currency = payload.currency or self._default_currency
            note = (payload.note or "").strip() or None

            offer = Offer(
                id=self._store.new_id(),
                request_id=request.id,
                hotel_id=payload.hotel_id,
                hotel_name=payload.hotel_name,
                mode=payload.mode,
                commission_rate=commission_rate_for_mode(payload.mode),
                status=OfferStatus.sent,
                currency=currency,
                total_price=total,
                note=note,
                room_breakdown=breakdown,
                cancellation_policy_type=payload.cancellation_policy_type,
                cancellation_policy_days=payload.cancellation_policy_days,
                price_history=[PriceHistoryEntry(
                    actor=HistoryActor.hotel,
                    kind=HistoryKind.initial,
                    price=total,
                    currency=currency,
                    note=note or "Initial offer",
                    created_at=now,
                )],
                created_at=now,
                updated_at=now,
            )
            await self._store.add(OFFERS, offer.to_document())

        logger.info(
            "Offer %s created for request %s by hotel %s (mode=%s, total=%.2f %s)",
            offer.id, request.id, offer.hotel_id, offer.mode, offer.total_price, offer.currency,
        )

        await self._notifications.notify(request.guest_id, NotificationType.offer_created, {
            "offerId": offer.id,
            "requestId": request.id,
            "hotelId": offer.hotel_id,
            "hotelName": offer.hotel_name,
            "totalPrice": offer.total_price,
            "currency": offer.currency,
            "commissionRate": offer.commission_rate,
            "mode": offer.mode,
        })
        await self._notifications.log_activity(
            ActivityType.offer_created,
            ActorRole.hotel,
            offer.hotel_id,
            f"Offer of {offer.total_price:.2f} {offer.currency} sent",
            ref=DocumentRef(collection=OFFERS, id=offer.id),
            meta={"requestId": request.id, "mode": str(offer.mode)},
        )
        return offer

    async def update_price(self, offer_id: str, payload: UpdatePriceRequest) -> Offer:
        if payload.rooms is None and payload.total_price is None:
            raise OfferValidationError("Either rooms or totalPrice is required", "totalPrice")

        async with self._store.transaction(OFFERS, offer_id) as doc:
            offer = Offer.model_validate(doc)
            _ensure_hotel(offer, payload.hotel_id)
            ensure_can_update_price(offer)

            if payload.rooms is not None:
                request = await self._load_request(offer.request_id)
                nights = calculate_nights(request.check_in, request.check_out)
                breakdown = build_room_breakdown(payload.rooms, nights)
                total = breakdown_total(breakdown)
            else:
                breakdown = offer.room_breakdown
                total = validate_price(payload.total_price, field="totalPrice")

            if not breakdown_matches(breakdown, total):
                logger.warning(
                    "Offer %s repriced to %.2f but room breakdown sums to %.2f",
                    offer.id, total, breakdown_total(breakdown),
                )

            now = datetime.now(timezone.utc)
            currency = payload.currency or offer.currency
            note = (payload.note or "").strip() or None
            entry = PriceHistoryEntry(
                actor=HistoryActor.hotel,
                kind=HistoryKind.update,
                price=total,
                currency=currency,
                note=note or "Price updated",
                created_at=now,
            )
            updated = offer.model_copy(update={
                "status": OfferStatus.sent,
                "total_price": total,
                "currency": currency,
                "note": note or offer.note,
                "room_breakdown": breakdown,
                "price_history": [*offer.price_history, entry],
                "updated_at": now,
            })
            doc.update(updated.to_document())

        logger.info(
            "Offer %s repriced by hotel %s: %.2f -> %.2f %s",
            offer.id, offer.hotel_id, offer.total_price, total, currency,
        )

        request = await self._load_request(updated.request_id)
        await self._notifications.notify(request.guest_id, NotificationType.offer_updated, {
            "offerId": updated.id,
            "requestId": updated.request_id,
            "hotelId": updated.hotel_id,
            "newTotalPrice": updated.total_price,
            "currency": updated.currency,
        })
        await self._notifications.log_activity(
            ActivityType.offer_updated,
            ActorRole.hotel,
            updated.hotel_id,
            f"Offer repriced to {updated.total_price:.2f} {updated.currency}",
            ref=DocumentRef(collection=OFFERS, id=updated.id),
        )
        return updated

    async def withdraw_offer(
        self, offer_id: str, hotel_id: str, note: str | None = None
    ) -> Offer:
        async with self._store.transaction(OFFERS, offer_id) as doc:
            offer = Offer.model_validate(doc)
            _ensure_hotel(offer, hotel_id)
            ensure_can_withdraw(offer)

            now = datetime.now(timezone.utc)
            withdrawn = offer.model_copy(update={
                "status": OfferStatus.withdrawn,
                "note": (note or "").strip() or offer.note,
                "withdrawn_at": now,
                "updated_at": now,
            })
            doc.update(withdrawn.to_document())

        logger.info("Offer %s withdrawn by hotel %s", offer_id, hotel_id)

        request = await self._load_request(withdrawn.request_id)
        await self._notifications.notify(request.guest_id, NotificationType.offer_withdrawn, {
            "offerId": withdrawn.id,
            "requestId": withdrawn.request_id,
            "hotelId": withdrawn.hotel_id,
        })
        return withdrawn

    # --- Guest actions ---

    async def submit_counter(self, offer_id: str, payload: CounterOfferRequest) -> Offer:
        async with self._store.transaction(OFFERS, offer_id) as doc:
            offer = Offer.model_validate(doc)
            request = await self._load_request(offer.request_id)
            _ensure_guest(request, payload.guest_id)
            price = ensure_can_counter(offer, payload.price)
            now = datetime.now(timezone.utc)
            _ensure_request_live(request, offer, now)

            entry = PriceHistoryEntry(
                actor=HistoryActor.guest,
                kind=HistoryKind.counter,
                price=price,
                currency=offer.currency,
                note=(payload.note or "").strip() or "Guest counter-offer",
                created_at=now,
            )
            countered = offer.model_copy(update={
                "status": OfferStatus.countered,
                "guest_counter_price": price,
                "guest_counter_at": now,
                "price_history": [*offer.price_history, entry],
                "updated_at": now,
            })
            doc.update(countered.to_document())

        logger.info(
            "Guest %s countered offer %s at %.2f %s (hotel price %.2f)",
            payload.guest_id, offer_id, price, offer.currency, offer.total_price,
        )

        await self._notifications.notify(offer.hotel_id, NotificationType.guest_counter, {
            "offerId": offer.id,
            "requestId": offer.request_id,
            "amount": price,
        })
        return countered

    async def accept_offer(
        self,
        offer_id: str,
        guest_id: str,
        payment_method: PaymentMethod = PaymentMethod.card3d,
    ) -> tuple[Offer, Booking]:
        # Lock order is offer then request
        async with self._store.transaction(OFFERS, offer_id) as doc:
            offer = Offer.model_validate(doc)
            async with self._store.transaction(REQUESTS, offer.request_id) as request_doc:
                request = StayRequest.model_validate(request_doc)
                _ensure_guest(request, guest_id)
                ensure_can_accept(offer)
                _ensure_request_live(request, offer, datetime.now(timezone.utc))

                booking = await self._bookings.create_from_offer(offer, request, payment_method)

                request_doc.update({
                    "status": RequestStatus.accepted,
                    "acceptedOfferId": offer.id,
                })

            now = datetime.now(timezone.utc)
            entry = PriceHistoryEntry(
                actor=HistoryActor.guest,
                kind=HistoryKind.final,
                price=offer.total_price,
                currency=offer.currency,
                note="Accepted",
                created_at=now,
            )
            accepted = offer.model_copy(update={
                "status": OfferStatus.accepted,
                "booking_id": booking.id,
                "price_history": [*offer.price_history, entry],
                "accepted_at": now,
                "updated_at": now,
            })
            doc.update(accepted.to_document())

        logger.info(
            "Offer %s accepted by guest %s, booking %s", offer_id, guest_id, booking.id
        )

        payload = {"bookingId": booking.id, "offerId": offer.id}
        await self._notifications.notify(guest_id, NotificationType.booking_created, payload)
        await self._notifications.notify(offer.hotel_id, NotificationType.booking_created, payload)
        await self._notifications.log_activity(
            ActivityType.booking_created,
            ActorRole.guest,
            guest_id,
            f"Booking of {booking.total_price:.2f} {booking.currency} created",
            ref=DocumentRef(collection=BOOKINGS, id=booking.id),
            meta={"offerId": offer.id, "requestId": offer.request_id},
        )
        return accepted, booking

    async def reject_offer(self, offer_id: str, guest_id: str) -> Offer:
        async with self._store.transaction(OFFERS, offer_id) as doc:
            offer = Offer.model_validate(doc)
            request = await self._load_request(offer.request_id)
            _ensure_guest(request, guest_id)
            ensure_can_reject(offer)

            now = datetime.now(timezone.utc)
            rejected = offer.model_copy(update={
                "status": OfferStatus.rejected,
                "rejected_at": now,
                "updated_at": now,
            })
            doc.update(rejected.to_document())

        logger.info("Offer %s rejected by guest %s", offer_id, guest_id)

        await self._notifications.notify(offer.hotel_id, NotificationType.offer_rejected, {
            "offerId": offer.id,
            "requestId": offer.request_id,
        })
        return rejected

    # --- Listings ---

    async def list_hotel_offers(
        self, hotel_id: str, include_withdrawn: bool = False
    ) -> list[Offer]:
        """One offer per request for a hotel, newest first."""
        docs = await self._store.query(OFFERS, {"hotelId": hotel_id})
        offers = best_offers(Offer.model_validate(d) for d in docs)
        if not include_withdrawn:
            offers = [o for o in offers if o.status != OfferStatus.withdrawn]
        return sorted(offers, key=lambda o: o.created_at, reverse=True)

    async def list_request_offers(self, request_id: str) -> list[Offer]:
        """Offers a guest sees for a request: one per hotel, cheapest first."""
        await self._load_request(request_id)
        docs = await self._store.query(OFFERS, {"requestId": request_id})
        offers = best_offers(
            (Offer.model_validate(d) for d in docs),
            key=lambda o: o.hotel_id,
        )
        return sorted(offers, key=lambda o: o.total_price)

    async def list_admin_rows(self, status: OfferStatus | None = None) -> list[AdminOfferRow]:
        where = {"status": status} if status else None
        docs = await self._store.query(OFFERS, where)
        offers = sorted(
            (Offer.model_validate(d) for d in docs),
            key=lambda o: o.created_at,
            reverse=True,
        )
        requests = await self._requests.get_many([o.request_id for o in offers])
        logger.debug(
            "Admin listing: %d offers, request cache hits=%d misses=%d",
            len(offers), self._requests.hits, self._requests.misses,
        )

        rows: list[AdminOfferRow] = []
        for offer in offers:
            request_doc = requests.get(offer.request_id)
            request = StayRequest.model_validate(request_doc) if request_doc else None
            rows.append(AdminOfferRow(
                view=build_offer_view(offer),
                guest_id=request.guest_id if request else None,
                city=request.city if request else None,
                district=request.district if request else None,
                check_in=request.check_in if request else None,
                check_out=request.check_out if request else None,
            ))
        return rows
