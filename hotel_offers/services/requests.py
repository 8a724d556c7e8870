import logging
from datetime import date, datetime, timezone

from hotel_offers.exceptions.custom import (
    OfferStateError,
    OfferValidationError,
    PermissionDeniedError,
)
from hotel_offers.mappers.stay import clamp_response_deadline, is_request_expired
from hotel_offers.schemas.notifications import ActivityType, ActorRole, DocumentRef
from hotel_offers.schemas.requests import CreateStayRequest, RequestStatus, StayRequest
from hotel_offers.services.notifications import NotificationService
from hotel_offers.store import REQUESTS, DocumentStore

logger = logging.getLogger(__name__)


class RequestService:
    def __init__(
        self,
        store: DocumentStore,
        notifications: NotificationService,
        default_deadline_minutes: int = 60,
        min_deadline_minutes: int = 15,
        max_deadline_minutes: int = 60 * 24 * 7,
    ) -> None:
        self._store = store
        self._notifications = notifications
        self._default_deadline = default_deadline_minutes
        self._min_deadline = min_deadline_minutes
        self._max_deadline = max_deadline_minutes

    async def create_request(self, payload: CreateStayRequest) -> StayRequest:
        request = StayRequest(
            id=self._store.new_id(),
            **payload.model_dump(exclude={"response_deadline_minutes"}),
            response_deadline_minutes=clamp_response_deadline(
                payload.response_deadline_minutes,
                self._default_deadline,
                self._min_deadline,
                self._max_deadline,
            ),
            status=RequestStatus.open,
            created_at=datetime.now(timezone.utc),
        )
        await self._store.add(REQUESTS, request.to_document())
        logger.info(
            "Request %s created by guest %s (%s, %s -> %s, deadline=%dm)",
            request.id, request.guest_id, request.city,
            request.check_in, request.check_out, request.response_deadline_minutes,
        )

        await self._notifications.log_activity(
            ActivityType.request_created,
            ActorRole.guest,
            request.guest_id,
            f"New stay request in {request.city}",
            ref=DocumentRef(collection=REQUESTS, id=request.id),
        )
        return request

    async def get_request(self, request_id: str) -> StayRequest:
        return StayRequest.model_validate(await self._store.require(REQUESTS, request_id))

    async def list_open_requests(self, now: datetime | None = None) -> list[StayRequest]:
        """Open requests still inside their response window (hotel inbox)."""
        now = now or datetime.now(timezone.utc)
        docs = await self._store.query(REQUESTS, {"status": RequestStatus.open})
        requests = [StayRequest.model_validate(d) for d in docs]
        live = [r for r in requests if not is_request_expired(r, now)]
        return sorted(live, key=lambda r: r.created_at or now, reverse=True)

    async def list_guest_requests(self, guest_id: str) -> list[StayRequest]:
        docs = await self._store.query(REQUESTS, {"guestId": guest_id})
        requests = [
            StayRequest.model_validate(d)
            for d in docs
            if d.get("status") != RequestStatus.deleted
        ]
        return sorted(
            requests,
            key=lambda r: r.created_at or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True,
        )

    async def delete_request(self, request_id: str, guest_id: str) -> StayRequest:
        async with self._store.transaction(REQUESTS, request_id) as doc:
            request = StayRequest.model_validate(doc)
            if request.guest_id != guest_id:
                raise PermissionDeniedError(
                    f"Request {request_id} belongs to another guest", guest_id
                )
            if request.status == RequestStatus.accepted:
                raise OfferStateError(
                    f"Request {request_id} already has an accepted offer"
                )
            deleted = request.model_copy(update={
                "status": RequestStatus.deleted,
                "deleted_at": datetime.now(timezone.utc),
            })
            doc.update(deleted.to_document())

        logger.info("Request %s deleted by guest %s", request_id, guest_id)
        return deleted

    async def restart_request(
        self,
        request_id: str,
        guest_id: str,
        check_in: date | None = None,
        check_out: date | None = None,
        today: date | None = None,
    ) -> StayRequest:
        """Reopen a request with a fresh response window.

        Works on open requests, expired or not. A request whose check-in has
        already passed must be given new dates.
        """
        today = today or date.today()
        async with self._store.transaction(REQUESTS, request_id) as doc:
            request = StayRequest.model_validate(doc)
            if request.guest_id != guest_id:
                raise PermissionDeniedError(
                    f"Request {request_id} belongs to another guest", guest_id
                )
            if request.status != RequestStatus.open:
                raise OfferStateError(
                    f"Request {request_id} is {request.status} and cannot be restarted"
                )

            new_check_in = check_in or request.check_in
            new_check_out = check_out or request.check_out
            if new_check_in < today:
                raise OfferValidationError(
                    "Check-in date has passed, new dates are required", "checkIn"
                )
            if new_check_out <= new_check_in:
                raise OfferValidationError("checkOut must be after checkIn", "checkOut")

            now = datetime.now(timezone.utc)
            restarted = request.model_copy(update={
                "check_in": new_check_in,
                "check_out": new_check_out,
                "status": RequestStatus.open,
                "created_at": now,
                "restart_at": now,
            })
            doc.update(restarted.to_document())

        logger.info(
            "Request %s restarted by guest %s (%s -> %s)",
            request_id, guest_id, new_check_in, new_check_out,
        )

        await self._notifications.log_activity(
            ActivityType.request_restarted,
            ActorRole.guest,
            guest_id,
            f"Stay request in {restarted.city} restarted",
            ref=DocumentRef(collection=REQUESTS, id=request_id),
        )
        return restarted
