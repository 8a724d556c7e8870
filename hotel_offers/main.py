import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from hotel_offers.config import Settings
from hotel_offers.exceptions.custom import (
    DocumentNotFoundError,
    DuplicateOfferError,
    OfferStateError,
    OfferValidationError,
    PermissionDeniedError,
    RequestExpiredError,
)
from hotel_offers.exceptions.handlers import (
    duplicate_offer_error_handler,
    not_found_error_handler,
    permission_error_handler,
    request_expired_error_handler,
    state_error_handler,
    validation_error_handler,
)
from hotel_offers.routers.admin import router as admin_router
from hotel_offers.routers.bookings import router as bookings_router
from hotel_offers.routers.offers import router as offers_router
from hotel_offers.routers.requests import router as requests_router
from hotel_offers.services.bookings import BookingService
from hotel_offers.services.notifications import NotificationService
from hotel_offers.services.offers import OfferService
from hotel_offers.services.requests import RequestService
from hotel_offers.store import DocumentStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)

    async with httpx.AsyncClient(timeout=settings.notification_timeout) as client:
        store = DocumentStore()

        notifications = NotificationService(
            store,
            client=client,
            webhook_url=settings.notification_webhook_url,
            timeout=settings.notification_timeout,
        )
        bookings = BookingService(store)

        app.state.store = store
        app.state.notification_service = notifications
        app.state.booking_service = bookings
        app.state.request_service = RequestService(
            store,
            notifications,
            default_deadline_minutes=settings.default_response_deadline_minutes,
            min_deadline_minutes=settings.min_response_deadline_minutes,
            max_deadline_minutes=settings.max_response_deadline_minutes,
        )
        app.state.offer_service = OfferService(
            store,
            bookings,
            notifications,
            default_currency=settings.default_currency,
        )

        yield


app = FastAPI(title="Hotel Offers", lifespan=lifespan)

app.add_exception_handler(DocumentNotFoundError, not_found_error_handler)
app.add_exception_handler(OfferValidationError, validation_error_handler)
app.add_exception_handler(OfferStateError, state_error_handler)
app.add_exception_handler(PermissionDeniedError, permission_error_handler)
app.add_exception_handler(DuplicateOfferError, duplicate_offer_error_handler)
app.add_exception_handler(RequestExpiredError, request_expired_error_handler)

app.include_router(requests_router)
app.include_router(offers_router)
app.include_router(bookings_router)
app.include_router(admin_router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
