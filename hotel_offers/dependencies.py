from typing import Annotated

from fastapi import Depends, Request

from hotel_offers.services.bookings import BookingService
from hotel_offers.services.notifications import NotificationService
from hotel_offers.services.offers import OfferService
from hotel_offers.services.requests import RequestService


def get_offer_service(request: Request) -> OfferService:
    return request.app.state.offer_service


def get_request_service(request: Request) -> RequestService:
    return request.app.state.request_service


def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def get_notification_service(request: Request) -> NotificationService:
    return request.app.state.notification_service


OfferServiceDep = Annotated[OfferService, Depends(get_offer_service)]
RequestServiceDep = Annotated[RequestService, Depends(get_request_service)]
BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
