from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from hotel_offers.schemas.base import CamelModel


class NotificationType(StrEnum):
    offer_created = "offer_created"
    offer_updated = "offer_updated"
    guest_counter = "guest_counter"
    offer_rejected = "offer_rejected"
    offer_withdrawn = "offer_withdrawn"
    booking_created = "booking_created"


class Notification(CamelModel):
    id: str
    to: str
    type: NotificationType
    payload: dict[str, Any] = {}
    read: bool = False
    created_at: datetime


class ActivityType(StrEnum):
    request_created = "request_created"
    request_restarted = "request_restarted"
    offer_created = "offer_created"
    offer_updated = "offer_updated"
    booking_created = "booking_created"


class ActorRole(StrEnum):
    guest = "guest"
    hotel = "hotel"
    admin = "admin"


class DocumentRef(CamelModel):
    collection: str
    id: str


class ActivityLog(CamelModel):
    id: str
    type: ActivityType
    actor_role: ActorRole
    actor_id: str
    ref: DocumentRef | None = None
    message: str
    meta: dict[str, Any] | None = None
    created_at: datetime
