from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum

from pydantic import Field, model_validator

from hotel_offers.schemas.base import CamelModel


class RequestStatus(StrEnum):
    open = "open"
    accepted = "accepted"
    deleted = "deleted"


class StayRequest(CamelModel):
    id: str
    guest_id: str
    guest_name: str | None = None
    city: str
    district: str | None = None
    check_in: date
    check_out: date
    adults: int = 1
    children_count: int = 0
    rooms_count: int = 1
    note: str | None = None
    response_deadline_minutes: int | None = 60
    status: RequestStatus = RequestStatus.open
    accepted_offer_id: str | None = None
    created_at: datetime | None = None
    restart_at: datetime | None = None
    deleted_at: datetime | None = None


class CreateStayRequest(CamelModel):
    guest_id: str
    guest_name: str | None = None
    city: str = Field(min_length=1)
    district: str | None = None
    check_in: date
    check_out: date
    adults: int = Field(default=1, ge=1)
    children_count: int = Field(default=0, ge=0)
    rooms_count: int = Field(default=1, ge=1)
    note: str | None = None
    response_deadline_minutes: int | None = None

    @model_validator(mode="after")
    def _check_dates(self) -> CreateStayRequest:
        if self.check_out < self.check_in:
            raise ValueError("checkOut must not be before checkIn")
        return self


class RestartStayRequest(CamelModel):
    guest_id: str
    check_in: date | None = None
    check_out: date | None = None
