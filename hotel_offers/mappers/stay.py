from datetime import date, datetime, timedelta

from hotel_offers.exceptions.custom import OfferValidationError
from hotel_offers.mappers.negotiation import validate_price
from hotel_offers.schemas.bookings import Booking, BookingStatus
from hotel_offers.schemas.offers import RoomLine, RoomQuote
from hotel_offers.schemas.requests import StayRequest

DEFAULT_ROOM_NAME = "Room"
_TOTAL_TOLERANCE = 0.01


def calculate_nights(check_in: date | None, check_out: date | None) -> int:
    """Nights between check-in and check-out; never less than 1."""
    if check_in is None or check_out is None:
        return 1
    diff = (check_out - check_in).days
    return diff if diff > 0 else 1


def clamp_response_deadline(
    minutes: int | None,
    default: int,
    lower: int,
    upper: int,
) -> int:
    if minutes is None or minutes <= 0:
        minutes = default
    return max(lower, min(upper, minutes))


def request_deadline(request: StayRequest) -> datetime | None:
    if request.created_at is None or not request.response_deadline_minutes:
        return None
    return request.created_at + timedelta(minutes=request.response_deadline_minutes)


def is_request_expired(request: StayRequest, now: datetime) -> bool:
    deadline = request_deadline(request)
    if deadline is None:
        return False
    return deadline < now


def build_room_breakdown(rooms: list[RoomQuote], nights: int) -> list[RoomLine]:
    if not rooms:
        raise OfferValidationError("At least one room must be priced", "rooms")

    lines: list[RoomLine] = []
    for index, room in enumerate(rooms, start=1):
        if not room.room_type_id.strip():
            raise OfferValidationError(
                f"Room {index} is missing a room type", "rooms"
            )
        nightly = validate_price(room.nightly_price, field=f"rooms[{index}].nightlyPrice")
        lines.append(RoomLine(
            room_type_id=room.room_type_id,
            room_type_name=room.room_type_name or DEFAULT_ROOM_NAME,
            nights=nights,
            nightly_price=nightly,
            total_price=nightly * nights,
        ))
    return lines


def breakdown_total(lines: list[RoomLine]) -> float:
    return sum(line.total_price for line in lines)


def breakdown_matches(lines: list[RoomLine], total_price: float) -> bool:
    """True when the breakdown sums to the offer total (or there is none)."""
    if not lines:
        return True
    return abs(breakdown_total(lines) - total_price) <= _TOTAL_TOLERANCE


def derived_booking_status(booking: Booking, today: date) -> BookingStatus:
    """Active bookings whose stay has ended are shown as completed."""
    if booking.status != BookingStatus.active:
        return booking.status
    if booking.check_out is not None and booking.check_out < today:
        return BookingStatus.completed
    return BookingStatus.active
