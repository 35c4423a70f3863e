from datetime import date
from decimal import Decimal
from typing import Any, Optional, List, Union

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, field_validator

from ..dependencies import get_booking_manager
from ..limiter import booking_create_limit, limiter
from ..models import Booking, BookingStatus, CheckinStatus, Room
from ..services.booking_manager import BookingManager
from ..services.pricing import CENTS

router = APIRouter(prefix="/api/bookings", tags=["bookings"])

# ==== Schemas ====

class BookingCreateIn(BaseModel):
    traveller_id: Union[str, int]
    property_id: int
    room_id: int
    # Left untyped so any non-date value surfaces as "Invalid date format"
    check_in: Any
    check_out: Any

    @field_validator("traveller_id")
    @classmethod
    def _traveller_id_text(cls, v):
        v = str(v).strip()
        if not v:
            raise ValueError("traveller_id is required")
        return v

class StatusUpdateIn(BaseModel):
    status: Optional[str] = None

class BookingOut(BaseModel):
    id: int
    traveller_id: str
    property_id: int
    room_id: int
    check_in: date
    check_out: date
    status: BookingStatus
    checkin_status: CheckinStatus
    total_price: Decimal
    nights: int

    model_config = {"from_attributes": True, "use_enum_values": True}

class BookingDetailOut(BookingOut):
    room_name: Optional[str] = None
    price_per_night: Optional[Decimal] = None

class BookingEnvelope(BaseModel):
    success: bool = True
    booking: BookingOut

class BookingDetailEnvelope(BaseModel):
    success: bool = True
    booking: BookingDetailOut

class BookingListEnvelope(BaseModel):
    success: bool = True
    bookings: List[BookingDetailOut]

class AvailabilityEnvelope(BaseModel):
    success: bool = True
    unavailableRoomIds: List[int]

# ==== Helpers ====

def to_detail(booking: Booking, room: Optional[Room]) -> BookingDetailOut:
    """Booking row plus display fields; price_per_night is the rate frozen into total_price."""
    base = BookingOut.model_validate(booking).model_dump()
    per_night = None
    if booking.nights > 0:
        per_night = (Decimal(booking.total_price) / booking.nights).quantize(CENTS)
    return BookingDetailOut(
        **base,
        room_name=room.name if room is not None else None,
        price_per_night=per_night,
    )

# ==== Endpoints ====

@router.post("", response_model=BookingEnvelope, status_code=201)
@limiter.limit(booking_create_limit)
def create_booking(request: Request, payload: BookingCreateIn, manager: BookingManager = Depends(get_booking_manager)):
    booking = manager.create_booking(
        traveller_id=payload.traveller_id,
        property_id=payload.property_id,
        room_id=payload.room_id,
        check_in=payload.check_in,
        check_out=payload.check_out,
    )
    return {"success": True, "booking": BookingOut.model_validate(booking)}

@router.get("", response_model=BookingListEnvelope)
def list_bookings(traveller_id: Optional[str] = None, manager: BookingManager = Depends(get_booking_manager)):
    rows = manager.list_bookings(traveller_id=traveller_id)
    return {"success": True, "bookings": [to_detail(b, r) for b, r in rows]}

# Fixed paths must be registered before /{booking_id}
@router.get("/check-availability", response_model=AvailabilityEnvelope)
def check_availability(
    property_id: Optional[int] = None,
    check_in: Optional[str] = None,
    check_out: Optional[str] = None,
    manager: BookingManager = Depends(get_booking_manager),
):
    room_ids = manager.check_availability(property_id, check_in, check_out)
    return {"success": True, "unavailableRoomIds": room_ids}

@router.get("/property/{property_id}", response_model=BookingListEnvelope)
def list_property_bookings(property_id: int, manager: BookingManager = Depends(get_booking_manager)):
    rows = manager.list_bookings_by_property(property_id)
    return {"success": True, "bookings": [to_detail(b, r) for b, r in rows]}

@router.get("/{booking_id}", response_model=BookingDetailEnvelope)
def get_booking(booking_id: int, manager: BookingManager = Depends(get_booking_manager)):
    booking, room = manager.get_booking(booking_id)
    return {"success": True, "booking": to_detail(booking, room)}

@router.patch("/{booking_id}/status", response_model=BookingEnvelope)
def update_booking_status(booking_id: int, payload: StatusUpdateIn, manager: BookingManager = Depends(get_booking_manager)):
    booking = manager.update_status(booking_id, payload.status)
    return {"success": True, "booking": BookingOut.model_validate(booking)}

@router.patch("/{booking_id}/check-in", response_model=BookingEnvelope)
def check_in(booking_id: int, manager: BookingManager = Depends(get_booking_manager)):
    return {"success": True, "booking": BookingOut.model_validate(manager.check_in(booking_id))}

@router.patch("/{booking_id}/check-out", response_model=BookingEnvelope)
def check_out(booking_id: int, manager: BookingManager = Depends(get_booking_manager)):
    return {"success": True, "booking": BookingOut.model_validate(manager.check_out(booking_id))}
