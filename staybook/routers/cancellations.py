from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..dependencies import get_booking_manager
from ..services.booking_manager import BookingManager
from .bookings import BookingOut

router = APIRouter(prefix="/api/guesthouse-cancellations", tags=["cancellations"])

class CancelIn(BaseModel):
    id: Optional[int] = None

class CancelEnvelope(BaseModel):
    success: bool = True
    message: str
    booking: BookingOut

@router.post("/cancel", response_model=CancelEnvelope)
def cancel_booking(payload: CancelIn, manager: BookingManager = Depends(get_booking_manager)):
    """Traveller-initiated cancellation; same rules as PATCH /api/bookings/{id}/status."""
    booking = manager.cancel_booking(payload.id)
    return {
        "success": True,
        "message": "Booking cancelled successfully",
        "booking": BookingOut.model_validate(booking),
    }
