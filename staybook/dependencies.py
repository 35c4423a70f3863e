from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .db import get_db
from .services.booking_manager import BookingManager


def get_booking_manager(request: Request, db: Session = Depends(get_db)) -> BookingManager:
    settings = request.app.state.settings
    return BookingManager(
        db,
        checkout_recomputes_availability=settings.CHECKOUT_RECOMPUTES_AVAILABILITY,
    )
