"""Guesthouse booking manager.

Every write runs in a single transaction on the injected session. Status
changes lock the booking row; booking creation locks the room row before
the overlap check so that two requests for the same room cannot both pass
it. On PostgreSQL the ``ex_gbookings_room_stay`` exclusion constraint
backs this up at the database level.
"""
import logging
from contextlib import contextmanager
from datetime import date
from typing import Callable, Optional

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import (
    AlreadyCheckedIn,
    BookingError,
    BookingNotFound,
    InternalError,
    InvalidDateRange,
    InvalidStatus,
    InvalidStatusTransition,
    MissingParameters,
    NoRoomsForProperty,
    NotCheckedIn,
    NotConfirmed,
    PastCheckIn,
    RoomNotFound,
    RoomUnavailable,
    UpdateFailed,
)
from ..models import Booking, BookingStatus, CheckinStatus, Room
from .availability import parse_stay_date
from .pricing import calculate_total_price, parse_room_price

logger = logging.getLogger(__name__)

OVERLAP_CONSTRAINT = "ex_gbookings_room_stay"

RELEASING_STATUSES = (BookingStatus.CANCELLED, BookingStatus.DECLINED)


class BookingManager:
    def __init__(
        self,
        db: Session,
        checkout_recomputes_availability: bool = False,
        today: Callable[[], date] = date.today,
    ):
        self.db = db
        self.checkout_recomputes_availability = checkout_recomputes_availability
        self._today = today

    # ---- transactions ----

    @contextmanager
    def _transaction(self, failure: type[BookingError], message: Optional[str] = None):
        try:
            yield
            self.db.commit()
        except BookingError:
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            if isinstance(exc, IntegrityError) and OVERLAP_CONSTRAINT in str(exc.orig):
                raise RoomUnavailable() from exc
            logger.exception("Booking transaction rolled back")
            raise failure(message) from exc

    def _lock_booking(self, booking_id: int) -> Booking:
        booking = (
            self.db.query(Booking)
            .filter(Booking.id == booking_id)
            .with_for_update()
            .first()
        )
        if booking is None:
            raise BookingNotFound()
        return booking

    def _lock_room(self, room_id: int, property_id: int) -> Optional[Room]:
        return (
            self.db.query(Room)
            .filter(Room.id == room_id, Room.property_id == property_id)
            .with_for_update()
            .first()
        )

    # ---- conflicts & availability ----

    def _overlapping(self, start: date, end: date):
        # Half-open stays: [check_in, check_out) meets [start, end)
        return self.db.query(Booking).filter(
            Booking.status != BookingStatus.CANCELLED,
            Booking.check_in < end,
            Booking.check_out > start,
        )

    def _has_overlap(self, room_id: int, start: date, end: date) -> bool:
        hit = (
            self._overlapping(start, end)
            .filter(Booking.room_id == room_id)
            .with_entities(Booking.id)
            .first()
        )
        return hit is not None

    def _set_room_available(self, booking: Booking, available: bool) -> None:
        self.db.query(Room).filter(
            Room.id == booking.room_id,
            Room.property_id == booking.property_id,
        ).update({Room.available: available}, synchronize_session=False)

    def _has_other_future_confirmed(self, booking: Booking) -> bool:
        hit = (
            self.db.query(Booking.id)
            .filter(
                Booking.room_id == booking.room_id,
                Booking.id != booking.id,
                Booking.status == BookingStatus.CONFIRMED,
                Booking.check_out > self._today(),
            )
            .first()
        )
        return hit is not None

    def _release_room(self, booking: Booking) -> None:
        if self._has_other_future_confirmed(booking):
            logger.info("Room %s stays unavailable: another confirmed booking is upcoming", booking.room_id)
            return
        self._set_room_available(booking, True)

    # ---- create ----

    def create_booking(self, traveller_id: str, property_id: int, room_id: int, check_in, check_out) -> Booking:
        start = parse_stay_date(check_in)
        end = parse_stay_date(check_out)
        if start >= end:
            raise InvalidDateRange()
        if start < self._today():
            raise PastCheckIn()

        with self._transaction(InternalError, "Failed to create booking"):
            # Held until commit; concurrent creates for this room queue here
            room = self._lock_room(room_id, property_id)
            if room is None:
                raise RoomNotFound()
            price = parse_room_price(room.price)
            if self._has_overlap(room_id, start, end):
                logger.info("Booking conflict | Room=%s | %s..%s", room_id, start, end)
                raise RoomUnavailable()
            booking = Booking(
                traveller_id=str(traveller_id),
                property_id=property_id,
                room_id=room_id,
                check_in=start,
                check_out=end,
                status=BookingStatus.PENDING,
                checkin_status=CheckinStatus.NOT_CHECKED_IN,
                total_price=calculate_total_price(price, start, end),
            )
            self.db.add(booking)

        logger.info(
            "Booking Created | Id=%s | Traveller=%s | Room=%s | %s..%s | Total=%s",
            booking.id, booking.traveller_id, room_id, start, end, booking.total_price,
        )
        return booking

    # ---- reads ----

    def _with_rooms(self):
        return self.db.query(Booking, Room).outerjoin(
            Room,
            and_(Room.id == Booking.room_id, Room.property_id == Booking.property_id),
        )

    def list_bookings(self, traveller_id: Optional[str] = None):
        q = self._with_rooms()
        if traveller_id:
            q = q.filter(Booking.traveller_id == traveller_id)
        return q.order_by(Booking.id.desc()).all()

    def list_bookings_by_property(self, property_id: int):
        return (
            self._with_rooms()
            .filter(Booking.property_id == property_id)
            .order_by(Booking.id.desc())
            .all()
        )

    def get_booking(self, booking_id: int):
        row = self._with_rooms().filter(Booking.id == booking_id).first()
        if row is None:
            raise BookingNotFound()
        return row

    def check_availability(self, property_id, check_in, check_out) -> list[int]:
        """Return ids of the property's rooms that are booked somewhere in the range."""
        if property_id is None or not check_in or not check_out:
            raise MissingParameters("property_id, check_in and check_out are required")
        start = parse_stay_date(check_in)
        end = parse_stay_date(check_out)
        if start >= end:
            raise InvalidDateRange()

        room_ids = [rid for (rid,) in self.db.query(Room.id).filter(Room.property_id == property_id).all()]
        if not room_ids:
            raise NoRoomsForProperty()

        rows = (
            self._overlapping(start, end)
            .filter(Booking.room_id.in_(room_ids))
            .with_entities(Booking.room_id)
            .distinct()
            .all()
        )
        return sorted(rid for (rid,) in rows)

    # ---- transitions ----

    def update_status(self, booking_id: int, status) -> Booking:
        try:
            new_status = BookingStatus(status)
        except ValueError:
            allowed = ", ".join(s.value for s in BookingStatus)
            raise InvalidStatus(f"Invalid status. Must be one of: {allowed}")

        with self._transaction(UpdateFailed):
            booking = self._lock_booking(booking_id)
            old_status = booking.status
            if not old_status.can_transition_to(new_status):
                raise InvalidStatusTransition(
                    f"Cannot change booking status from {old_status.value} to {new_status.value}"
                )
            booking.status = new_status
            if new_status == BookingStatus.CONFIRMED:
                self._set_room_available(booking, False)
            elif new_status in RELEASING_STATUSES:
                self._release_room(booking)

        logger.info("Booking Status | Id=%s | %s -> %s", booking.id, old_status.value, new_status.value)
        return booking

    def cancel_booking(self, booking_id: Optional[int]) -> Booking:
        if booking_id is None:
            raise MissingParameters("Booking ID is required")
        return self.update_status(booking_id, BookingStatus.CANCELLED)

    def check_in(self, booking_id: int) -> Booking:
        with self._transaction(UpdateFailed, "Failed to check in"):
            booking = self._lock_booking(booking_id)
            if booking.status != BookingStatus.CONFIRMED:
                raise NotConfirmed()
            if not booking.checkin_status.can_transition_to(CheckinStatus.CHECKED_IN):
                raise AlreadyCheckedIn()
            booking.checkin_status = CheckinStatus.CHECKED_IN

        logger.info("Guest Checked In | Booking=%s | Room=%s", booking.id, booking.room_id)
        return booking

    def check_out(self, booking_id: int) -> Booking:
        with self._transaction(UpdateFailed, "Failed to check out"):
            booking = self._lock_booking(booking_id)
            if not booking.checkin_status.can_transition_to(CheckinStatus.CHECKED_OUT):
                raise NotCheckedIn()
            booking.checkin_status = CheckinStatus.CHECKED_OUT
            if self.checkout_recomputes_availability:
                self._release_room(booking)
            else:
                self._set_room_available(booking, True)

        logger.info("Guest Checked Out | Booking=%s | Room=%s", booking.id, booking.room_id)
        return booking
