from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal
from enum import Enum as PyEnum
from sqlalchemy import Integer, String, ForeignKey, Date, Numeric, Enum, DateTime, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from ..db import Base

class BookingStatus(str, PyEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    DECLINED = "declined"

    def can_transition_to(self, target: "BookingStatus") -> bool:
        return target in _STATUS_TRANSITIONS[self]

class CheckinStatus(str, PyEnum):
    NOT_CHECKED_IN = "not_checked_in"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"

    def can_transition_to(self, target: "CheckinStatus") -> bool:
        return target in _CHECKIN_TRANSITIONS[self]

_STATUS_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.DECLINED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED},
    BookingStatus.DECLINED: set(),
    BookingStatus.CANCELLED: set(),
}

_CHECKIN_TRANSITIONS = {
    CheckinStatus.NOT_CHECKED_IN: {CheckinStatus.CHECKED_IN},
    CheckinStatus.CHECKED_IN: {CheckinStatus.CHECKED_OUT},
    CheckinStatus.CHECKED_OUT: set(),
}

def _values(enum_cls):
    # Persist the lowercase values ("pending"), not the member names
    return [m.value for m in enum_cls]

class Booking(Base):
    __tablename__ = "gbookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    traveller_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), nullable=False, index=True)
    room_id: Mapped[int] = mapped_column(ForeignKey("rooms.id"), nullable=False, index=True)
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, native_enum=False, length=20, values_callable=_values),
        default=BookingStatus.PENDING,
        nullable=False,
    )
    checkin_status: Mapped[CheckinStatus] = mapped_column(
        Enum(CheckinStatus, native_enum=False, length=20, values_callable=_values),
        default=CheckinStatus.NOT_CHECKED_IN,
        nullable=False,
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("check_in < check_out", name="ck_gbookings_stay_range"),
        # composite index helps overlap searches
        Index("ix_gbookings_room_check_in_check_out", "room_id", "check_in", "check_out"),
    )

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, room={self.room_id}, {self.check_in}..{self.check_out}, status={self.status})>"
