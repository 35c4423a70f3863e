from sqlalchemy import Integer, String, ForeignKey, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..db import Base

class Room(Base):
    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    # Stored as entered by owners; parsed when a booking is priced
    price: Mapped[str] = mapped_column(String(50), nullable=False)
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    guesthouse: Mapped["Property"] = relationship(back_populates="rooms")
