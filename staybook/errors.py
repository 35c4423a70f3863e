"""Client-visible booking errors.

Each error maps to an HTTP status and a human-readable message; the
handlers registered in ``main`` turn them into ``{success: false, message}``.
"""


class BookingError(Exception):
    status_code = 400
    message = "Booking request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidDateFormat(BookingError):
    message = "Invalid date format"


class InvalidDateRange(BookingError):
    message = "Check-out date must be after check-in date"


class PastCheckIn(BookingError):
    message = "Check-in date cannot be in the past"


class RoomNotFound(BookingError):
    status_code = 404
    message = "Room not found"


class InvalidRoomPrice(BookingError):
    message = "Room price is invalid"


class RoomUnavailable(BookingError):
    message = "Room is already booked for the selected dates"


class BookingNotFound(BookingError):
    status_code = 404
    message = "Booking not found"


class InvalidStatus(BookingError):
    message = "Invalid status"


class InvalidStatusTransition(BookingError):
    message = "Status change is not allowed"


class NotConfirmed(BookingError):
    message = "Booking must be confirmed before check-in"


class AlreadyCheckedIn(BookingError):
    message = "Guest has already checked in"


class NotCheckedIn(BookingError):
    message = "Guest has not checked in"


class MissingParameters(BookingError):
    message = "Missing required parameters"


class NoRoomsForProperty(BookingError):
    status_code = 404
    message = "No rooms found for this property"


class UpdateFailed(BookingError):
    status_code = 500
    message = "Failed to update booking"


class InternalError(BookingError):
    status_code = 500
    message = "Internal server error"
