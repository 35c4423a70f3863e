from .property import Property
from .room import Room
from .booking import Booking, BookingStatus, CheckinStatus
