from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from ..errors import InvalidRoomPrice

CENTS = Decimal("0.01")


def parse_room_price(raw) -> Decimal:
    """Room prices are stored as text; anything that is not a positive number is rejected."""
    try:
        price = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise InvalidRoomPrice()
    if not price.is_finite() or price <= 0:
        raise InvalidRoomPrice()
    return price


def count_nights(check_in: date, check_out: date) -> int:
    return abs((check_out - check_in).days)


def calculate_total_price(price_per_night: Decimal, check_in: date, check_out: date) -> Decimal:
    total = count_nights(check_in, check_out) * price_per_night
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)
