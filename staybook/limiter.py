from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import Settings, settings

# Limit strings are resolved per request, so create_app() can swap them in
_limits = {
    "default": settings.RATE_LIMIT_DEFAULT,
    "booking_create": settings.RATE_LIMIT_BOOKING_CREATE,
}


def default_limit() -> str:
    return _limits["default"]


def booking_create_limit() -> str:
    return _limits["booking_create"]


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[default_limit],
    enabled=settings.RATE_LIMIT_ENABLED,
)


def configure_limiter(app_settings: Settings) -> Limiter:
    """Apply an app's rate-limit settings to the shared limiter."""
    _limits["default"] = app_settings.RATE_LIMIT_DEFAULT
    _limits["booking_create"] = app_settings.RATE_LIMIT_BOOKING_CREATE
    limiter.enabled = app_settings.RATE_LIMIT_ENABLED
    return limiter
