import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings:
    APP_NAME: str = os.getenv("APP_NAME", "StayBook")
    # Core settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development").lower()
    DEBUG: bool = _env_bool("DEBUG")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./staybook.db")
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    # Dev/test convenience; production schemas come from Alembic
    CREATE_SCHEMA_ON_STARTUP: bool = _env_bool("CREATE_SCHEMA_ON_STARTUP")

    # CORS (comma separated)
    CORS_ORIGINS: list[str] = [
        o.strip()
        for o in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://localhost:5173,http://localhost:8080",
        ).split(",")
        if o.strip()
    ]

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = _env_bool("RATE_LIMIT_ENABLED", "true")
    RATE_LIMIT_DEFAULT: str = os.getenv("RATE_LIMIT_DEFAULT", "100/minute")
    RATE_LIMIT_BOOKING_CREATE: str = os.getenv("RATE_LIMIT_BOOKING_CREATE", "20/minute")

    # Booking behaviour
    # When false, check-out frees the room unconditionally (legacy behaviour).
    CHECKOUT_RECOMPUTES_AVAILABILITY: bool = _env_bool("CHECKOUT_RECOMPUTES_AVAILABILITY")

settings = Settings()
