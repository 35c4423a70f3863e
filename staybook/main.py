import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .config import Settings, settings as default_settings
from .db import create_db_engine, create_session_factory, init_schema
from .errors import BookingError
from .limiter import configure_limiter
from .routers import bookings, cancellations

# --- Logging configuration ---
_level = logging.DEBUG if getattr(default_settings, "DEBUG", False) else logging.INFO
logging.basicConfig(
    level=_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# Align uvicorn loggers with our level (useful under Docker Compose)
for _name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_name).setLevel(_level)
logger = logging.getLogger("staybook.startup")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    msg = first.get("msg", "invalid value")
    return f"{field}: {msg}" if field else msg


async def booking_error_handler(request: Request, exc: BookingError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"success": False, "message": _validation_message(exc)})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "message": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s (DEBUG=%s)", settings.APP_NAME, getattr(settings, "DEBUG", False))
        engine = create_db_engine(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
        if settings.CREATE_SCHEMA_ON_STARTUP:
            init_schema(engine)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        try:
            yield
        finally:
            engine.dispose()
            logger.info("Database pool closed.")

    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
        description=f"{settings.APP_NAME}: guesthouse booking and availability API.",
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # Add the limiter to the app state
    limiter = configure_limiter(settings)
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(bookings.router)
    app.include_router(cancellations.router)

    @app.get("/healthz")
    @limiter.exempt
    def healthz():
        return {"status": "ok"}

    return app


app = create_app()
