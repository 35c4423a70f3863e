from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from staybook.config import Settings
from staybook.db import create_db_engine, create_session_factory, init_schema
from staybook.main import create_app
from staybook.models import Property, Room
from staybook.services.booking_manager import BookingManager

# Fixed "today" for manager tests so the June 2025 scenarios stay in the future
TODAY = date(2025, 5, 1)


def seed_property(db, property_id=1, rooms=((5, "1000"), (6, "1500"))):
    db.add(Property(id=property_id, name=f"Guesthouse {property_id}"))
    for room_id, price in rooms:
        db.add(Room(id=room_id, property_id=property_id, name=f"Room {room_id}", capacity=2, price=price))
    db.commit()


def room_available(db, room_id):
    return db.execute(select(Room.available).where(Room.id == room_id)).scalar_one()


def stays_overlap(a, b, c, d):
    """Reference check: does the stay [a, b) share a night with [c, d)?"""
    return a < d and b > c


def three_clause_overlap(a, b, c, d):
    # Form used by the legacy SQL conflict query
    return (a <= c and b > c) or (a < d and b >= d) or (a >= c and b <= d)


@pytest.fixture
def engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'staybook-test.db'}")
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded(db):
    seed_property(db, 1, rooms=((5, "1000"), (6, "1500"), (7, "call us"), (8, "0")))
    seed_property(db, 2, rooms=())
    return db


@pytest.fixture
def manager(seeded):
    return BookingManager(seeded, today=lambda: TODAY)


@pytest.fixture
def client(tmp_path):
    settings = Settings()
    settings.DATABASE_URL = f"sqlite:///{tmp_path / 'staybook-api.db'}"
    settings.CREATE_SCHEMA_ON_STARTUP = True
    settings.RATE_LIMIT_ENABLED = False
    app = create_app(settings)
    with TestClient(app) as c:
        db = app.state.session_factory()
        try:
            seed_property(db, 1)
            seed_property(db, 2, rooms=())
        finally:
            db.close()
        yield c
