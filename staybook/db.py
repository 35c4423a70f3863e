from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


class Base(DeclarativeBase):
    pass


def create_db_engine(url: str, pool_size: int = 5, max_overflow: int = 10) -> Engine:
    """Build the process-wide engine (connection pool).

    SQLite is only used for development and tests. pysqlite's implicit
    transaction handling is replaced with ``BEGIN IMMEDIATE`` so that the
    write lock is taken when a transaction starts; this is what makes
    check-then-insert sequences atomic there. Read-only requests take the
    same lock, so SQLite serializes every transaction, reads included; a
    session holds it until its transaction ends. PostgreSQL
    relies on ``SELECT ... FOR UPDATE`` and the gbookings exclusion
    constraint and never pays this cost.
    """
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False})
        _serialize_sqlite_transactions(engine)
        return engine
    return create_engine(
        url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
    )


def _serialize_sqlite_transactions(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: Engine) -> sessionmaker:
    # Objects stay readable after commit so services can return them directly
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def init_schema(engine: Engine) -> None:
    # Import models so every table is registered on Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
