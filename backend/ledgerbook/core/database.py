"""
Database Configuration
"""
import os
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from ledgerbook.core.config import settings


def build_engine(db_url: str, timeout: int = None, **engine_kwargs) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections get foreign keys switched on so the schema's
    RESTRICT / CASCADE / SET NULL rules are enforced, and wait at most
    ``timeout`` seconds for a lock. Transactions are opened with
    BEGIN IMMEDIATE, so writers are serialised from their first read and
    SAVEPOINTs work (pysqlite's own deferred BEGIN breaks both).
    PostgreSQL gets the same bound as a statement timeout.
    """
    timeout = timeout if timeout is not None else settings.DB_TIMEOUT_SECONDS
    url = make_url(db_url)
    connect_args = {}

    if url.get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False, "timeout": timeout}
        if url.database and url.database != ":memory:":
            directory = os.path.dirname(url.database)
            if directory:
                os.makedirs(directory, exist_ok=True)
    elif url.get_backend_name() == "postgresql":
        connect_args = {"options": f"-c statement_timeout={timeout * 1000}"}

    engine = create_engine(db_url, connect_args=connect_args, echo=settings.DEBUG, **engine_kwargs)

    if url.get_backend_name() == "sqlite":
        event.listen(engine, "connect", _configure_sqlite_connection)
        event.listen(engine, "begin", _begin_immediate)

    return engine


def _configure_sqlite_connection(dbapi_connection, connection_record):
    # Let SQLAlchemy, not pysqlite, decide when a transaction starts
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_immediate(conn):
    conn.exec_driver_sql("BEGIN IMMEDIATE")


engine = build_engine(settings.database_url)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base model
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session.
    Ensures the session is closed after use; anything not committed
    by then is rolled back.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None):
    """Initialize database tables"""
    # Import all models to register them with Base
    from ledgerbook.models import (  # noqa: F401
        Account, Contact, Bill, Invoice, Payout, Transaction, AllocationLink
    )
    Base.metadata.create_all(bind=bind or engine)
