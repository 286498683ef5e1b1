"""
Database engine and session management.

Builds the SQLAlchemy engine from environment configuration with a test
fallback (SQLite in-memory) and exposes session helpers.
"""
import logging
import os
import sys

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

SQLITE_MEMORY_URL = "sqlite+pysqlite:///:memory:"


def _get_database_url() -> str:
    # If DATABASE_URL is explicitly set, use it
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    # Otherwise, generate from individual components (all must be set)
    db_user = os.getenv("POSTGRES_USER")
    db_password = os.getenv("POSTGRES_PASSWORD")
    db_host = os.getenv("POSTGRES_HOST")
    db_port = os.getenv("POSTGRES_PORT")
    db_name = os.getenv("POSTGRES_DB")

    if not all([db_user, db_password, db_host, db_port, db_name]):
        missing = []
        if not db_user: missing.append("POSTGRES_USER")
        if not db_password: missing.append("POSTGRES_PASSWORD")
        if not db_host: missing.append("POSTGRES_HOST")
        if not db_port: missing.append("POSTGRES_PORT")
        if not db_name: missing.append("POSTGRES_DB")
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest.

    ``PYTEST_CURRENT_TEST`` is only set while a test runs, so engine creation
    at import time during collection is detected through ``sys.modules``.
    ``PYTEST_RUNNING=1`` forces the answer.
    """
    if os.getenv("PYTEST_RUNNING") == "1":
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True
    if "pytest" in sys.modules:
        return True
    return False


def resolve_database_url() -> str:
    """Pick the database URL.

    Order: REGISTRY_TEST_DB, TEST_DATABASE_URL, in-memory SQLite under pytest,
    then DATABASE_URL or the POSTGRES_* components.
    """
    explicit_test_db = os.getenv("REGISTRY_TEST_DB")
    if explicit_test_db:
        return explicit_test_db
    explicit_e2e_db = os.getenv("TEST_DATABASE_URL")
    if explicit_e2e_db:
        return explicit_e2e_db
    if _is_pytest_runtime():
        return SQLITE_MEMORY_URL
    return _get_database_url()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys = ON")
    finally:
        cursor.close()


def make_engine(url: str) -> Engine:
    """Create an engine for ``url``.

    SQLite engines share one connection for in-memory databases (so the schema
    persists across sessions) and enforce foreign keys.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
        eng = create_engine(url, **kwargs)
        event.listen(eng, "connect", _enable_sqlite_foreign_keys)
        return eng
    return create_engine(url, pool_pre_ping=True)


DATABASE_URL = resolve_database_url()

engine = make_engine(DATABASE_URL)
logger.debug(f"Registry database engine bound to {engine.url.render_as_string(hide_password=True)}")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_schema(bind=None) -> None:
    """Create all tables from model metadata.

    Used for SQLite test databases. PostgreSQL schemas come from the Alembic
    migrations, which also install the search vector trigger.
    """
    from registry.db import models  # local import to avoid circular import at module load

    models.Base.metadata.create_all(bind=bind or engine)


def drop_schema(bind=None) -> None:
    from registry.db import models

    models.Base.metadata.drop_all(bind=bind or engine)


def get_db():
    """Yield a database session and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
