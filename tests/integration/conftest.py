"""PostgreSQL fixtures: one testcontainers instance per session, schema from Alembic."""
import os
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def make_alembic_config(database_url: str) -> Config:
    """Return an Alembic config pointing at the project migrations."""
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    cfg.attributes["database_url"] = database_url
    return cfg


@pytest.fixture(scope="session")
def pg_url():
    if os.getenv("SKIP_DOCKER_TESTS") == "1":
        pytest.skip("SKIP_DOCKER_TESTS=1")
    postgres = pytest.importorskip("testcontainers.postgres")

    image = os.getenv("TEST_POSTGRES_IMAGE", "postgres:16-alpine")
    container = postgres.PostgresContainer(image)
    try:
        container.start()
    except Exception as e:
        # Docker missing or unreachable
        pytest.skip(f"Could not start Postgres test container: {e}")
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


@pytest.fixture(scope="session")
def pg_engine(pg_url):
    command.upgrade(make_alembic_config(pg_url), "head")
    eng = create_engine(pg_url, future=True)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture(scope="session")
def pg_session_factory(pg_engine):
    return sessionmaker(bind=pg_engine, autoflush=False, autocommit=False)


@pytest.fixture
def pg_db(pg_engine, pg_session_factory):
    session = pg_session_factory()
    try:
        yield session
    finally:
        session.close()
        # Tests commit (and spawn threads), so clean up by truncation
        with pg_engine.begin() as conn:
            conn.execute(text("TRUNCATE releases, modules, auth_tokens RESTART IDENTITY CASCADE"))
