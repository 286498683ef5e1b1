import pytest
from alembic import command
from sqlalchemy import inspect

from tests.integration.conftest import make_alembic_config


@pytest.mark.integration
@pytest.mark.slow
def test_alembic_downgrade_and_upgrade_cycle(pg_engine, pg_url):
    """Migrations cleanly downgrade to base and upgrade back to head."""
    cfg = make_alembic_config(pg_url)

    command.downgrade(cfg, "base")
    assert "modules" not in inspect(pg_engine).get_table_names()

    command.upgrade(cfg, "head")
    tables = set(inspect(pg_engine).get_table_names())
    assert {"auth_tokens", "modules", "releases"} <= tables
