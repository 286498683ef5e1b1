from concurrent.futures import ThreadPoolExecutor

import pytest

from registry.db import schemas
from registry.db.errors import UniqueConstraintViolation
from registry.db.repositories import modules as repo_modules
from registry.db.repositories import releases as repo_releases

pytestmark = pytest.mark.integration


@pytest.fixture
def module(pg_db):
    return repo_modules.create_module(
        pg_db, schemas.ModuleCreate(author="alice", name="ctlogs", description="CT log scanner")
    )


@pytest.mark.slow
def test_concurrent_bumps_are_not_lost(pg_db, pg_session_factory, module):
    release = repo_modules.add_version(pg_db, module, "1.0.0", "code")
    release_id = release.id
    bumps = 40

    def _bump(_):
        session = pg_session_factory()
        try:
            repo_releases.bump_downloads(session, release_id)
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(_bump, range(bumps)))

    pg_db.expire_all()
    assert repo_releases.get_release(pg_db, release_id).downloads == bumps


def test_duplicate_version_rolls_back_add_version(pg_db, module):
    repo_modules.add_version(pg_db, module, "1.0.0", "v1")
    repo_modules.add_version(pg_db, module, "1.0.1", "v2")

    with pytest.raises(UniqueConstraintViolation):
        repo_modules.add_version(pg_db, module, "1.0.0", "again")

    assert repo_modules.get_module(pg_db, module.id).latest == "1.0.1"
    assert len(repo_releases.list_releases(pg_db, module.id)) == 2


def test_published_is_set_by_database_and_orders_latest(pg_db, module):
    first = repo_modules.add_version(pg_db, module, "1.0.0", "v1")
    second = repo_modules.add_version(pg_db, module, "1.0.1", "v2")

    assert first.published.tzinfo is not None
    assert second.published >= first.published
    assert repo_releases.latest_release(pg_db).id == second.id


def test_delete_module_removes_releases(pg_db, module):
    release = repo_modules.add_version(pg_db, module, "1.0.0", "v1")
    release_id = release.id

    repo_modules.delete_module(pg_db, module.id)
    assert repo_releases.get_release_opt(pg_db, release_id) is None
