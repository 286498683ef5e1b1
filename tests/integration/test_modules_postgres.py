from concurrent.futures import ThreadPoolExecutor

import pytest

from registry.db.repositories import modules as repo_modules

pytestmark = pytest.mark.integration


@pytest.mark.slow
def test_concurrent_first_publishes_share_one_row(pg_db, pg_session_factory):
    publishers = 16

    def _publish(i):
        session = pg_session_factory()
        try:
            return repo_modules.update_or_create_module(session, "alice", "ctlogs", f"rev {i}").id
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(pool.map(_publish, range(publishers)))

    assert len(set(ids)) == 1
    assert [m.id for m in repo_modules.list_modules_by_author(pg_db, "alice")] == ids[:1]
