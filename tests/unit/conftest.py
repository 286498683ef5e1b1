import pytest
from sqlalchemy.orm import sessionmaker

from registry.db import models, schemas
from registry.db.database import SQLITE_MEMORY_URL, create_schema, drop_schema, make_engine


@pytest.fixture
def engine():
    eng = make_engine(SQLITE_MEMORY_URL)
    create_schema(eng)
    try:
        yield eng
    finally:
        drop_schema(eng)
        eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def module_factory(db):
    from registry.db.repositories import modules as repo_modules

    def _create(author: str, name: str, description: str = "", featured: bool = False):
        module = repo_modules.create_module(
            db, schemas.ModuleCreate(author=author, name=name, description=description)
        )
        if featured:
            module = repo_modules.set_module_featured(db, module.id, True)
        return module
    return _create


@pytest.fixture
def set_downloads(db):
    """Force a release's counter for ranking fixtures."""
    def _set(release_id: int, downloads: int):
        db.query(models.Release).filter(models.Release.id == release_id).update(
            {models.Release.downloads: downloads}, synchronize_session=False
        )
        db.commit()
    return _set
