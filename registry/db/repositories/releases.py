"""
Release repository functions.

Implements release CRUD, lookups by (module_id, version), the atomic download
counter and the store-wide latest release.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from registry.db import models, schemas
from registry.db.errors import require, storage_errors

logger = logging.getLogger(__name__)


def create_release(db: Session, release: schemas.ReleaseCreate) -> models.Release:
    db_release = models.Release(
        module_id=release.module_id,
        version=release.version,
        code=release.code,
    )
    with storage_errors(db, f"create release {release.version} of module {release.module_id}"):
        db.add(db_release)
        db.commit()
        db.refresh(db_release)
    logger.info(f"Release {db_release.id} ({db_release.version}) created for module {db_release.module_id}")
    return db_release


def try_find_release(db: Session, module_id: int, version: str) -> Optional[models.Release]:
    with storage_errors(db, f"find release {version} of module {module_id}"):
        return (
            db.query(models.Release)
            .filter(models.Release.module_id == module_id, models.Release.version == version)
            .first()
        )


def find_release(db: Session, module_id: int, version: str) -> models.Release:
    return require(try_find_release(db, module_id, version), "Release", f"{module_id}@{version}")


def get_release_opt(db: Session, release_id: int) -> Optional[models.Release]:
    with storage_errors(db, f"get release {release_id}"):
        return db.get(models.Release, release_id)


def get_release(db: Session, release_id: int) -> models.Release:
    return require(get_release_opt(db, release_id), "Release", release_id)


def list_releases(db: Session, module_id: int) -> List[models.Release]:
    """Releases of one module, newest first."""
    with storage_errors(db, f"list releases of module {module_id}"):
        return (
            db.query(models.Release)
            .filter(models.Release.module_id == module_id)
            .order_by(models.Release.published.desc(), models.Release.id.desc())
            .all()
        )


def delete_release(db: Session, release_id: int) -> int:
    with storage_errors(db, f"delete release {release_id}"):
        deleted = (
            db.query(models.Release)
            .filter(models.Release.id == release_id)
            .delete(synchronize_session="fetch")
        )
        db.commit()
    if deleted:
        logger.info(f"Release {release_id} deleted")
    return deleted


def bump_downloads(db: Session, release_id: int) -> None:
    """Increment the download counter by one in a single UPDATE.

    The new value is computed by the database (``downloads = downloads + 1``)
    so concurrent bumps never lose updates.
    """
    with storage_errors(db, f"bump downloads of release {release_id}"):
        db.query(models.Release).filter(models.Release.id == release_id).update(
            {models.Release.downloads: models.Release.downloads + 1},
            synchronize_session=False,
        )
        db.commit()


def latest_release(db: Session) -> Optional[models.Release]:
    """Most recently published release across all modules, if any."""
    with storage_errors(db, "get latest release"):
        return (
            db.query(models.Release)
            .order_by(models.Release.published.desc(), models.Release.id.desc())
            .first()
        )
