"""
Module repository functions.

Implements module CRUD, the metadata upsert used on publish, version
publication (`add_version`), full-text search ranked by featured flag and
downloads, and the featured quickstart listing.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from registry.db import models, schemas
from registry.db.errors import UniqueConstraintViolation, require, storage_errors

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\w+", re.UNICODE)


def create_module(db: Session, module: schemas.ModuleCreate) -> models.Module:
    db_module = models.Module(
        author=module.author,
        name=module.name,
        description=module.description,
        latest=module.latest,
    )
    with storage_errors(db, f"create module {module.author}/{module.name}"):
        db.add(db_module)
        db.commit()
        db.refresh(db_module)
    logger.info(f"Module {db_module.author}/{db_module.name} created with id {db_module.id}")
    return db_module


def find_module_opt(db: Session, author: str, name: str) -> Optional[models.Module]:
    with storage_errors(db, f"find module {author}/{name}"):
        return (
            db.query(models.Module)
            .filter(models.Module.author == author, models.Module.name == name)
            .first()
        )


def find_module(db: Session, author: str, name: str) -> models.Module:
    return require(find_module_opt(db, author, name), "Module", f"{author}/{name}")


def update_or_create_module(db: Session, author: str, name: str, description: str) -> models.Module:
    """Publish module metadata.

    Updates only the description of an existing (author, name) row, or creates
    the module with no latest version. ``author`` and ``name`` are stored as
    given, exactly as ``find_module`` matches them. A concurrent first publish
    of the same key is absorbed: the losing insert falls back to updating the
    winner's row.
    """
    existing = find_module_opt(db, author, name)
    if existing is None:
        db_module = models.Module(author=author, name=name, description=description, latest=None)
        try:
            with storage_errors(db, f"create module {author}/{name}"):
                db.add(db_module)
                db.commit()
                db.refresh(db_module)
        except UniqueConstraintViolation:
            logger.info(f"Module {author}/{name} was created concurrently; updating it instead")
            existing = find_module(db, author, name)
        else:
            logger.info(f"Module {author}/{name} created with id {db_module.id}")
            return db_module
    with storage_errors(db, f"update module {author}/{name}"):
        existing.description = description
        db.commit()
        db.refresh(existing)
    return existing


def get_module_opt(db: Session, module_id: int) -> Optional[models.Module]:
    with storage_errors(db, f"get module {module_id}"):
        return db.get(models.Module, module_id)


def get_module(db: Session, module_id: int) -> models.Module:
    return require(get_module_opt(db, module_id), "Module", module_id)


def list_modules_by_author(db: Session, author: str) -> List[models.Module]:
    with storage_errors(db, f"list modules of {author}"):
        return (
            db.query(models.Module)
            .filter(models.Module.author == author)
            .order_by(models.Module.name.asc())
            .all()
        )


def set_module_featured(db: Session, module_id: int, featured: bool) -> models.Module:
    db_module = get_module(db, module_id)
    with storage_errors(db, f"set featured on module {module_id}"):
        db_module.featured = featured
        db.commit()
        db.refresh(db_module)
    logger.info(f"Module {db_module.author}/{db_module.name} featured={featured}")
    return db_module


def delete_module(db: Session, module_id: int) -> int:
    """Delete a module and its releases; returns the number of modules removed."""
    with storage_errors(db, f"delete module {module_id}"):
        db.query(models.Release).filter(
            models.Release.module_id == module_id
        ).delete(synchronize_session="fetch")
        deleted = (
            db.query(models.Module)
            .filter(models.Module.id == module_id)
            .delete(synchronize_session="fetch")
        )
        db.commit()
    if deleted:
        logger.info(f"Module {module_id} deleted")
    return deleted


def add_version(db: Session, module: models.Module, version: str, code: str) -> models.Release:
    """Publish ``version`` of ``module`` and point ``module.latest`` at it.

    Both writes share one transaction. The release insert is flushed first so a
    duplicate version fails before ``latest`` is touched, and any failure rolls
    the whole unit back. ``version`` is stored verbatim, so ``find_release``
    must be given the same string.

    Raises:
        UniqueConstraintViolation: The module already has this version.
        StorageError: Any other database failure.
    """
    module_id = module.id
    release = models.Release(module_id=module_id, version=version, code=code)
    with storage_errors(db, f"add version {version} to module {module_id}"):
        db.add(release)
        db.flush()
        db.query(models.Module).filter(models.Module.id == module_id).update(
            {models.Module.latest: version}, synchronize_session="evaluate"
        )
        db.commit()
        db.refresh(release)
    logger.info(f"Module {module_id} published version {version} (release {release.id})")
    return release


def _query_terms(query: str) -> List[str]:
    return _WORD_RE.findall((query or "").lower())


def _fallback_match(terms: List[str]):
    """Every term must appear in the name or description (case-insensitive)."""
    return and_(*[
        or_(
            func.lower(models.Module.name).contains(term, autoescape=True),
            func.lower(models.Module.description).contains(term, autoescape=True),
        )
        for term in terms
    ])


def search_modules(db: Session, query: str) -> List[Tuple[models.Module, int]]:
    """Full-text search over module name and description.

    On PostgreSQL the query is parsed with ``plainto_tsquery`` (lower-cased,
    stemmed, all words required) and matched against the trigger-maintained
    ``search_vector``. Other dialects fall back to a substring match requiring
    every word. Results carry the module's total downloads across releases
    (zero without releases) and are ordered featured first, then by downloads.
    """
    dialect_name = getattr(db.bind.dialect, 'name', '') if getattr(db, 'bind', None) else ''

    if dialect_name == 'postgresql':
        ts_query = func.plainto_tsquery(models.SEARCH_CONFIG, query)
        match = models.Module.search_vector.op('@@')(ts_query)
    else:
        terms = _query_terms(query)
        if not terms:
            # plainto_tsquery of an empty string matches nothing either
            return []
        logger.debug(f"Dialect {dialect_name} has no full-text search; using substring match")
        match = _fallback_match(terms)

    downloads = func.coalesce(func.sum(models.Release.downloads), 0).label('downloads')

    with storage_errors(db, "search modules"):
        rows = (
            db.query(models.Module, downloads)
            .outerjoin(models.Release, models.Release.module_id == models.Module.id)
            .filter(match)
            .group_by(models.Module.id)
            .order_by(
                models.Module.featured.desc(),
                downloads.desc(),
                models.Module.author.asc(),
                models.Module.name.asc(),
            )
            .all()
        )

    logger.info(f"Module search for '{query}' returned {len(rows)} results")
    return [(module, int(total or 0)) for module, total in rows]


def quickstart_modules(db: Session) -> List[models.Module]:
    """Featured modules ordered by author then name."""
    with storage_errors(db, "list quickstart modules"):
        return (
            db.query(models.Module)
            .filter(models.Module.featured.is_(True))
            .order_by(models.Module.author.asc(), models.Module.name.asc())
            .all()
        )
