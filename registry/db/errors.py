"""
Error taxonomy for the registry stores.

Repositories surface every storage fault as one of these kinds:

- ``NotFound``: a key lookup found no row (the ``_opt`` lookups return ``None``
  instead).
- ``UniqueConstraintViolation``: an insert or update broke a uniqueness
  invariant such as (author, name) or (module_id, version).
- ``StorageError``: anything else raised by SQLAlchemy or the driver.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")

# SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


class RegistryError(Exception):
    """Base exception for all registry storage errors."""

    pass


class NotFound(RegistryError):
    """A lookup by key matched no row."""

    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class UniqueConstraintViolation(RegistryError):
    """An insert or update violated a uniqueness constraint."""

    pass


class StorageError(RegistryError):
    """Database operation failed."""

    pass


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True when an IntegrityError comes from a unique/primary key constraint."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return code == UNIQUE_VIOLATION
    # SQLite reports "UNIQUE constraint failed: table.column"
    return "unique constraint" in str(orig).lower()


def require(value: Optional[T], entity: str, key: Any) -> T:
    """Turn an absent lookup result into NotFound."""
    if value is None:
        logger.debug(f"{entity} lookup missed for {key}")
        raise NotFound(entity, key)
    return value


@contextmanager
def storage_errors(db: Session, action: str) -> Iterator[None]:
    """Translate SQLAlchemy failures raised inside the block.

    The session is rolled back before re-raising so it stays usable.

    Raises:
        UniqueConstraintViolation: For unique/primary key violations.
        StorageError: For any other SQLAlchemy error.
    """
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            logger.warning(f"Unique constraint violated during {action}: {e.orig}")
            raise UniqueConstraintViolation(f"{action}: {e.orig}") from e
        logger.error(f"Integrity error during {action}: {e.orig}")
        raise StorageError(f"{action} failed: {e.orig}") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Storage failure during {action}: {e}")
        raise StorageError(f"{action} failed: {e}") from e
