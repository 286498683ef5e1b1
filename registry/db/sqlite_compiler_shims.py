"""SQLite compilation shims for PostgreSQL-specific SQLAlchemy types.

Installs a compiler for TSVECTOR when the active dialect is SQLite so that
`Base.metadata.create_all()` succeeds on the in-memory database used by unit
tests. No attempt is made to emulate full-text search; the module search
falls back to substring matching on non-PostgreSQL dialects.

Usage: Imported for side-effects by registry.db.models.
"""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.ext.compiler import compiles


@compiles(TSVECTOR, "sqlite")
def _compile_tsvector_sqlite(element, compiler, **kw):  # pragma: no cover - trivial
    # Stored as TEXT and left NULL; no trigger maintains it on SQLite.
    return "TEXT"
