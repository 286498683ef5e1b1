"""
Shared SQLAlchemy base.
"""
from sqlalchemy.orm import declarative_base

# Import SQLite compilation shims for PostgreSQL-only types when running tests
# under SQLite.
from .. import sqlite_compiler_shims  # noqa: F401


Base = declarative_base()
