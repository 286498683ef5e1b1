"""
Per-entity repository modules for database access.

Each module exposes plain functions taking a SQLAlchemy ``Session`` first.
Lookups come in two shapes: ``*_opt`` returns ``None`` when absent, the plain
form raises ``registry.db.errors.NotFound``.
"""
