"""
Module registry persistence layer.

Stores authentication tokens, modules and their releases, and exposes the
per-entity repository functions in `registry.db.repositories`.
"""

__version__ = "0.1.0"
