"""
Domain-split SQLAlchemy models with a compatibility aggregator.

Exposes `Base` and all ORM classes from a single import path.
"""

from .base import Base  # re-export

from .auth_tokens import AuthToken
from .modules import Module, SEARCH_CONFIG
from .releases import Release

__all__ = [
    "Base",
    "AuthToken",
    "Module",
    "SEARCH_CONFIG",
    "Release",
]
