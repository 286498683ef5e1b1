"""
Domain-split Pydantic schemas with a compatibility aggregator.

Re-exports the input and response models for all registry entities.
"""

from .auth_tokens import AuthTokenCreate, AuthToken
from .modules import ModuleBase, ModuleCreate, Module, ModuleSearchResult
from .releases import ReleaseCreate, Release

__all__ = [
    "AuthTokenCreate",
    "AuthToken",
    "ModuleBase",
    "ModuleCreate",
    "Module",
    "ModuleSearchResult",
    "ReleaseCreate",
    "Release",
]
