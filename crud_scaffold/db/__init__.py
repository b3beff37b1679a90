"""
crud_scaffold.db
================

Database primitives, importable from a single place:

    from crud_scaffold.db import BaseEntity, Database, UnitOfWork
"""

from .base import Base, BaseEntity
from .database import Database, UnitOfWork

__all__ = [
    "Base",
    "BaseEntity",
    "Database",
    "UnitOfWork",
]
