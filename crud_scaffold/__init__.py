"""
crud_scaffold
-------------

Generic CRUD scaffold on FastAPI and SQLAlchemy: a result-producing ``Dao``,
a ``Service`` / ``ServiceController`` pair mapping it onto HTTP routes, and
an example ``User`` module wiring them together.

The ASGI application lives in ``crud_scaffold.main`` (``crud_scaffold.main:app``).
"""

from importlib import metadata as _metadata

try:
    __version__: str = _metadata.version("crud-scaffold")
except _metadata.PackageNotFoundError:  # When running from source tree
    __version__ = "0.0.0"

__all__ = ["__version__"]
