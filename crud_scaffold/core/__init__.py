"""
crud_scaffold.core
------------------

Generic building blocks: result envelope, filter expressions, logging,
``Dao``, ``Service``, ``ServiceController`` and ``Application``.

Import them from their modules, e.g.:

    from crud_scaffold.core.dao import Dao
    from crud_scaffold.core.result import ErrorCode, Result
"""
