# crud_scaffold/core/service.py

from __future__ import annotations

from typing import Any, Generic, List, Mapping, Optional, Sequence, Union

from crud_scaffold.core.dao import Dao, EntityT, Identifier
from crud_scaffold.core.filters import FilterLike
from crud_scaffold.core.result import CountedResult, Result
from crud_scaffold.db.database import UnitOfWork


class Service(Generic[EntityT]):
    """
    Application-level service on top of a ``Dao``.

    The generic implementation forwards every call and returns the Dao's
    envelope unchanged; subclasses add business rules around it.
    """

    def __init__(self, dao: Dao[EntityT]) -> None:
        self.dao = dao

    @property
    def entity_name(self) -> str:
        return self.dao.entity_name

    def create(
        self,
        value: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
        uow: Optional[UnitOfWork] = None,
    ) -> Result[Identifier]:
        return self.dao.create(value, uow=uow)

    def read(
        self,
        value: Union[Identifier, FilterLike],
        uow: Optional[UnitOfWork] = None,
    ) -> Result[EntityT]:
        return self.dao.read(value, uow=uow)

    def update(
        self,
        id: Union[Identifier, FilterLike],
        values: Mapping[str, Any],
        uow: Optional[UnitOfWork] = None,
    ) -> Result[int]:
        return self.dao.update(id, values, uow=uow)

    def read_many(
        self,
        page: int = 1,
        page_size: int = 10,
        order: str = "DESC",
        sort_field: Optional[str] = None,
        where: Optional[FilterLike] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> CountedResult[List[EntityT]]:
        return self.dao.read_many(
            page=page,
            page_size=page_size,
            order=order,
            sort_field=sort_field,
            where=where,
            uow=uow,
        )

    def read_many_without_pagination(
        self,
        order: str = "DESC",
        sort_field: Optional[str] = None,
        where: Optional[FilterLike] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> Result[List[EntityT]]:
        return self.dao.read_many_without_pagination(
            order=order,
            sort_field=sort_field,
            where=where,
            uow=uow,
        )

    def delete(
        self,
        id: Union[Identifier, Sequence[Identifier], FilterLike],
        uow: Optional[UnitOfWork] = None,
    ) -> Result[int]:
        return self.dao.delete(id, uow=uow)


__all__ = ["Service"]
