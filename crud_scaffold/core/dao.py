# crud_scaffold/core/dao.py

"""
Generic data-access object.

A ``Dao`` wraps one entity type and turns the CRUD intents into SQLAlchemy
statements. Every operation returns a ``Result`` envelope; storage
exceptions are logged and converted to ``ErrorCode.DATABASE_ERROR`` and
never cross the Dao boundary.

Each call runs in its own transaction unless the caller passes a
``UnitOfWork``, in which case the call only flushes inside the caller's
transaction.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import (
    Any,
    Generator,
    Generic,
    List,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
)

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.orm import Session

from crud_scaffold.core.filters import (
    Equals,
    FilterLike,
    InvalidFilterError,
    OneOf,
    parse_filter,
    resolve_column,
    to_clause,
)
from crud_scaffold.core.log import Log
from crud_scaffold.core.result import CountedResult, ErrorCode, Result
from crud_scaffold.db.base import BaseEntity
from crud_scaffold.db.database import Database, UnitOfWork

EntityT = TypeVar("EntityT", bound=BaseEntity)

Identifier = Union[int, str]
Values = Union[Mapping[str, Any], BaseEntity]

ORDER_DIRECTIONS = ("ASC", "DESC")


class Dao(Generic[EntityT]):
    """
    CRUD access to a single entity type.

        user_dao = Dao.get_dao(database, User, "User", log)
        created = user_dao.create({"name": "Ada", "email": "ada@example.org"})
        page = user_dao.read_many(page=2, page_size=10, where={"status": [1, 2]})
    """

    id_field = "id"
    default_sort_field = "created_at"

    @classmethod
    def get_dao(
        cls,
        database: Database,
        entity: Type[EntityT],
        name: str,
        log: Optional[Log] = None,
    ) -> "Dao[EntityT]":
        return cls(database, entity, name, log)

    def __init__(
        self,
        database: Database,
        entity: Type[EntityT],
        name: str,
        log: Optional[Log] = None,
    ) -> None:
        self.database = database
        self.entity = entity
        self.entity_name = name
        self.log = log or Log("crud_scaffold.dao")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _tag(self, operation: str) -> str:
        return f"{self.entity_name}/{operation}"

    @contextmanager
    def _session(self, uow: Optional[UnitOfWork]) -> Generator[Session, None, None]:
        if uow is not None:
            yield uow.session
            return
        with self.database.unit_of_work() as own:
            yield own.session

    def _where(self, value: Union[Identifier, Sequence[Identifier], FilterLike]) -> Any:
        """Normalize an id, a list of ids, or a filter into a SQL clause."""
        if isinstance(value, (int, str)):
            expr = Equals(self.id_field, value)
        elif isinstance(value, (list, tuple)) and all(
            isinstance(item, (int, str)) for item in value
        ):
            expr = OneOf(self.id_field, value)
        else:
            expr = parse_filter(value)
        return to_clause(expr, self.entity)

    def _select(self) -> Any:
        # Rows already loaded in a caller's session are refreshed, not reused.
        return select(self.entity).execution_options(populate_existing=True)

    def _order_by(self, order: str, sort_field: str) -> List[Any]:
        direction = order.upper()
        if direction not in ORDER_DIRECTIONS:
            raise ValueError(f"Order must be one of {ORDER_DIRECTIONS}, got {order!r}")

        columns = [resolve_column(self.entity, sort_field)]
        if sort_field != self.id_field:
            # Stable pages when several rows share the sort value.
            columns.append(resolve_column(self.entity, self.id_field))

        if direction == "DESC":
            return [column.desc() for column in columns]
        return [column.asc() for column in columns]

    def _row(self, value: Values) -> Mapping[str, Any]:
        if isinstance(value, BaseEntity):
            mapper = value.__mapper__
            return {
                attr.key: getattr(value, attr.key)
                for attr in mapper.column_attrs
                if getattr(value, attr.key) is not None
            }
        return value

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def create(
        self,
        value: Union[Values, Sequence[Values]],
        uow: Optional[UnitOfWork] = None,
    ) -> Result[Identifier]:
        """
        Insert one record, or several in one statement.

        Returns ``CREATED`` with the identifier of the (first) new record.
        A failing batch reports the whole call as failed.
        """
        tag = self._tag("create")
        values = list(value) if isinstance(value, (list, tuple)) else [value]
        if not values:
            self.log.warn("Nothing to insert", tag)
            return Result.fail(ErrorCode.BAD_REQUEST, "Nothing to insert")

        try:
            rows = [self._row(item) for item in values]
            id_column = resolve_column(self.entity, self.id_field)
            with self._session(uow) as session:
                stmt = insert(self.entity).returning(id_column, sort_by_parameter_order=True)
                identifiers = session.scalars(stmt, rows).all()
        except Exception as exc:
            self.log.error(f"Error in inserting {self.entity_name}", tag, error=exc)
            return Result.fail(ErrorCode.DATABASE_ERROR, "Error in insert")

        for item, identifier in zip(values, identifiers):
            if isinstance(item, BaseEntity):
                setattr(item, self.id_field, identifier)

        self.log.info("Successfully created", tag, count=len(identifiers))
        return Result.ok(
            identifiers[0],
            message="Success in insert",
            code=ErrorCode.CREATED,
        )

    def update(
        self,
        id: Union[Identifier, FilterLike],
        values: Mapping[str, Any],
        uow: Optional[UnitOfWork] = None,
    ) -> Result[int]:
        """
        Apply a partial update to every record matching ``id`` (an
        identifier or a filter). Returns the number of affected rows.
        """
        tag = self._tag("update")
        patch = dict(values)
        if not patch:
            self.log.warn("Nothing to update", tag, id=id)
            return Result.fail(ErrorCode.BAD_REQUEST, "Nothing to update")

        try:
            where = self._where(id)
            for field in patch:
                resolve_column(self.entity, field)
        except (InvalidFilterError, TypeError) as exc:
            self.log.warn("Invalid update", tag, id=id, reason=str(exc))
            return Result.fail(ErrorCode.BAD_REQUEST, str(exc))

        try:
            with self._session(uow) as session:
                stmt = (
                    update(self.entity)
                    .where(where)
                    .values(**patch)
                    .execution_options(synchronize_session=False)
                )
                affected = session.execute(stmt).rowcount
        except Exception as exc:
            self.log.error("Error in updating", tag, error=exc, id=id, values=patch)
            return Result.fail(ErrorCode.DATABASE_ERROR, "Error in updating")

        if not affected:
            self.log.debug("Update not found", tag, id=id)
            return Result.fail(ErrorCode.NOT_FOUND, "Not found")

        self.log.debug("Successfully updated", tag, id=id, affected=affected)
        return Result.ok(affected, message="Success in update")

    def delete(
        self,
        id: Union[Identifier, Sequence[Identifier], FilterLike],
        uow: Optional[UnitOfWork] = None,
    ) -> Result[int]:
        """
        Delete the records matching an identifier, a list of identifiers or
        a filter. A delete that matches nothing reports ``NOT_FOUND`` with 0.
        """
        tag = self._tag("delete")
        try:
            where = self._where(id)
        except (InvalidFilterError, TypeError) as exc:
            self.log.warn("Invalid delete", tag, id=id, reason=str(exc))
            return Result.fail(ErrorCode.BAD_REQUEST, str(exc))

        try:
            with self._session(uow) as session:
                stmt = (
                    delete(self.entity)
                    .where(where)
                    .execution_options(synchronize_session=False)
                )
                affected = session.execute(stmt).rowcount
        except Exception as exc:
            self.log.error("Error in deleting", tag, error=exc, id=id)
            return Result.fail(ErrorCode.DATABASE_ERROR, "Error in deleting")

        if not affected:
            self.log.debug("Delete not found", tag, id=id)
            return Result.fail(ErrorCode.NOT_FOUND, "Not found", result=0)

        self.log.debug("Successfully deleted", tag, id=id, affected=affected)
        return Result.ok(affected, message="Success in delete")

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def read(
        self,
        value: Union[Identifier, FilterLike],
        uow: Optional[UnitOfWork] = None,
    ) -> Result[EntityT]:
        """
        Read a single record by identifier or by filter.

        Only the first match is returned; several matches are not an error.
        """
        tag = self._tag("read")
        try:
            where = self._where(value)
        except (InvalidFilterError, TypeError) as exc:
            self.log.warn("Invalid read", tag, id=value, reason=str(exc))
            return Result.fail(ErrorCode.BAD_REQUEST, str(exc))

        try:
            with self._session(uow) as session:
                stmt = self._select().where(where).limit(1)
                entity = session.scalars(stmt).first()
        except Exception as exc:
            self.log.error("Error in reading", tag, error=exc, id=value)
            return Result.fail(ErrorCode.DATABASE_ERROR, "Error in reading")

        if entity is None:
            self.log.debug("Find not found", tag, id=value)
            return Result.fail(ErrorCode.NOT_FOUND, "Not found")

        self.log.debug("Successfully found", tag, id=value)
        return Result.ok(entity, message="Success in read")

    def read_many(
        self,
        page: int = 1,
        page_size: int = 10,
        order: str = "DESC",
        sort_field: Optional[str] = None,
        where: Optional[FilterLike] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> CountedResult[List[EntityT]]:
        """
        Read one page of records plus the total number of matching rows.

        Pages are 1-indexed. The page and the count are fetched with two
        separate statements, so they may observe different snapshots when
        writes interleave. An empty page is a success.
        """
        tag = self._tag("readMany")
        sort_field = sort_field or self.default_sort_field
        try:
            if page < 1 or page_size < 1:
                raise ValueError("page and page_size must be positive")
            order_by = self._order_by(order, sort_field)
            clause = self._where(where) if where is not None else None
        except (ValueError, TypeError) as exc:
            self.log.warn("Invalid readMany", tag, page=page, page_size=page_size, reason=str(exc))
            return CountedResult.fail(ErrorCode.BAD_REQUEST, str(exc))

        try:
            with self._session(uow) as session:
                stmt = self._select().order_by(*order_by)
                count_stmt = select(func.count()).select_from(self.entity)
                if clause is not None:
                    stmt = stmt.where(clause)
                    count_stmt = count_stmt.where(clause)
                stmt = stmt.offset((page - 1) * page_size).limit(page_size)

                entities = list(session.scalars(stmt).all())
                total = session.scalar(count_stmt)
        except Exception as exc:
            self.log.error(
                "Error in reading",
                tag,
                error=exc,
                page=page,
                page_size=page_size,
                order=order,
                sort_field=sort_field,
            )
            return CountedResult.fail(ErrorCode.DATABASE_ERROR, "Error in reading")

        self.log.debug(
            "Successfully found",
            tag,
            page=page,
            page_size=page_size,
            order=order,
            sort_field=sort_field,
        )
        return CountedResult.ok(entities, message="Success in readMany", count=total)

    def read_many_without_pagination(
        self,
        order: str = "DESC",
        sort_field: Optional[str] = None,
        where: Optional[FilterLike] = None,
        uow: Optional[UnitOfWork] = None,
    ) -> Result[List[EntityT]]:
        """
        Read every matching record. An empty result is a success, as for
        ``read_many``.
        """
        tag = self._tag("readManyWithoutPagination")
        sort_field = sort_field or self.default_sort_field
        try:
            order_by = self._order_by(order, sort_field)
            clause = self._where(where) if where is not None else None
        except (ValueError, TypeError) as exc:
            self.log.warn("Invalid readManyWithoutPagination", tag, reason=str(exc))
            return Result.fail(ErrorCode.BAD_REQUEST, str(exc))

        try:
            with self._session(uow) as session:
                stmt = self._select().order_by(*order_by)
                if clause is not None:
                    stmt = stmt.where(clause)
                entities = list(session.scalars(stmt).all())
        except Exception as exc:
            self.log.error("Error in reading", tag, error=exc, order=order, sort_field=sort_field)
            return Result.fail(ErrorCode.DATABASE_ERROR, "Error in reading")

        self.log.debug(
            "Successfully found",
            tag,
            order=order,
            sort_field=sort_field,
            count=len(entities),
        )
        return Result.ok(entities, message="Success in readMany")


__all__ = ["Dao", "EntityT", "Identifier", "ORDER_DIRECTIONS"]
