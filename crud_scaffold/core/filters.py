# crud_scaffold/core/filters.py

"""
Filter expressions for Dao queries.

Callers can build expressions explicitly::

    Or((Equals("status", 1), OneOf("name", ("ada", "alan"))))

or hand a plain mapping (e.g. parsed query parameters) to ``parse_filter``,
which rewrites list values into ``OneOf`` and a list of mappings into ``Or``.
Expressions are compiled against an entity with ``to_clause``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, Tuple, Type, Union

from sqlalchemy import and_, false, inspect, or_, true
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.elements import ColumnElement


class InvalidFilterError(ValueError):
    """Raised when a filter or sort references a field the entity does not map."""

    def __init__(self, field: str, entity_name: str) -> None:
        super().__init__(f"Unknown field '{field}' for entity '{entity_name}'.")
        self.field = field
        self.entity_name = entity_name


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class OneOf:
    field: str
    values: Tuple[Any, ...]

    def __post_init__(self) -> None:
        # Accept any iterable, store a hashable tuple.
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class And:
    clauses: Tuple["Filter", ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "clauses", tuple(self.clauses))


@dataclass(frozen=True)
class Or:
    clauses: Tuple["Filter", ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "clauses", tuple(self.clauses))


Filter = Union[Equals, OneOf, And, Or]

# Input accepted wherever a filter is expected.
FilterLike = Union[Filter, Mapping[str, Any], Sequence[Mapping[str, Any]]]

_FILTER_TYPES = (Equals, OneOf, And, Or)
_SET_TYPES = (list, tuple, set, frozenset)


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


def _parse_mapping(where: Mapping[str, Any]) -> Filter:
    conditions = []
    for field, value in where.items():
        if isinstance(value, _FILTER_TYPES):
            conditions.append(value)
        elif isinstance(value, _SET_TYPES):
            conditions.append(OneOf(field, value))
        else:
            conditions.append(Equals(field, value))

    if len(conditions) == 1:
        return conditions[0]
    return And(conditions)


def parse_filter(where: FilterLike) -> Filter:
    """
    Normalize dynamic filter input into a filter expression.

    - an expression is returned unchanged
    - a mapping becomes an ``And`` of its fields; list/tuple/set values
      become ``OneOf`` ("value is one of"), everything else ``Equals``
    - a list of mappings becomes an ``Or`` of each parsed element
    """
    if isinstance(where, _FILTER_TYPES):
        return where
    if isinstance(where, Mapping):
        return _parse_mapping(where)
    if isinstance(where, (list, tuple)):
        return Or([parse_filter(item) for item in where])

    raise TypeError(f"Unsupported filter type: {type(where).__name__}")


# ---------------------------------------------------------------------------
# Compiling
# ---------------------------------------------------------------------------


def resolve_column(entity: Type[Any], field: str) -> InstrumentedAttribute:
    """
    Return the mapped column attribute ``entity.<field>``.

    Only column attributes qualify; relationships and plain Python
    attributes raise ``InvalidFilterError``.
    """
    if field not in inspect(entity).column_attrs:
        raise InvalidFilterError(field, entity.__name__)
    return getattr(entity, field)


def _compile_all(clauses: Iterable[Filter], entity: Type[Any]) -> list:
    return [to_clause(clause, entity) for clause in clauses]


def to_clause(expr: Filter, entity: Type[Any]) -> ColumnElement[bool]:
    """Compile a filter expression into a SQLAlchemy boolean clause."""
    if isinstance(expr, Equals):
        column = resolve_column(entity, expr.field)
        if expr.value is None:
            return column.is_(None)
        return column == expr.value

    if isinstance(expr, OneOf):
        return resolve_column(entity, expr.field).in_(expr.values)

    if isinstance(expr, And):
        if not expr.clauses:
            return true()
        return and_(*_compile_all(expr.clauses, entity))

    if isinstance(expr, Or):
        if not expr.clauses:
            return false()
        return or_(*_compile_all(expr.clauses, entity))

    raise TypeError(f"Unsupported filter expression: {type(expr).__name__}")


__all__ = [
    "InvalidFilterError",
    "Equals",
    "OneOf",
    "And",
    "Or",
    "Filter",
    "FilterLike",
    "parse_filter",
    "resolve_column",
    "to_clause",
]
