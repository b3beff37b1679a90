# crud_scaffold/example/users/service.py

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Union

from crud_scaffold.core.dao import Identifier
from crud_scaffold.core.result import ErrorCode, Result
from crud_scaffold.core.service import Service
from crud_scaffold.db.database import UnitOfWork

from .dao import UserDao
from .entity import User, UserStatus


def _normalize(value: Mapping[str, Any]) -> dict:
    data = dict(value)
    if isinstance(data.get("email"), str):
        data["email"] = data["email"].strip().lower()
    return data


class UserService(Service[User]):
    """
    User operations. Emails are stored lower-cased so lookups by email
    are case-insensitive.
    """

    dao: UserDao

    def __init__(self, dao: UserDao) -> None:
        super().__init__(dao)

    def create(
        self,
        value: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
        uow: Optional[UnitOfWork] = None,
    ) -> Result[Identifier]:
        if isinstance(value, Mapping):
            return super().create(_normalize(value), uow=uow)
        return super().create([_normalize(item) for item in value], uow=uow)

    def update(
        self,
        id: Any,
        values: Mapping[str, Any],
        uow: Optional[UnitOfWork] = None,
    ) -> Result[int]:
        return super().update(id, _normalize(values), uow=uow)

    def read_by_email(self, email: str) -> Result[User]:
        return self.dao.read_by_email(email)

    def disable(self, ids: Sequence[int], uow: Optional[UnitOfWork] = None) -> Result[int]:
        """Mark the given users as disabled; returns how many were changed."""
        if not ids:
            return Result.fail(ErrorCode.BAD_REQUEST, "No users given")
        return self.dao.update({"id": list(ids)}, {"status": UserStatus.DISABLED}, uow=uow)
