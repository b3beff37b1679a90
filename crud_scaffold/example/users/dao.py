# crud_scaffold/example/users/dao.py

from __future__ import annotations

from typing import Optional

from crud_scaffold.core.dao import Dao
from crud_scaffold.core.log import Log
from crud_scaffold.core.result import Result
from crud_scaffold.db.database import Database, UnitOfWork

from .entity import User


class UserDao(Dao[User]):
    def __init__(self, database: Database, log: Optional[Log] = None) -> None:
        super().__init__(database, User, "User", log)

    def read_by_email(self, email: str, uow: Optional[UnitOfWork] = None) -> Result[User]:
        return self.read({"email": email.strip().lower()}, uow=uow)
