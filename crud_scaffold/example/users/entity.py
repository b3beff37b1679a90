# crud_scaffold/example/users/entity.py

from __future__ import annotations

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from crud_scaffold.db.base import BaseEntity


class UserStatus:
    ACTIVE = 1
    INVITED = 2
    DISABLED = 3


class User(BaseEntity):
    """
    Example entity wired through the generic Dao / Service / Controller.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    status: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=UserStatus.ACTIVE,
        index=True,
    )
    bio: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r}, status={self.status!r})"
