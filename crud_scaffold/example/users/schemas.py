# crud_scaffold/example/users/schemas.py

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .entity import UserStatus


class UserBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


class UserCreate(UserBase):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    status: int = Field(UserStatus.ACTIVE, ge=1)
    bio: Optional[str] = Field(None, max_length=1024)


class UserUpdate(UserBase):
    """All fields optional; only the ones sent are updated."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    status: Optional[int] = Field(None, ge=1)
    bio: Optional[str] = Field(None, max_length=1024)

    # Omitted means "unchanged"; an explicit null is only valid for ``bio``.
    @field_validator("name", "email", "status")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may not be null")
        return value


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    status: int
    bio: Optional[str] = None
    created_at: datetime
    updated_at: datetime


__all__ = ["UserCreate", "UserUpdate", "UserRead"]
