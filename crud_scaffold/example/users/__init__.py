"""
Example ``User`` module: entity, dao, service, schemas and controller
wired on top of the generic scaffold.
"""

from .controller import UserController
from .dao import UserDao
from .entity import User, UserStatus
from .schemas import UserCreate, UserRead, UserUpdate
from .service import UserService

__all__ = [
    "User",
    "UserStatus",
    "UserDao",
    "UserService",
    "UserController",
    "UserCreate",
    "UserUpdate",
    "UserRead",
]
