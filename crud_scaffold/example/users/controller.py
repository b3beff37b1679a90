# crud_scaffold/example/users/controller.py

from __future__ import annotations

from typing import Optional

from fastapi.responses import JSONResponse

from crud_scaffold.core.controller import ServiceController
from crud_scaffold.core.log import Log

from .entity import User
from .schemas import UserCreate, UserRead, UserUpdate
from .service import UserService


class UserController(ServiceController[User]):
    path = "/user"
    tag = "users"

    service: UserService

    def __init__(
        self,
        service: UserService,
        log: Optional[Log] = None,
        max_page_size: int = 100,
    ) -> None:
        super().__init__(
            service,
            create_schema=UserCreate,
            update_schema=UserUpdate,
            read_schema=UserRead,
            log=log,
            max_page_size=max_page_size,
        )
        self.add_route("/exception", self.exception, methods=["GET"])
        self.add_route("/by-email/{email}", self.read_by_email, methods=["GET"])

    def exception(self) -> None:
        raise RuntimeError("Exception")

    def read_by_email(self, email: str) -> JSONResponse:
        return self.respond(self.service.read_by_email(email))
