# crud_scaffold/core/controller.py

# No ``from __future__ import annotations`` here: the route handlers below
# are closures annotated with per-controller schema classes, and FastAPI must
# see those annotations as real types.

"""
Generic HTTP controller.

A ``ServiceController`` exposes a ``Service`` under ``path``:

    GET    {path}            list (page, count, order, field, <filters>)
    GET    {path}/{item_id}  read one
    POST   {path}            create
    PUT    {path}/{item_id}  partial update
    DELETE {path}/{item_id}  delete

Every response body is the result envelope; its code decides the HTTP
status. Custom routes registered with ``add_route`` are mounted before the
generic ones so they take precedence over ``{path}/{item_id}``.
"""

from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Type

from fastapi import APIRouter, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from crud_scaffold.core.dao import EntityT
from crud_scaffold.core.filters import InvalidFilterError, resolve_column
from crud_scaffold.core.log import Log
from crud_scaffold.core.result import ErrorCode, Result
from crud_scaffold.core.service import Service
from crud_scaffold.db.base import BaseEntity

HTTP_STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.SUCCESS: status.HTTP_200_OK,
    ErrorCode.CREATED: status.HTTP_201_CREATED,
    ErrorCode.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.INTERNAL_SERVER_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Query parameters of the list route that are not filters.
RESERVED_QUERY_PARAMS = frozenset({"page", "count", "order", "field"})

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def http_status_for(code: ErrorCode) -> int:
    return HTTP_STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(code: ErrorCode, message: str, status_code: Optional[int] = None) -> JSONResponse:
    """Build an error envelope response outside of a Dao call."""
    result: Result[Any] = Result.fail(code, message)
    return JSONResponse(
        status_code=status_code or http_status_for(code),
        content=result.to_dict(),
    )


class ServiceController(Generic[EntityT]):
    """
    Maps HTTP routes onto a ``Service``.

    Subclasses set ``path`` (and optionally ``tag``) and may register extra
    routes in their constructor with ``add_route``.
    """

    path: str = ""
    tag: Optional[str] = None

    def __init__(
        self,
        service: Service[EntityT],
        *,
        create_schema: Type[BaseModel],
        update_schema: Type[BaseModel],
        read_schema: Type[BaseModel],
        log: Optional[Log] = None,
        max_page_size: int = 100,
    ) -> None:
        self.service = service
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.read_schema = read_schema
        self.log = log or Log("crud_scaffold.controller")
        self.max_page_size = max_page_size
        self._routes: List[Dict[str, Any]] = []
        self._router: Optional[APIRouter] = None

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    @property
    def router(self) -> APIRouter:
        if self._router is None:
            self._router = self.build_router()
        return self._router

    def add_route(
        self,
        path: str,
        handler: Callable[..., Any],
        methods: Sequence[str] = ("GET",),
        **kwargs: Any,
    ) -> None:
        if self._router is not None:
            raise RuntimeError("Routes must be added before the router is built.")
        self._routes.append(
            {"path": path, "endpoint": handler, "methods": list(methods), **kwargs}
        )

    def build_router(self) -> APIRouter:
        router = APIRouter(prefix=self.path, tags=[self.tag or self.service.entity_name])
        for route in self._routes:
            router.add_api_route(**route)
        self._add_crud_routes(router)
        return router

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize(self, value: Any) -> Any:
        if isinstance(value, BaseEntity):
            return self.read_schema.model_validate(value).model_dump(mode="json")
        if isinstance(value, list):
            return [self.serialize(item) for item in value]
        return jsonable_encoder(value)

    def respond(self, result: Result[Any]) -> JSONResponse:
        content = result.to_dict()
        content["result"] = self.serialize(result.result)
        return JSONResponse(status_code=http_status_for(result.code), content=content)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _coerce(self, field: str, raw: str) -> Any:
        column = resolve_column(self.service.dao.entity, field)
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return raw

        if python_type is bool:
            return raw.strip().lower() in _TRUE_STRINGS
        if python_type in (int, float):
            return python_type(raw)
        return raw

    def parse_query_filters(self, request: Request) -> Optional[Dict[str, Any]]:
        """
        Turn non-reserved query parameters into a filter mapping.

        A repeated parameter (``?status=1&status=2``) becomes a list, which
        the Dao matches as "one of".
        """
        grouped: Dict[str, List[Any]] = {}
        for key, raw in request.query_params.multi_items():
            if key in RESERVED_QUERY_PARAMS:
                continue
            grouped.setdefault(key, []).append(self._coerce(key, raw))

        if not grouped:
            return None
        return {
            key: values[0] if len(values) == 1 else values
            for key, values in grouped.items()
        }

    # ------------------------------------------------------------------
    # Generic routes
    # ------------------------------------------------------------------

    def _add_crud_routes(self, router: APIRouter) -> None:
        controller = self
        create_schema = self.create_schema
        update_schema = self.update_schema
        name = self.service.entity_name

        def list_items(
            request: Request,
            page: int = Query(1, ge=1, description="1-indexed page number."),
            count: int = Query(
                10, ge=1, le=controller.max_page_size, description="Page size."
            ),
            order: str = Query("DESC", description="ASC or DESC."),
            field: Optional[str] = Query(None, description="Sort field."),
        ) -> JSONResponse:
            try:
                where = controller.parse_query_filters(request)
            except (InvalidFilterError, ValueError) as exc:
                controller.log.warn("Invalid filter", f"{name}/list", reason=str(exc))
                return error_response(ErrorCode.BAD_REQUEST, str(exc))

            result = controller.service.read_many(
                page=page,
                page_size=count,
                order=order,
                sort_field=field,
                where=where,
            )
            return controller.respond(result)

        def get_item(item_id: int) -> JSONResponse:
            return controller.respond(controller.service.read(item_id))

        def create_item(payload: create_schema) -> JSONResponse:  # type: ignore[valid-type]
            return controller.respond(controller.service.create(payload.model_dump()))

        def update_item(item_id: int, payload: update_schema) -> JSONResponse:  # type: ignore[valid-type]
            values = payload.model_dump(exclude_unset=True)
            return controller.respond(controller.service.update(item_id, values))

        def delete_item(item_id: int) -> JSONResponse:
            return controller.respond(controller.service.delete(item_id))

        router.add_api_route("", list_items, methods=["GET"], summary=f"List {name}")
        router.add_api_route("/{item_id}", get_item, methods=["GET"], summary=f"Get {name}")
        router.add_api_route(
            "",
            create_item,
            methods=["POST"],
            status_code=status.HTTP_201_CREATED,
            summary=f"Create {name}",
        )
        router.add_api_route("/{item_id}", update_item, methods=["PUT"], summary=f"Update {name}")
        router.add_api_route("/{item_id}", delete_item, methods=["DELETE"], summary=f"Delete {name}")


__all__ = [
    "HTTP_STATUS_BY_CODE",
    "RESERVED_QUERY_PARAMS",
    "ServiceController",
    "error_response",
    "http_status_for",
]
