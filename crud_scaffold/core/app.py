# crud_scaffold/core/app.py

"""
Application wrapper around FastAPI.

``Application`` owns the FastAPI instance and wires middleware, exception
handlers and controllers in a fixed order:

    application = Application(settings, database, log)
    application.add_controller(UserController(user_service))
    application.load_controllers()
    app = application.app
"""

from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, List, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from crud_scaffold.config import AppEnv, Settings
from crud_scaffold.core.controller import ServiceController, error_response
from crud_scaffold.core.log import Log
from crud_scaffold.core.result import ErrorCode
from crud_scaffold.db.database import Database

REQUEST_ID_HEADER = "X-Request-ID"


class Application:
    """
    FastAPI application with the scaffold's middleware and error envelope.
    """

    def __init__(self, settings: Settings, database: Database, log: Optional[Log] = None) -> None:
        self.settings = settings
        self.database = database
        self.log = log or Log("crud_scaffold.app")
        self.controllers: List[ServiceController[Any]] = []
        self._loaded = False

        docs_enabled = settings.APP_ENV != AppEnv.PRODUCTION
        self.app = FastAPI(
            title=settings.APP_NAME,
            version=settings.VERSION,
            debug=settings.DEBUG,
            docs_url="/docs" if docs_enabled else None,
            redoc_url="/redoc" if docs_enabled else None,
            lifespan=self._lifespan,
        )

        self._add_default_middleware()
        self._add_exception_handlers()

        @self.app.get("/health", tags=["system"])
        async def health() -> dict:
            return {
                "status": "ok",
                "version": settings.VERSION,
                "environment": settings.APP_ENV.value,
            }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI) -> AsyncGenerator[None, None]:
        self.database.connect()
        self.log.info(
            f"Starting {self.settings.APP_NAME}",
            "Application/startup",
            environment=self.settings.APP_ENV.value,
            controllers=[controller.path for controller in self.controllers],
        )
        yield
        self.log.info("Shutting down application", "Application/shutdown")
        self.database.dispose()

    def run(self) -> None:
        import uvicorn

        uvicorn.run(self.app, host=self.settings.HOST, port=self.settings.PORT)

    # ------------------------------------------------------------------
    # Middleware
    # ------------------------------------------------------------------

    def add_middleware(self, middleware_class: Any, **options: Any) -> None:
        self.app.add_middleware(middleware_class, **options)

    def _add_default_middleware(self) -> None:
        self.add_middleware(GZipMiddleware, minimum_size=1000)
        self.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.CORS_ORIGINS,
            allow_credentials="*" not in self.settings.CORS_ORIGINS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        log = self.log

        @self.app.middleware("http")
        async def request_context(request: Request, call_next: Any) -> Any:
            """
            Bind a request id to the log context and write one access line.
            """
            request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
            structlog.contextvars.clear_contextvars()
            structlog.contextvars.bind_contextvars(request_id=request_id)

            started = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as exc:
                response = self.unhandled_error_response(request, exc)
            finally:
                structlog.contextvars.unbind_contextvars("request_id")

            response.headers[REQUEST_ID_HEADER] = request_id
            log.info(
                "request",
                "http/access",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return response

    # ------------------------------------------------------------------
    # Error handling
    # ------------------------------------------------------------------

    def _add_exception_handlers(self) -> None:
        app = self.app

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            errors = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            return error_response(ErrorCode.BAD_REQUEST, errors or "Invalid request")

        @app.exception_handler(StarletteHTTPException)
        async def http_exception_handler(request: Request, exc: StarletteHTTPException):
            if exc.status_code == status.HTTP_404_NOT_FOUND:
                code = ErrorCode.NOT_FOUND
            elif exc.status_code < 500:
                code = ErrorCode.BAD_REQUEST
            else:
                code = ErrorCode.INTERNAL_SERVER_ERROR
            return error_response(code, str(exc.detail), status_code=exc.status_code)

        @app.exception_handler(Exception)
        async def global_exception_handler(request: Request, exc: Exception):
            return self.unhandled_error_response(request, exc)

    def unhandled_error_response(self, request: Request, exc: Exception) -> JSONResponse:
        """Log an exception no handler claimed and turn it into a 500 envelope."""
        self.log.error(
            "Unhandled exception",
            "http/exception",
            error=exc,
            method=request.method,
            path=request.url.path,
        )
        message = str(exc) if self.settings.DEBUG else "Internal Server Error"
        return error_response(ErrorCode.INTERNAL_SERVER_ERROR, message)

    # ------------------------------------------------------------------
    # Controllers
    # ------------------------------------------------------------------

    def add_controller(self, controller: ServiceController[Any]) -> None:
        if self._loaded:
            raise RuntimeError("Controllers must be added before load_controllers().")
        self.controllers.append(controller)

    def load_controllers(self) -> None:
        """Mount every registered controller under ``API_PREFIX``."""
        for controller in self.controllers:
            self.app.include_router(controller.router, prefix=self.settings.API_PREFIX)
        self._loaded = True


__all__ = ["Application", "REQUEST_ID_HEADER"]
