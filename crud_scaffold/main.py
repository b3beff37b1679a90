"""
Entry point for the CRUD scaffold HTTP API.

Intended usage:
    uvicorn crud_scaffold.main:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from typing import Optional

from crud_scaffold.container import Container
from crud_scaffold.core.app import Application
from crud_scaffold.core.log import configure_logging
from crud_scaffold.example.users import User, UserController


def create_application(container: Optional[Container] = None) -> Application:
    """
    Build the ``Application``: configure logging, register entities and
    mount the example controllers.
    """
    container = container or Container()
    settings = container.settings()
    configure_logging(settings)

    database = container.database()
    database.add_entity(User)

    application = Application(settings, database, container.log())
    application.add_controller(
        UserController(
            container.user_service(),
            log=container.log(),
            max_page_size=settings.MAX_PAGE_SIZE,
        )
    )
    application.load_controllers()
    return application


def create_app(container: Optional[Container] = None):
    """
    Application factory returning the FastAPI instance.
    """
    return create_application(container).app


# Default application instance
app = create_app()


if __name__ == "__main__":
    create_application().run()
