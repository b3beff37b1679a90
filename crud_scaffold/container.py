# crud_scaffold/container.py
from dependency_injector import containers, providers

from crud_scaffold.config import get_settings
from crud_scaffold.core.log import Log
from crud_scaffold.db.database import Database
from crud_scaffold.example.users import UserDao, UserService


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    Assembles the process-wide singletons (settings, log, database) and the
    per-use daos and services. Tests override ``settings`` to point at an
    in-memory database.
    """

    settings = providers.Singleton(get_settings)

    log = providers.Singleton(Log, name=settings.provided.APP_NAME)

    # One engine / connection pool per process
    database = providers.Singleton(Database.from_settings, settings=settings, log=log)

    # Daos and services are stateless; a new instance per resolution is fine
    user_dao = providers.Factory(UserDao, database=database, log=log)
    user_service = providers.Factory(UserService, dao=user_dao)
