# tests/conftest.py
from unittest.mock import MagicMock

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from crud_scaffold.config import AppEnv, Settings
from crud_scaffold.container import Container
from crud_scaffold.core.log import Log
from crud_scaffold.db.database import Database
from crud_scaffold.example.users import User, UserDao, UserService
from crud_scaffold.main import create_app


@pytest.fixture(scope="function")
def settings():
    """Settings pointing at a private in-memory SQLite database."""
    return Settings(
        APP_ENV=AppEnv.TESTING,
        DATABASE_URL="sqlite://",
        LOG_FORMAT="console",
        LOG_LEVEL="WARNING",
        MAX_PAGE_SIZE=50,
    )


@pytest.fixture(scope="function")
def mock_log():
    """Returns a mock logging facade so tests can assert on log calls."""
    return MagicMock(spec=Log)


@pytest.fixture(scope="function")
def database(settings, mock_log):
    db = Database.from_settings(settings, log=mock_log)
    db.add_entity(User)
    db.connect()
    yield db
    db.dispose()


@pytest.fixture(scope="function")
def user_dao(database, mock_log):
    return UserDao(database, log=mock_log)


@pytest.fixture(scope="function")
def user_service(user_dao):
    return UserService(user_dao)


@pytest.fixture(scope="function")
def container(settings):
    """
    Sets up the Dependency Injection Container for testing, overriding
    the environment-derived settings with the in-memory ones above.
    """
    container = Container()
    container.settings.override(providers.Object(settings))
    yield container
    container.unwire()
    container.reset_singletons()
    container.settings.reset_override()


@pytest.fixture(scope="function")
def app(container):
    return create_app(container)


@pytest.fixture(scope="function")
def client(app):
    # Entering the client runs the lifespan, which creates the tables.
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user():
    """Builds a valid user payload; the index keeps emails unique."""

    def _make(index: int, **overrides):
        data = {
            "name": f"User {index}",
            "email": f"user{index}@example.org",
            "status": 1,
        }
        data.update(overrides)
        return data

    return _make
