# crud_scaffold/db/database.py

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional, Type

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from crud_scaffold.config import Settings
from crud_scaffold.core.log import Log
from crud_scaffold.db.base import Base


class UnitOfWork:
    """
    Caller-owned transaction.

    Pass the same instance to several Dao calls to make them atomic; the
    daos only flush inside it, the owner commits or rolls back.

        with database.unit_of_work() as uow:
            user_dao.create({...}, uow=uow)
            user_dao.update(7, {"status": 2}, uow=uow)
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def flush(self) -> None:
        self._session.flush()

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()


def _is_memory_sqlite(url: str) -> bool:
    return url in {"sqlite://", "sqlite:///:memory:"} or ":memory:" in url


class Database:
    """
    Engine and session factory for one relational database.

    Entities are registered with ``add_entity`` so ``connect`` can create
    their tables; the connection pool itself is owned by the engine.
    """

    def __init__(self, url: str, *, echo: bool = False, log: Optional[Log] = None) -> None:
        self.url = url
        self.log = log or Log("crud_scaffold.db")
        self._entities: List[Type[Base]] = []

        # SQLite needs a special flag when used in a multi-threaded web app;
        # an in-memory database must also share a single connection.
        engine_kwargs: Dict[str, Any] = {}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_sqlite(url):
                engine_kwargs["poolclass"] = StaticPool

        self.engine: Engine = create_engine(url, echo=echo, **engine_kwargs)
        self.session_factory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
            class_=Session,
        )

    @classmethod
    def from_settings(cls, settings: Settings, log: Optional[Log] = None) -> "Database":
        return cls(settings.DATABASE_URL, echo=settings.DATABASE_ECHO, log=log)

    # ------------------------------------------------------------------
    # Entities / lifecycle
    # ------------------------------------------------------------------

    @property
    def entities(self) -> List[Type[Base]]:
        return list(self._entities)

    def add_entity(self, *entities: Type[Base]) -> None:
        for entity in entities:
            if entity not in self._entities:
                self._entities.append(entity)

    def connect(self) -> None:
        """
        Create the tables of every registered entity that does not exist yet.
        """
        tables = [entity.__table__ for entity in self._entities]
        Base.metadata.create_all(self.engine, tables=tables)
        self.log.info(
            "Connected to database",
            "Database/connect",
            dialect=self.engine.dialect.name,
            entities=[entity.__name__ for entity in self._entities],
        )

    def dispose(self) -> None:
        self.engine.dispose()
        self.log.info("Disposed database engine", "Database/dispose")

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    @contextmanager
    def unit_of_work(self) -> Generator[UnitOfWork, None, None]:
        """
        Open a session-scoped transaction: committed when the block exits
        normally, rolled back (and the exception re-raised) otherwise.
        """
        session = self.session_factory()
        try:
            yield UnitOfWork(session)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self) -> Generator[Session, None, None]:
        """
        FastAPI-style dependency yielding a session that is closed afterwards.

            @router.get("/report")
            def report(session: Session = Depends(database.get_session)):
                ...
        """
        session = self.session_factory()
        try:
            yield session
        finally:
            session.close()


__all__ = ["Database", "UnitOfWork"]
