# app/db/engine.py

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from app.config import Settings

logger = logging.getLogger(__name__)

# DatabaseError.code values
DUPLICATE_KEY = "duplicate_key"
FOREIGN_KEY = "foreign_key"
UNAVAILABLE = "unavailable"
UNKNOWN = "unknown"

# MySQL server error numbers
_MYSQL_DUPLICATE_CODES = {1062, 1586}  # ER_DUP_ENTRY, ER_DUP_ENTRY_WITH_KEY_NAME
_MYSQL_FOREIGN_KEY_CODES = {1451, 1452}  # ER_ROW_IS_REFERENCED_2, ER_NO_REFERENCED_ROW_2


class DatabaseError(Exception):
    """
    A failed statement, with the driver error reduced to a portable code.
    """

    def __init__(self, message: str, code: str = UNKNOWN):
        super().__init__(message)
        self.code = code

    @property
    def is_duplicate(self) -> bool:
        return self.code == DUPLICATE_KEY

    @classmethod
    def from_exception(cls, exc: Exception) -> "DatabaseError":
        return cls(str(exc), code=classify_error(exc))


@dataclass(frozen=True)
class WriteResult:
    insert_id: Optional[int]
    affected_rows: int


def _driver_code(orig) -> Optional[int]:
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return args[0]
    return None


def classify_error(exc: Exception) -> str:
    """
    Map a SQLAlchemy / DBAPI error onto one of the DatabaseError codes.

    Understands MySQL error numbers, PostgreSQL SQLSTATEs and SQLite's
    constraint messages.
    """
    if isinstance(exc, sa_exc.TimeoutError):
        # pool checkout timed out
        return UNAVAILABLE

    orig = getattr(exc, "orig", None)

    code = _driver_code(orig)
    if code in _MYSQL_DUPLICATE_CODES:
        return DUPLICATE_KEY
    if code in _MYSQL_FOREIGN_KEY_CODES:
        return FOREIGN_KEY

    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate == "23505":
        return DUPLICATE_KEY
    if sqlstate == "23503":
        return FOREIGN_KEY

    message = str(orig if orig is not None else exc)
    if "UNIQUE constraint failed" in message or "Duplicate entry" in message:
        return DUPLICATE_KEY
    if "FOREIGN KEY constraint failed" in message:
        return FOREIGN_KEY

    if isinstance(exc, (sa_exc.OperationalError, sa_exc.InterfaceError)):
        return UNAVAILABLE
    return UNKNOWN


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> Engine:
    """
    Create the pooled engine. Nothing connects until the first statement runs.
    """
    url = settings.database_url

    if url.startswith("sqlite"):
        engine_kwargs: Dict[str, Any] = {
            "connect_args": {"check_same_thread": False},
        }
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every checkout gets an empty db
            engine_kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **engine_kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=1800,
        pool_pre_ping=True,
    )


class Database:
    """
    Handle over a pooled engine.

    Every call checks out its own connection, runs inside a transaction that
    commits on success and rolls back on error, and returns the connection to
    the pool before returning. SQLAlchemy errors surface as DatabaseError.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(build_engine(settings))

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        try:
            with self.engine.begin() as conn:
                yield conn
        except sa_exc.SQLAlchemyError as exc:
            error = DatabaseError.from_exception(exc)
            logger.debug("Statement failed (%s): %s", error.code, exc)
            raise error from exc

    def fetch_all(self, stmt) -> List[Dict[str, Any]]:
        with self.transaction() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(row) for row in rows]

    def fetch_one(self, stmt) -> Optional[Dict[str, Any]]:
        with self.transaction() as conn:
            row = conn.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def scalar(self, stmt) -> Any:
        with self.transaction() as conn:
            return conn.execute(stmt).scalar_one()

    def execute(self, stmt) -> WriteResult:
        with self.transaction() as conn:
            result = conn.execute(stmt)
            insert_id = None
            if result.is_insert and result.inserted_primary_key:
                insert_id = result.inserted_primary_key[0]
            return WriteResult(insert_id=insert_id, affected_rows=result.rowcount)

    def ping(self) -> bool:
        try:
            with self.transaction() as conn:
                conn.execute(text("SELECT 1"))
        except DatabaseError:
            logger.warning("Database ping failed", exc_info=True)
            return False
        return True

    def dispose(self) -> None:
        self.engine.dispose()
