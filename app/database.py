# app/database.py
"""
Database connection, schema bootstrap, and scoped connection handling.
Uses SQLAlchemy against MySQL (SQLite is accepted for local runs and tests).

Every connection handed out by Store.connection() has the schema verified
(created on first run, tables created whenever missing) and is closed on
every exit path. All models are imported in create_tables() so both tables
are created in one call.
"""

import os
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from sqlalchemy import String, create_engine, text
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator
import structlog

from app.config import settings
from app.exceptions import StoreInitError
from app.utils import time_codec
from app.utils.logger import get_logger

SCHEMA = settings.DB_SCHEMA

Base = declarative_base()

T = TypeVar("T")


class Timestamp(TypeDecorator):
    """
    DATETIME on MySQL, fixed-width text elsewhere. Values pass through the
    time codec both ways, so callers only ever see aware datetimes.
    """

    impl = String(19)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "mysql":
            return dialect.type_descriptor(mysql.DATETIME())
        return dialect.type_descriptor(String(19))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return time_codec.encode(value)

    def process_result_value(self, value, dialect):
        return time_codec.decode(value)


def create_db_engine(url: Optional[str] = None) -> Engine:
    return create_engine(
        url or settings.database_url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


def create_tables(conn: Connection):
    """
    Creates all tables inside the schema. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from app.models.user import User              # noqa
    from app.models.schedule import Schedule      # noqa

    Base.metadata.create_all(bind=conn)


class Store:
    """
    Hands out connections to the schedule schema.

    Opening a connection or verifying/creating the schema failing raises
    StoreInitError; the process entry point decides whether to abort.
    """

    def __init__(self, engine: Engine, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self.engine = engine
        self.logger = logger or get_logger(__name__)

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    def schema_exists(self, conn: Connection) -> bool:
        """Count matching schemas in the store's catalog."""
        if self.dialect == "sqlite":
            query = text("SELECT COUNT(*) FROM pragma_database_list WHERE name = :name")
        else:
            query = text("SELECT COUNT(*) FROM INFORMATION_SCHEMA.SCHEMATA WHERE SCHEMA_NAME = :name")
        return conn.execute(query, {"name": SCHEMA}).scalar() > 0

    def create_schema(self, conn: Connection):
        self.logger.info("Creating database", schema=SCHEMA)
        if self.dialect == "sqlite":
            conn.execute(text(f"ATTACH DATABASE :path AS {SCHEMA}"), {"path": self._sqlite_schema_path()})
        else:
            conn.execute(text(f"CREATE DATABASE IF NOT EXISTS {SCHEMA}"))

    def _sqlite_schema_path(self) -> str:
        # Attached databases live per connection; in-memory stores need a StaticPool
        database = self.engine.url.database
        if not database or database == ":memory:":
            return ":memory:"
        return os.path.join(os.path.dirname(os.path.abspath(database)), f"{SCHEMA}.db")

    def use_schema(self, conn: Connection):
        # SQLite has no USE; tables are always addressed as schema.table
        if self.dialect != "sqlite":
            conn.execute(text(f"USE {SCHEMA}"))

    def _open(self) -> Connection:
        try:
            conn = self.engine.connect()
        except SQLAlchemyError as e:
            raise StoreInitError(f"Cannot open database connection: {e}") from e

        try:
            if not self.schema_exists(conn):
                self.create_schema(conn)
            self.use_schema(conn)
            # Idempotent: also covers a pre-existing schema without its tables
            create_tables(conn)
            conn.commit()
        except SQLAlchemyError as e:
            conn.close()
            raise StoreInitError(f"Cannot verify or create schema {SCHEMA}: {e}") from e
        return conn

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        conn = self._open()
        try:
            yield conn
        finally:
            self.logger.info("Closing database connection", schema=SCHEMA)
            conn.close()

    def with_connection(self, fn: Callable[[Connection], T]) -> T:
        with self.connection() as conn:
            return fn(conn)

    def bootstrap(self):
        """Acquire and release one connection so start-up fails fast."""
        with self.connection():
            pass
