"""
Relational store access.

A Database owns one SQLAlchemy engine and its bounded connection pool. It is
built once in the application lifespan and handed to routes through the
get_db dependency; nothing here is a module-level singleton.

Usage:
    with db.session() as conn:
        conn.execute(text("SELECT * FROM users WHERE username = :u"), {"u": name})
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import structlog
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.db.tables import metadata

logger = structlog.get_logger(__name__)


class Database:
    def __init__(self, url: str, pool_size: int = 10, pool_timeout: float = 30, echo: bool = False):
        self.engine: Engine = create_engine(url, echo=echo, **_engine_options(url, pool_size, pool_timeout))

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.sqlalchemy_url,
            pool_size=settings.db_pool_size,
            pool_timeout=settings.db_pool_timeout,
            echo=settings.debug,
        )

    @contextmanager
    def session(self) -> Iterator[Connection]:
        """
        Check out one pooled connection inside a transaction.
        Commits when the block exits cleanly, rolls back on any exception,
        and always returns the connection to the pool.
        """
        with self.engine.connect() as conn:
            trans = conn.begin()
            try:
                yield conn
                trans.commit()
            except Exception:
                trans.rollback()
                raise

    def create_schema(self) -> None:
        """Create any missing tables."""
        metadata.create_all(self.engine)

    def ping(self) -> bool:
        """Return True if the database answers a trivial query."""
        try:
            with self.session() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except Exception as e:
            logger.warning("database ping failed", error=str(e))
            return False

    def dispose(self) -> None:
        self.engine.dispose()


def _engine_options(url: str, pool_size: int, pool_timeout: float) -> Dict[str, Any]:
    parsed = make_url(url)
    options: Dict[str, Any] = {}

    if parsed.get_backend_name() == "sqlite":
        # SQLite (tests, local runs) connections are handed across worker threads
        options["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            options["poolclass"] = StaticPool
            return options

    # max_overflow=0: pool_size is a hard connection limit, extra
    # checkouts queue for up to pool_timeout seconds
    options.update(pool_size=pool_size, max_overflow=0, pool_timeout=pool_timeout, pool_pre_ping=True)
    return options


def fetch_one(conn: Connection, sql: str, params: Optional[dict] = None) -> Optional[Dict[str, Any]]:
    """Run a query and return the first row as a dict, or None."""
    row = conn.execute(text(sql), params or {}).mappings().first()
    return dict(row) if row is not None else None


def fetch_all(conn: Connection, sql: str, params: Optional[dict] = None) -> List[Dict[str, Any]]:
    """Run a query and return all rows as dicts."""
    return [dict(row) for row in conn.execute(text(sql), params or {}).mappings().all()]


def get_db(request: Request) -> Database:
    """
    Dependency for FastAPI route injection.
    Usage:
        @router.get("/users")
        def get_users(db: Database = Depends(get_db)):
            ...
    """
    return request.app.state.db
