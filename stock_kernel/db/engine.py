"""
Module: stock_kernel.db.engine
Responsibility: The one process-wide SQLAlchemy engine, its session
    factory, and the commit-or-rollback scope every store call runs in.
Architecture position: Kernel > DB.  Imported by store/sql_store.py and
    store.open_store().  MUST NOT import services/, selectors/ or domain/.

Invariants enforced:
    - PostgreSQL (psycopg2) connections run at READ COMMITTED from a
      pre-pinged QueuePool.  Store calls that read before writing take a
      row lock (FOR UPDATE), which is what serializes racing checkouts.
    - In-memory SQLite shares a single connection (StaticPool) so every
      session sees the same database; file SQLite waits on locks for
      ``lock_timeout`` seconds.

Failure modes:
    - RuntimeError from get_engine()/get_session_factory() before
      init_engine_from_url().
"""

import atexit
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from stock_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None

_NOT_INITIALIZED = "Engine not initialized. Call init_engine_from_url() first."


def _engine_options(database_url: str, pool_size: int, lock_timeout: int) -> dict[str, Any]:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return {
            "poolclass": QueuePool,
            "pool_size": pool_size,
            "max_overflow": pool_size * 2,
            "pool_pre_ping": True,
            "pool_timeout": lock_timeout,
            "pool_recycle": 1800,
            "isolation_level": "READ COMMITTED",
        }
    if url.database in (None, "", ":memory:"):
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {"connect_args": {"check_same_thread": False, "timeout": lock_timeout}}


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    lock_timeout: int = 30,
) -> Engine:
    """
    (Re)initialize the engine for ``database_url``.

    Accepts ``postgresql://`` / ``postgresql+psycopg2://`` and ``sqlite://``
    URLs.  A previous engine is disposed first.

    Args:
        database_url: Where the three collections live.
        echo: Log every SQL statement.
        pool_size: Pooled PostgreSQL connections (overflow is twice this).
        lock_timeout: Seconds to wait for a pooled connection (PostgreSQL)
            or a database lock (file SQLite).
    """
    global _engine, _session_factory

    reset_engine()
    _engine = create_engine(
        database_url,
        echo=echo,
        **_engine_options(database_url, pool_size, lock_timeout),
    )
    _session_factory = sessionmaker(bind=_engine, expire_on_commit=False)
    logger.info(
        "engine_initialized",
        extra={"dialect": _engine.dialect.name, "echo": echo},
    )
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    if _session_factory is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _session_factory


@contextmanager
def session_scope(factory: sessionmaker[Session] | None = None) -> Iterator[Session]:
    """
    One unit of work: commit on normal exit, roll back and re-raise on error.

    ``factory`` defaults to the one built by init_engine_from_url().
    """
    session = (factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.debug("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def _metadata():
    from stock_kernel.db.base import Base

    # Registers the ORM models on Base.metadata
    import stock_kernel.models  # noqa: F401

    return Base.metadata


def create_tables() -> None:
    """Create categories, inventory and inventory_out if they are missing."""
    _metadata().create_all(get_engine())


def drop_tables() -> None:
    """Drop every kernel table.  Tests only."""
    _metadata().drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


atexit.register(reset_engine)
