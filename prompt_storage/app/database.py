from pathlib import Path
from typing import Union

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import QueuePool

from .core.config import settings, MAX_CONNECTIONS
from .core.logger import get_logger

logger = get_logger(__name__)


def _configure_sqlite(busy_timeout: float):
    """Build a ``connect`` listener applying per-connection SQLite pragmas."""

    def on_connect(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        try:
            # WAL lets readers proceed while a writer holds the database
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout * 1000)}")
        finally:
            cursor.close()

    return on_connect


def create_db_engine(
    db_path: Union[str, Path],
    pool_size: int = MAX_CONNECTIONS,
    pool_timeout: float = 30.0,
    busy_timeout: float = 30.0,
) -> Engine:
    """
    Create an engine over a single SQLite file with a fixed-size connection pool.

    Checkout blocks for up to ``pool_timeout`` seconds when every connection is
    in use; contending writers wait up to ``busy_timeout`` seconds for the lock.
    """
    logger.info(f"Opening database: {db_path} (pool_size={pool_size})")
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={
            "check_same_thread": False,  # connections move between worker threads
            "timeout": busy_timeout,
        },
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        pool_pre_ping=True,
        echo=settings.LOG_LEVEL == "DEBUG"
    )
    event.listen(engine, "connect", _configure_sqlite(busy_timeout))
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)
