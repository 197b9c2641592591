"""
==================================================
SQLAlchemy engine factory for the store client.
==================================================

Builds a pooled PostgreSQL engine from core.config. DATABASE_URL, when
set, takes precedence over the individual POSTGRES_* settings.

Example:
    >>> from store.engine import create_store_engine, verify_connection
    >>>
    >>> engine = create_store_engine()
    >>> ok, message = verify_connection(engine)
"""

import logging
from typing import Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import config

logger = logging.getLogger(__name__)

DRIVER_NAME = 'postgresql+psycopg2'


def build_connection_url(
    host: Optional[str] = None,
    port: Optional[int] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    database: Optional[str] = None
) -> URL:
    """
    Build a psycopg2 connection URL, filling gaps from config.

    Returns:
        sqlalchemy.engine.URL (password escaping handled by SQLAlchemy)
    """
    return URL.create(
        drivername=DRIVER_NAME,
        username=user or config.db_user,
        password=password if password is not None else config.db_password,
        host=host or config.db_host,
        port=port or config.db_port,
        database=database or config.db_name
    )


def create_store_engine(
    url: Optional[str] = None,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10
) -> Engine:
    """
    Create a SQLAlchemy engine with connection pooling.

    Args:
        url: Explicit connection URL; defaults to DATABASE_URL, then POSTGRES_* settings
        echo: Enable SQL statement logging
        pool_size: Connection pool size
        max_overflow: Maximum overflow connections

    Returns:
        Configured SQLAlchemy Engine
    """
    connection_url = url or config.database_url or build_connection_url()
    logger.debug(f"Creating engine (pool_size={pool_size}, max_overflow={max_overflow})")

    return create_engine(
        connection_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True
    )


def verify_connection(engine: Engine) -> Tuple[bool, str]:
    """
    Check that the engine can reach the database.

    Returns:
        Tuple of (success, message)
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, f"Connected to {engine.url.render_as_string(hide_password=True)}"
    except SQLAlchemyError as e:
        logger.error(f"Connection check failed: {e}")
        return False, f"Connection test failed: {e}"
