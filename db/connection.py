"""
db/connection.py
----------------
Manages the PostgreSQL connection pool for the profile directory.
Uses psycopg2's SimpleConnectionPool; every repository call borrows one
connection and hands it back before returning.
"""

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN, DB_STATEMENT_TIMEOUT_MS
from utils.errors import StorageUnavailableError
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.SimpleConnectionPool | None = None


def init_pool(min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX) -> None:
    """
    Initialize the database connection pool.

    Args:
        min_conn: Minimum number of connections to keep open.
        max_conn: Maximum number of connections allowed.

    Raises:
        StorageUnavailableError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    options = {}
    if DB_STATEMENT_TIMEOUT_MS > 0:
        options["options"] = f"-c statement_timeout={DB_STATEMENT_TIMEOUT_MS}"
    try:
        _pool = pool.SimpleConnectionPool(min_conn, max_conn, DATABASE_URL, **options)
        logger.info("Database connection pool initialized successfully.")
    except psycopg2.OperationalError as e:
        logger.error(f"Failed to initialize database pool: {e}")
        raise StorageUnavailableError("Database is unreachable", e) from e


def get_connection():
    """
    Get a connection from the pool.

    Returns:
        A psycopg2 connection object.

    Raises:
        StorageUnavailableError: If the pool is not initialized or exhausted.
    """
    if _pool is None:
        raise StorageUnavailableError("Database pool not initialized. Call init_pool() first.")
    try:
        return _pool.getconn()
    except (pool.PoolError, psycopg2.OperationalError) as e:
        logger.error(f"Could not get a database connection: {e}")
        raise StorageUnavailableError("No database connection available", e) from e


def rollback_connection(conn) -> None:
    """
    Roll back the current transaction, tolerating a dropped connection.

    A failed rollback is only logged so the caller can raise its own error.
    """
    try:
        conn.rollback()
    except psycopg2.Error as e:
        logger.warning(f"Rollback failed, connection is unusable: {e}")


def release_connection(conn) -> None:
    """
    Return a connection back to the pool. Closed connections are discarded.

    Args:
        conn: The psycopg2 connection to release.
    """
    if _pool is not None:
        _pool.putconn(conn, close=bool(conn.closed))


def close_pool() -> None:
    """Close all connections in the pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Database connection pool closed.")
