"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's SimpleConnectionPool; both programs are single-threaded
and make one call at a time.
"""

import psycopg2
from psycopg2 import pool

from config import DatabaseConfig
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.SimpleConnectionPool | None = None


def init_pool(config: DatabaseConfig) -> None:
    """
    Initialize the database connection pool.

    Args:
        config: Which database to connect to and how many connections
            the pool may hold.

    Raises:
        psycopg2.Error: If the database is unreachable or the DSN is malformed.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.SimpleConnectionPool(config.min_conn, config.max_conn, config.dsn)
        logger.info(
            f"Connection pool ready for {config.host}:{config.port}/{config.name} "
            f"({config.min_conn}..{config.max_conn} connections)."
        )
    except psycopg2.Error as e:
        logger.error(f"Failed to initialize database pool: {e}")
        raise


def get_connection():
    """
    Get a connection from the pool.

    Returns:
        A psycopg2 connection object.

    Raises:
        RuntimeError: If the pool has not been initialized.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """
    Return a connection back to the pool.
    The pool rolls back any transaction still open on it.
    """
    if _pool is not None:
        _pool.putconn(conn)


def ping() -> None:
    """
    Round-trip a trivial query to prove the server answers.

    Raises:
        psycopg2.OperationalError: If the connection is unusable.
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1;")
            cur.fetchone()
        conn.rollback()
    finally:
        release_connection(conn)


def close_pool() -> None:
    """Close all connections in the pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Database connection pool closed.")
