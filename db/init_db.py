"""
db/init_db.py
-------------
Creates and seeds the `users` table of the CRUD demo when it is missing.
Run this module directly to bootstrap a fresh database:
    python -m db.init_db
"""

import psycopg2

from db.connection import get_connection, release_connection
from repositories.errors import RepositoryError
from utils.logger import get_logger

logger = get_logger(__name__)

TABLE_EXISTS_SQL = """
    SELECT EXISTS (
        SELECT FROM information_schema.tables
        WHERE table_schema = 'public'
        AND table_name = %s
    );
"""

SCHEMA_SQL = """
-- Users table: account holders and their balances
CREATE TABLE users (
    id          SERIAL PRIMARY KEY,
    name        VARCHAR(100) NOT NULL,
    email       VARCHAR(100) UNIQUE NOT NULL,
    balance     DECIMAL(10,2) DEFAULT 0.00
);
"""

SEED_SQL = """
INSERT INTO users (name, email, balance) VALUES
    ('Alice Johnson', 'alice@example.com', 1000.00),
    ('Bob Smith', 'bob@example.com', 500.00),
    ('Charlie Brown', 'charlie@example.com', 750.00),
    ('Diana Prince', 'diana@example.com', 1200.00);
"""


def apply_initial_schema() -> bool:
    """
    Create and seed the users table if it does not exist yet.
    Table creation and seeding share one transaction.

    Returns:
        True if the table was created, False if it already existed.

    Raises:
        RepositoryError: If the check or the DDL fails.
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(TABLE_EXISTS_SQL, ("users",))
            if cur.fetchone()[0]:
                conn.rollback()
                logger.info("Table users already exists, skipping bootstrap.")
                return False
            cur.execute(SCHEMA_SQL)
            cur.execute(SEED_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
        print("Database schema initialized")
        return True
    except psycopg2.Error as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise RepositoryError(f"failed to apply initial schema: {e}") from e
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from config import DEMO_DB
    from db.connection import close_pool, init_pool

    init_pool(DEMO_DB)
    try:
        apply_initial_schema()
    finally:
        close_pool()
