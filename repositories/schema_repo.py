"""
repositories/schema_repo.py
----------------------------
Read-only catalog queries used by the schema verifier.
Table names are always passed as parameters or composed with
`psycopg2.sql.Identifier`, never formatted into SQL text.
"""

from typing import Optional

import psycopg2
from psycopg2 import sql

from db.connection import get_connection, release_connection
from models.schema import ColumnInfo, MigrationState
from repositories.errors import RepositoryError
from utils.logger import get_logger

logger = get_logger(__name__)


class SchemaRepository:
    """Inspects tables, columns and the migration marker of one schema."""

    def __init__(self, schema: str = "public"):
        self.schema = schema

    def table_exists(self, table: str) -> bool:
        """Return True if `table` is present in the configured schema."""
        query = """
            SELECT EXISTS (
                SELECT FROM information_schema.tables
                WHERE table_schema = %s
                AND table_name = %s
            );
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query, (self.schema, table))
                return bool(cur.fetchone()[0])
        except psycopg2.Error as e:
            raise RepositoryError(f"failed to check table {table}: {e}") from e
        finally:
            release_connection(conn)

    def count_rows(self, table: str) -> int:
        """Return the number of rows in `table`."""
        query = sql.SQL("SELECT COUNT(*) FROM {}.{};").format(
            sql.Identifier(self.schema), sql.Identifier(table)
        )
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query)
                return int(cur.fetchone()[0])
        except psycopg2.Error as e:
            raise RepositoryError(f"could not count rows in {table}: {e}") from e
        finally:
            release_connection(conn)

    def get_columns(self, table: str) -> list[ColumnInfo]:
        """
        List the columns of `table` in their defined order.

        Returns:
            An empty list when the table does not exist.
        """
        query = """
            SELECT column_name, data_type, is_nullable
            FROM information_schema.columns
            WHERE table_schema = %s
            AND table_name = %s
            ORDER BY ordinal_position;
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query, (self.schema, table))
                return [
                    ColumnInfo(name=r[0], data_type=r[1], is_nullable=r[2])
                    for r in cur.fetchall()
                ]
        except psycopg2.Error as e:
            raise RepositoryError(f"failed to check {table} structure: {e}") from e
        finally:
            release_connection(conn)

    def get_migration_state(self) -> Optional[MigrationState]:
        """
        Read the marker row of the migration tool.

        Returns:
            The MigrationState, or None if the marker table is empty.
        """
        query = sql.SQL("SELECT version, dirty FROM {}.schema_migrations;").format(
            sql.Identifier(self.schema)
        )
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(query)
                row = cur.fetchone()
        except psycopg2.Error as e:
            raise RepositoryError(f"could not check migration version: {e}") from e
        finally:
            release_connection(conn)
        if row is None:
            return None
        return MigrationState(version=int(row[0]), dirty=bool(row[1]))
