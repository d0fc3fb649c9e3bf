"""
verify.py
---------
Entry point for the schema verifier.

Checks that the expected tables exist and how many rows they hold, prints
the column layout of one table and reads the migration marker.

Exit codes:
    0 - checks finished and the migration marker is clean (or unreadable).
    1 - the migration marker is dirty.
    2 - the database could not be reached.
"""

import sys
from typing import Iterable

import psycopg2

from config import VERIFY_DB, VERIFY_SCHEMA, VERIFY_STRUCTURE_TABLE, VERIFY_TABLES
from db.connection import close_pool, init_pool, ping
from repositories.errors import RepositoryError
from repositories.schema_repo import SchemaRepository
from utils.logger import get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_DIRTY = 1
EXIT_CONNECTION = 2


def check_tables(repo: SchemaRepository, tables: Iterable[str]) -> None:
    """Report existence and row count for each table, skipping failures."""
    for table in tables:
        try:
            exists = repo.table_exists(table)
        except RepositoryError as e:
            logger.warning(f"Failed to check table {table}: {e}")
            continue

        if not exists:
            print(f"Table {table} does not exist")
            continue

        print(f"Table {table} exists")
        try:
            count = repo.count_rows(table)
        except RepositoryError as e:
            logger.warning(f"Could not count rows in {table}: {e}")
        else:
            print(f"   Rows in {table}: {count}")


def check_structure(repo: SchemaRepository, table: str) -> None:
    """Print name, type and nullability of every column of `table`."""
    print(f"\nChecking {table} table structure:")
    try:
        columns = repo.get_columns(table)
    except RepositoryError as e:
        logger.warning(f"Failed to check {table} structure: {e}")
        return
    if not columns:
        logger.warning(f"No columns found for {table}")
    for column in columns:
        print(f"   {column}")


def run_checks(
    repo: SchemaRepository,
    tables: Iterable[str] = VERIFY_TABLES,
    structure_table: str = VERIFY_STRUCTURE_TABLE,
) -> int:
    """
    Run every check in order and return the process exit code.
    Only a dirty migration marker stops the run early.
    """
    check_tables(repo, tables)
    check_structure(repo, structure_table)

    try:
        state = repo.get_migration_state()
    except RepositoryError as e:
        logger.warning(f"Could not check migration version: {e}")
    else:
        if state is None:
            logger.warning("schema_migrations holds no version row")
        else:
            print(
                f"\nMigration version: {state.version}, "
                f"dirty: {str(state.dirty).lower()}"
            )
            if state.dirty:
                print("Database is in dirty state - some migration failed")
                return EXIT_DIRTY

    print("\nAll migrations applied successfully! Database schema is ready.")
    return EXIT_OK


def main() -> None:
    """Connect, verify and exit with the resulting status."""
    try:
        init_pool(VERIFY_DB)
        ping()
    except psycopg2.Error as e:
        logger.critical(f"Failed to connect to database: {e}")
        close_pool()
        sys.exit(EXIT_CONNECTION)
    print("Successfully connected to database")

    try:
        code = run_checks(SchemaRepository(VERIFY_SCHEMA))
    finally:
        close_pool()
    sys.exit(code)


if __name__ == "__main__":
    main()
