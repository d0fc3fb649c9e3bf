"""
main.py
-------
Entry point for the CRUD / transfer demo.

Responsibilities:
    - Initialize the database connection pool and bootstrap the schema.
    - Walk through list, lookup, insert and transfer operations.
    - Show the error paths of a failing transfer.
"""

import sys
from decimal import Decimal
from typing import Iterable

import psycopg2

from config import DEMO_DB
from db.connection import close_pool, init_pool, ping
from db.init_db import apply_initial_schema
from models.user import User
from repositories.errors import RepositoryError
from repositories.user_repo import UserRepository
from utils.logger import get_logger

logger = get_logger(__name__)


def print_users(users: Iterable[User], verbose: bool = True) -> None:
    for user in users:
        if verbose:
            print(
                f"   ID: {user.id}, Name: {user.name}, Email: {user.email}, "
                f"Balance: ${user.balance:.2f}"
            )
        else:
            print(f"   {user.name}: ${user.balance:.2f}")


def run_demo(repo: UserRepository) -> None:
    """Run the demo steps; a failing step is logged and the next one runs."""
    print("\n=== DEMO CRUD OPERATIONS ===")

    print("\n1. GetAllUsers:")
    try:
        print_users(repo.get_all())
    except RepositoryError as e:
        logger.error(f"Error: {e}")

    print("\n2. GetUserByID (ID: 1):")
    try:
        user = repo.get_by_id(1)
        print(f"   User: {user.name}, Balance: ${user.balance:.2f}")
    except RepositoryError as e:
        logger.error(f"Error: {e}")

    print("\n3. InsertUser:")
    try:
        repo.add(User(name="Eve Wilson", email="eve@example.com", balance=Decimal("300.00")))
        print("   New user inserted successfully")
    except RepositoryError as e:
        logger.error(f"Error: {e}")

    print("\n4. TransferBalance ($100 from Alice to Bob):")
    try:
        repo.transfer_balance(1, 2, Decimal("100.00"))
        print("   Transfer completed successfully")
    except RepositoryError as e:
        logger.error(f"Error: {e}")

    print("\n5. Final user balances:")
    try:
        print_users(repo.get_all(), verbose=False)
    except RepositoryError as e:
        logger.error(f"Error: {e}")

    print("\n=== TESTING ERROR CASES ===")

    print("6. Transfer with insufficient balance:")
    try:
        repo.transfer_balance(1, 2, Decimal("5000.00"))
        print("   Unexpected success")
    except RepositoryError as e:
        print(f"   Expected error: {e}")

    print("7. Transfer to non-existent user:")
    try:
        repo.transfer_balance(1, 999, Decimal("10.00"))
        print("   Unexpected success")
    except RepositoryError as e:
        print(f"   Expected error: {e}")


def main() -> None:
    """Connect, bootstrap and run the demo."""

    # ── 1. Database setup ─────────────────────────────────
    try:
        init_pool(DEMO_DB)
        ping()
    except psycopg2.Error as e:
        logger.critical(f"Failed to connect to database: {e}")
        close_pool()
        sys.exit(1)
    print(" Successfully connected to PostgreSQL database")

    try:
        # ── 2. Schema bootstrap ───────────────────────────
        try:
            apply_initial_schema()
        except RepositoryError as e:
            logger.critical(f"Failed to apply initial schema: {e}")
            sys.exit(1)

        # ── 3. Demo ───────────────────────────────────────
        run_demo(UserRepository())
    finally:
        close_pool()


if __name__ == "__main__":
    main()
