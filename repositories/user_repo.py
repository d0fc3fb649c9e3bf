"""
repositories/user_repo.py
--------------------------
Data access layer for user records and balance transfers.
All SQL queries related to the `users` table live here.
"""

from decimal import Decimal, InvalidOperation

import psycopg2
from psycopg2 import errors

from db.connection import get_connection, release_connection
from models.user import User
from repositories.errors import (
    DuplicateEmailError,
    InsufficientBalanceError,
    InvalidAmountError,
    ReceiverNotFoundError,
    RepositoryError,
    SenderNotFoundError,
    UserNotFoundError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """
    Convert `value` to a Decimal the NUMERIC(10,2) balance column stores exactly.

    Raises:
        InvalidAmountError: Not a number, not finite, or finer than a cent.
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidAmountError(f"amount {value!r} is not a number") from e
    if not amount.is_finite():
        raise InvalidAmountError(f"amount {value!r} is not a finite number")
    try:
        exact = amount == amount.quantize(CENT)
    except InvalidOperation as e:
        raise InvalidAmountError(f"amount {value!r} is out of range") from e
    if not exact:
        raise InvalidAmountError(f"amount {value!r} has more than two decimal places")
    return amount


class UserRepository:
    """Repository for CRUD operations on the users table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, user: User) -> User:
        """
        Insert a new user.

        Args:
            user: The User to persist; its `id` is ignored.

        Returns:
            The same User with its database-assigned `id` populated.

        Raises:
            InvalidAmountError: If the balance is not a whole number of cents.
            DuplicateEmailError: If the email is already taken.
            RepositoryError: On any other database failure.
        """
        sql = """
            INSERT INTO users (name, email, balance)
            VALUES (%s, %s, %s)
            RETURNING id;
        """
        user.balance = to_money(user.balance)
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user.name, user.email, user.balance))
                user.id = cur.fetchone()[0]
            conn.commit()
            logger.info(f"Added user #{user.id} ({user.email})")
            return user
        except errors.UniqueViolation as e:
            conn.rollback()
            logger.error(f"Failed to add user {user.email}: {e}")
            raise DuplicateEmailError(user.email) from e
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Failed to add user {user.email}: {e}")
            raise RepositoryError(f"failed to insert user: {e}") from e
        finally:
            release_connection(conn)

    # ── READ ──────────────────────────────────────────────

    def get_all(self) -> list[User]:
        """Fetch every user, ordered by ascending ID."""
        sql = "SELECT id, name, email, balance FROM users ORDER BY id;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
                return [self._row_to_user(r) for r in cur.fetchall()]
        except psycopg2.Error as e:
            raise RepositoryError(f"failed to get users: {e}") from e
        finally:
            release_connection(conn)

    def get_by_id(self, user_id: int) -> User:
        """
        Fetch a single user by primary key.

        Raises:
            UserNotFoundError: If no such row exists.
        """
        sql = "SELECT id, name, email, balance FROM users WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (user_id,))
                row = cur.fetchone()
        except psycopg2.Error as e:
            raise RepositoryError(f"failed to get user with ID {user_id}: {e}") from e
        finally:
            release_connection(conn)
        if row is None:
            raise UserNotFoundError(user_id)
        return self._row_to_user(row)

    # ── TRANSFER ──────────────────────────────────────────

    def transfer_balance(self, from_id: int, to_id: int, amount) -> None:
        """
        Move `amount` from one user to another in a single transaction.

        Both rows are locked with FOR UPDATE before either balance is
        changed, so concurrent transfers touching the same users serialize
        on those rows instead of overwriting each other's result.

        Args:
            from_id: Sender user ID.
            to_id: Receiver user ID.
            amount: Positive amount; floats and strings are converted to
                Decimal.

        Raises:
            InvalidAmountError: amount <= 0, not finite or finer than a
                cent (no database call is made).
            SenderNotFoundError / ReceiverNotFoundError: missing user.
            InsufficientBalanceError: sender balance below amount.
            RepositoryError: any driver failure; the transaction is rolled
                back and no balance changes.
        """
        amount = to_money(amount)
        if amount <= 0:
            raise InvalidAmountError("amount must be positive")

        conn = get_connection()
        step = "begin transaction"
        try:
            with conn.cursor() as cur:
                step = "read sender balance"
                cur.execute(
                    "SELECT balance FROM users WHERE id = %s FOR UPDATE;",
                    (from_id,),
                )
                row = cur.fetchone()
                if row is None:
                    raise SenderNotFoundError(from_id)
                available = row[0]
                if available < amount:
                    raise InsufficientBalanceError(available, amount)

                step = "check receiver"
                cur.execute(
                    "SELECT id FROM users WHERE id = %s FOR UPDATE;",
                    (to_id,),
                )
                if cur.fetchone() is None:
                    raise ReceiverNotFoundError(to_id)

                step = "deduct from sender"
                cur.execute(
                    "UPDATE users SET balance = balance - %s WHERE id = %s;",
                    (amount, from_id),
                )
                step = "add to receiver"
                cur.execute(
                    "UPDATE users SET balance = balance + %s WHERE id = %s;",
                    (amount, to_id),
                )
            step = "commit transaction"
            conn.commit()
            logger.info(f"Transferred ${amount:.2f} from user #{from_id} to user #{to_id}")
        except RepositoryError as e:
            conn.rollback()
            logger.warning(f"Transfer {from_id} -> {to_id} rejected: {e}")
            raise
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Transfer {from_id} -> {to_id} failed to {step}: {e}")
            raise RepositoryError(f"failed to {step}: {e}") from e
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_user(row: tuple) -> User:
        """Map an (id, name, email, balance) row to a User."""
        return User(id=row[0], name=row[1], email=row[2], balance=row[3])
