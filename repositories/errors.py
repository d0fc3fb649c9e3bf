"""
repositories/errors.py
----------------------
Exceptions raised by the data access layer.

Driver errors are never leaked bare: repositories re-raise them as
`RepositoryError` (or a subclass) with a message naming the failed
operation, keeping the psycopg2 error as `__cause__`.
"""

from decimal import Decimal


class RepositoryError(Exception):
    """A database operation failed."""


class InvalidAmountError(RepositoryError, ValueError):
    """A transfer amount was zero or negative."""


class UserNotFoundError(RepositoryError):
    """No user row exists for the requested ID."""

    def __init__(self, user_id: int, message: str | None = None):
        self.user_id = user_id
        super().__init__(message or f"user with ID {user_id} not found")


class SenderNotFoundError(UserNotFoundError):
    def __init__(self, user_id: int):
        super().__init__(user_id, f"sender with ID {user_id} not found")


class ReceiverNotFoundError(UserNotFoundError):
    def __init__(self, user_id: int):
        super().__init__(user_id, f"receiver with ID {user_id} not found")


class InsufficientBalanceError(RepositoryError):
    """The sender cannot cover the requested amount."""

    def __init__(self, available: Decimal, requested: Decimal):
        self.available = available
        self.requested = requested
        super().__init__(
            f"insufficient balance: sender has ${available:.2f}, "
            f"tried to send ${requested:.2f}"
        )


class DuplicateEmailError(RepositoryError):
    """Another user already owns this email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"failed to insert user: email {email!r} already exists")
