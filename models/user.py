"""
models/user.py
--------------
Domain model for an account holder and their balance.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class User:
    """
    Represents a single row of the users table.

    Attributes:
        name: Display name.
        email: Unique email address.
        balance: Money held, fixed-point with two decimals.
        id: Database primary key (None for new records).
    """
    name: str
    email: str
    balance: Decimal = Decimal("0.00")
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.balance, Decimal):
            self.balance = Decimal(str(self.balance))

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>: ${self.balance:.2f}"
