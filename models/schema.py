"""
models/schema.py
----------------
Read-only views of database catalog data used by the schema verifier.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ColumnInfo:
    """One column as reported by information_schema.columns."""
    name: str
    data_type: str
    is_nullable: str  # 'YES' | 'NO'

    @property
    def nullable(self) -> bool:
        return self.is_nullable == "YES"

    def __str__(self) -> str:
        return f"{self.name}: {self.data_type} ({self.is_nullable})"


@dataclass(frozen=True)
class MigrationState:
    """
    The marker row written by the external migration tool.

    Attributes:
        version: Last migration applied.
        dirty: True when that migration failed midway.
    """
    version: int
    dirty: bool
