"""Pytest fixtures: an in-memory stand-in for the psycopg2 connections used by the repositories."""
import copy
import re
from decimal import Decimal

import psycopg2
import pytest
from psycopg2 import errors

_SEED_ROW = re.compile(r"\('([^']*)', '([^']*)', ([\d.]+)\)")

SEED_USERS = [
    ("Alice Johnson", "alice@example.com", Decimal("1000.00")),
    ("Bob Smith", "bob@example.com", Decimal("500.00")),
    ("Charlie Brown", "charlie@example.com", Decimal("750.00")),
    ("Diana Prince", "diana@example.com", Decimal("1200.00")),
]


class FakeUsersDB:
    """Committed state of a one-table database."""

    def __init__(self, table_exists: bool = True) -> None:
        self.table_exists = table_exists
        self.rows: dict[int, dict] = {}
        self.next_id = 1
        self.fail_on: str | None = None
        self.connections: list["FakeConnection"] = []

    def insert(self, name: str, email: str, balance: Decimal, user_id: int | None = None) -> int:
        user_id = user_id or self.next_id
        self.rows[user_id] = {"id": user_id, "name": name, "email": email, "balance": Decimal(balance)}
        self.next_id = max(self.next_id, user_id + 1)
        return user_id

    def balances(self) -> dict[int, Decimal]:
        return {user_id: row["balance"] for user_id, row in self.rows.items()}

    def executed(self) -> list[str]:
        return [text for conn in self.connections for text, _ in conn.executed]


class FakeConnection:
    """Each transaction works on a private copy; commit publishes it, rollback drops it."""

    def __init__(self, db: FakeUsersDB) -> None:
        self.db = db
        self.working: dict | None = None
        self.executed: list[tuple[str, tuple | None]] = []
        self.commits = 0
        self.rollbacks = 0
        self.released = False

    def cursor(self) -> "FakeCursor":
        return FakeCursor(self)

    def begin(self) -> dict:
        if self.working is None:
            self.working = {
                "rows": copy.deepcopy(self.db.rows),
                "next_id": self.db.next_id,
                "table_exists": self.db.table_exists,
            }
        return self.working

    def commit(self) -> None:
        if self.working is not None:
            self.db.rows = self.working["rows"]
            self.db.next_id = self.working["next_id"]
            self.db.table_exists = self.working["table_exists"]
        self.working = None
        self.commits += 1

    def rollback(self) -> None:
        self.working = None
        self.rollbacks += 1


class FakeCursor:
    def __init__(self, conn: FakeConnection) -> None:
        self.conn = conn
        self._result: list[tuple] = []
        self.rowcount = -1

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc) -> bool:
        return False

    def fetchone(self):
        return self._result.pop(0) if self._result else None

    def fetchall(self):
        result, self._result = self._result, []
        return result

    def execute(self, query: str, params: tuple | None = None) -> None:
        text = " ".join(line for line in query.split("\n") if not line.strip().startswith("--"))
        text = " ".join(text.split())
        self.conn.executed.append((text, params))
        if self.conn.db.fail_on and text.startswith(self.conn.db.fail_on):
            raise psycopg2.OperationalError(f"simulated failure on: {text}")

        tx = self.conn.begin()
        rows = tx["rows"]

        if text.startswith("SELECT EXISTS"):
            self._result = [(tx["table_exists"],)]
            return
        if text.startswith("CREATE TABLE users"):
            tx["table_exists"] = True
            self._result = []
            return
        if not tx["table_exists"]:
            raise errors.UndefinedTable('relation "users" does not exist')

        if text.startswith("INSERT INTO users"):
            values = [(n, e, Decimal(b)) for n, e, b in _SEED_ROW.findall(text)] if params is None else [params]
            ids = []
            for name, email, balance in values:
                if any(row["email"] == email for row in rows.values()):
                    raise errors.UniqueViolation('duplicate key value violates unique constraint "users_email_key"')
                user_id = tx["next_id"]
                tx["next_id"] += 1
                rows[user_id] = {"id": user_id, "name": name, "email": email, "balance": Decimal(balance)}
                ids.append((user_id,))
            self._result = ids
            self.rowcount = len(ids)
        elif text.startswith("SELECT id, name, email, balance FROM users ORDER BY id"):
            self._result = [self._full(rows[k]) for k in sorted(rows)]
        elif text.startswith("SELECT id, name, email, balance FROM users WHERE id = %s"):
            row = rows.get(params[0])
            self._result = [self._full(row)] if row else []
        elif text.startswith("SELECT balance FROM users WHERE id = %s FOR UPDATE"):
            row = rows.get(params[0])
            self._result = [(row["balance"],)] if row else []
        elif text.startswith("SELECT id FROM users WHERE id = %s FOR UPDATE"):
            self._result = [(params[0],)] if params[0] in rows else []
        elif text.startswith("UPDATE users SET balance = balance - %s WHERE id = %s"):
            amount, user_id = params
            rows[user_id]["balance"] -= amount
            self.rowcount = 1
        elif text.startswith("UPDATE users SET balance = balance + %s WHERE id = %s"):
            amount, user_id = params
            rows[user_id]["balance"] += amount
            self.rowcount = 1
        else:
            raise AssertionError(f"unexpected SQL: {text}")

    @staticmethod
    def _full(row: dict) -> tuple:
        return (row["id"], row["name"], row["email"], row["balance"])


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeUsersDB()

    def get_connection():
        conn = FakeConnection(db)
        db.connections.append(conn)
        return conn

    def release_connection(conn):
        # Mirrors the pool: an open transaction is rolled back on putconn.
        if conn.working is not None:
            conn.rollback()
        conn.released = True

    for module in ("repositories.user_repo", "db.init_db"):
        monkeypatch.setattr(f"{module}.get_connection", get_connection)
        monkeypatch.setattr(f"{module}.release_connection", release_connection)
    return db


@pytest.fixture
def seeded_db(fake_db):
    for name, email, balance in SEED_USERS:
        fake_db.insert(name, email, balance)
    return fake_db
