"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.

Database settings are grouped into a `DatabaseConfig` value that is passed
explicitly to `db.connection.init_pool()`, so each program (and each test)
can point at its own database.
"""

import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from dotenv import load_dotenv

load_dotenv()


def _split_csv(raw: str) -> list[str]:
    """Split a comma separated env value, dropping blanks."""
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class DatabaseConfig:
    """
    Connection settings for one PostgreSQL database.

    Attributes:
        host, port, name, user, password: Server address and credentials.
        sslmode: libpq SSL mode (e.g. 'disable', 'require').
        connect_timeout: Seconds libpq waits for a connection.
        min_conn: Connections the pool opens up front.
        max_conn: Upper bound on open pooled connections.
        url: Full connection URL; overrides the individual fields when set.
    """
    host: str = "localhost"
    port: int = 5432
    name: str = "postgres"
    user: str = "postgres"
    password: str = ""
    sslmode: str = "disable"
    connect_timeout: int = 10
    min_conn: int = 1
    max_conn: int = 5
    url: Optional[str] = None

    @property
    def dsn(self) -> str:
        """The connection string handed to psycopg2."""
        if self.url:
            return self.url
        credentials = quote(self.user, safe="")
        if self.password:
            credentials += ":" + quote(self.password, safe="")
        return (
            f"postgresql://{credentials}@{self.host}:{self.port}/{self.name}"
            f"?sslmode={self.sslmode}&connect_timeout={self.connect_timeout}"
        )

    @classmethod
    def from_env(cls, prefix: str, **defaults) -> "DatabaseConfig":
        """
        Build a config from `<prefix>HOST`, `<prefix>PORT`, ... variables.

        Args:
            prefix: Env variable prefix, e.g. 'DB_' or 'VERIFY_DB_'.
            **defaults: Field values used when a variable is unset.
        """
        base = cls(**defaults)

        def env(key: str, fallback) -> str:
            return os.getenv(f"{prefix}{key}", str(fallback))

        return cls(
            host=env("HOST", base.host),
            port=int(env("PORT", base.port)),
            name=env("NAME", base.name),
            user=env("USER", base.user),
            password=env("PASS", base.password),
            sslmode=env("SSLMODE", base.sslmode),
            connect_timeout=int(env("CONNECT_TIMEOUT", base.connect_timeout)),
            min_conn=int(env("POOL_MIN", base.min_conn)),
            max_conn=int(env("POOL_MAX", base.max_conn)),
            url=os.getenv(f"{prefix}URL") or base.url,
        )


# ── CRUD demo database ────────────────────────────────────
DEMO_DB: DatabaseConfig = DatabaseConfig.from_env(
    "DB_",
    port=5433,
    name="practice4",
    user="postgres4",
    password="postgres4",
    min_conn=1,
    max_conn=10,
)

# ── Schema verifier ───────────────────────────────────────
VERIFY_DB: DatabaseConfig = DatabaseConfig.from_env(
    "VERIFY_DB_",
    port=5432,
    name="expense_tracker",
    user="postgres",
    min_conn=1,
    max_conn=1,
)

VERIFY_TABLES: list[str] = _split_csv(
    os.getenv("VERIFY_TABLES", "users,categories,expenses")
)
VERIFY_STRUCTURE_TABLE: str = os.getenv("VERIFY_STRUCTURE_TABLE", "users")
VERIFY_SCHEMA: str = os.getenv("VERIFY_SCHEMA", "public")

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
