"""
PostgreSQL repository adapter - Implements AffiliateRepository protocol.

This module provides the PostgreSQL implementation of the domain's
durable affiliate port using psycopg3 with raw SQL.

Only a handful of columns are first-class (identity, contact address and
the system-owned status fields); the rest of the applicant payload is kept
in a ``profile`` JSONB column. The applicant password is hashed with bcrypt
before insert and never returned.
"""

import logging
from pathlib import Path
from typing import Any

import bcrypt
from psycopg import errors, sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from onboarding.domain.exceptions import RegistrationConflict

logger = logging.getLogger(__name__)

_COLUMNS = (
    "email",
    "organization_name",
    "account_status",
    "privilege",
    "access_modifier",
    "active_member",
)

# Fields that may change after creation
SYSTEM_FIELDS = frozenset({"account_status", "privilege", "access_modifier", "active_member"})

_RETURNING = """
    RETURNING id::text AS id, email, organization_name, account_status,
              privilege, access_modifier, active_member, profile,
              created_at, updated_at
"""


def hash_password(password: str, cost: int = 10) -> str:
    """Hash password using bcrypt with the given cost factor."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=cost)).decode()


def split_affiliate_data(data: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any], str | None]:
    """Split a create payload into (columns, profile, password)."""
    remaining = dict(data)
    password = remaining.pop("password", None)
    columns = {name: remaining.pop(name, None) for name in _COLUMNS}
    return columns, remaining, password


class PostgresAffiliateRepository:
    """
    Implements AffiliateRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool, bcrypt_cost: int = 10) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            bcrypt_cost: bcrypt work factor for applicant passwords
        """
        self._pool = pool
        self._bcrypt_cost = bcrypt_cost

    def email_exists(self, email: str) -> bool:
        query = "SELECT 1 FROM affiliates WHERE email = %s"
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(query, (email,))
            return cursor.fetchone() is not None

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a durable affiliate.

        The UNIQUE constraint on email makes a concurrent duplicate fail
        with RegistrationConflict instead of creating a second record.
        """
        columns, profile, password = split_affiliate_data(data)
        password_hash = hash_password(password, self._bcrypt_cost) if password else None

        query = (
            """
            INSERT INTO affiliates (email, organization_name, account_status, privilege,
                                    access_modifier, active_member, password_hash, profile)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            """
            + _RETURNING
        )
        params = (
            columns["email"],
            columns["organization_name"],
            columns["account_status"],
            columns["privilege"],
            columns["access_modifier"],
            bool(columns["active_member"]),
            password_hash,
            Jsonb(profile),
        )

        try:
            with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
                cursor.execute(query, params)
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as e:
            raise RegistrationConflict(
                "Email address is already registered with another affiliate"
            ) from e

        logger.info("Created affiliate %s", row["id"])
        return dict(row)

    def update(self, affiliate_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """
        Update system-owned fields of an affiliate.

        Raises:
            ValueError: If a non-system field is passed
            LookupError: If the affiliate does not exist
        """
        unknown = set(fields) - SYSTEM_FIELDS
        if unknown:
            raise ValueError(f"Cannot update non-system fields: {sorted(unknown)}")

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = {}").format(sql.Identifier(name), sql.Placeholder())
            for name in fields
        )
        query = sql.SQL(
            "UPDATE affiliates SET {}, updated_at = NOW() WHERE id::text = %s" + _RETURNING
        ).format(assignments)

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(query, (*fields.values(), affiliate_id))
            row = cursor.fetchone()
            conn.commit()

        if row is None:
            raise LookupError(f"Affiliate not found: {affiliate_id}")
        return dict(row)

    def get(self, affiliate_id: str) -> dict[str, Any] | None:
        query = """
            SELECT id::text AS id, email, organization_name, account_status,
                   privilege, access_modifier, active_member, profile,
                   created_at, updated_at
            FROM affiliates
            WHERE id::text = %s
        """
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(query, (affiliate_id,))
            row = cursor.fetchone()
        return dict(row) if row is not None else None


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: onboarding/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
