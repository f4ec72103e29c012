"""
PostgreSQL key-value store adapter - Implements KeyValueStore protocol.

Stores session records in the ``session_store`` table with an absolute
``expires_at`` per key. Expiry is enforced with database time in every
read; expired rows are purged lazily on write.

Conditional updates compare the stored text value inside a single UPDATE
statement, so concurrent writers are serialized by PostgreSQL row locking
and exactly one of them wins.
"""

import logging
from datetime import datetime

from psycopg_pool import ConnectionPool

logger = logging.getLogger(__name__)


def glob_to_like(pattern: str) -> str:
    """
    Translate a glob pattern (``*``, ``?``) to a SQL LIKE pattern.

    LIKE metacharacters in the literal parts are escaped with backslash.
    """
    out = []
    for char in pattern:
        if char == "*":
            out.append("%")
        elif char == "?":
            out.append("_")
        elif char in ("%", "_", "\\"):
            out.append("\\" + char)
        else:
            out.append(char)
    return "".join(out)


class PostgresKeyValueStore:
    """
    Implements KeyValueStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def get(self, key: str) -> str | None:
        sql = """
            SELECT value FROM session_store
            WHERE key = %s AND expires_at > NOW()
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (key,))
            row = cursor.fetchone()
        return row[0] if row is not None else None

    def set(self, key: str, value: str, expires_at: datetime) -> None:
        """Upsert ``key`` with an absolute expiry and purge lapsed rows."""
        upsert_sql = """
            INSERT INTO session_store (key, value, expires_at)
            VALUES (%s, %s, %s)
            ON CONFLICT (key) DO UPDATE
            SET value = EXCLUDED.value,
                expires_at = EXCLUDED.expires_at
        """
        purge_sql = "DELETE FROM session_store WHERE expires_at <= NOW()"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(purge_sql)
            if cursor.rowcount:
                logger.debug("Purged %d expired session entries", cursor.rowcount)
            cursor.execute(upsert_sql, (key, value, expires_at))
            conn.commit()

    def compare_and_set(self, key: str, expected: str, value: str, expires_at: datetime) -> bool:
        """
        Replace the value only if it still equals ``expected``.

        Returns:
            True if exactly one row was updated
        """
        sql = """
            UPDATE session_store
            SET value = %s, expires_at = %s
            WHERE key = %s AND value = %s AND expires_at > NOW()
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (value, expires_at, key, expected))
            conn.commit()
            return cursor.rowcount == 1

    def keys(self, pattern: str) -> list[str]:
        sql = """
            SELECT key FROM session_store
            WHERE key LIKE %s AND expires_at > NOW()
            ORDER BY key
        """
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (glob_to_like(pattern),))
            return [row[0] for row in cursor.fetchall()]
