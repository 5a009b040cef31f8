"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Confirmed registrations are written with a single parameterized
INSERT, so a failure leaves no partial row and needs no explicit
transaction management beyond the commit. Rows are never updated or
deleted here.
"""

import logging
from pathlib import Path

import psycopg
from psycopg_pool import ConnectionPool, PoolTimeout

from otpgate.domain.exceptions import StorageFailed
from otpgate.domain.models import DurableUserRecord

logger = logging.getLogger(__name__)


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def insert(self, record: DurableUserRecord) -> int:
        """
        Insert one confirmed registration.

        Args:
            record: Row built from the confirmed identity and its auth token

        Returns:
            Generated row id

        Raises:
            StorageFailed: On any database or pool error
        """
        sql = """
            INSERT INTO registered_users
                (name, email, mobile, password, city, age,
                 file_name, org_name, file_path, role_type, token)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id
        """
        values = (
            record.name,
            record.email,
            record.mobile,
            record.password_hash,
            record.city,
            record.age,
            record.file_name,
            record.original_file_name,
            record.file_path,
            record.role,
            record.auth_token,
        )

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, values)
                row = cursor.fetchone()
                conn.commit()
        except (psycopg.Error, PoolTimeout) as e:
            logger.error("Failed to store registration for %s: %s", record.email, e)
            raise StorageFailed() from e

        return row[0]

    def count_by_email(self, email: str) -> int:
        """Number of stored registrations for an email address."""
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("SELECT COUNT(*) FROM registered_users WHERE email = %s", (email,))
            return cursor.fetchone()[0]


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: otpgate/adapters/repository/postgres.py -> migrations/
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
