"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Uniqueness of email addresses is enforced by the UNIQUE constraint on
users.email_address, not by the application. A violation surfaces as
DuplicateEmail; any other driver error surfaces as PersistenceError.
"""

import logging
from pathlib import Path

import psycopg
from psycopg import errors as pg_errors
from psycopg_pool import ConnectionPool

from src.domain.exceptions import DuplicateEmail, PersistenceError
from src.domain.user import User

logger = logging.getLogger(__name__)


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email_address: str) -> User | None:
        """
        Fetch one user by exact email address match.

        Args:
            email_address: Email address as submitted (no normalization)

        Returns:
            User if found, otherwise None
        """
        sql = """
            SELECT id, email_address, first_name, last_name, hashed_password
            FROM users
            WHERE email_address = %s
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (email_address,))
                row = cursor.fetchone()
        except psycopg.Error as e:
            raise PersistenceError("User lookup failed") from e

        if row is None:
            return None

        return User(
            id=row[0],
            email_address=row[1],
            first_name=row[2],
            last_name=row[3],
            hashed_password=row[4],
        )

    def save(self, user: User) -> User:
        """
        Insert a new user and assign its generated id.

        Args:
            user: Candidate user; hashed_password must already be set

        Returns:
            The same User instance with id populated

        Raises:
            DuplicateEmail: email_address already registered
            PersistenceError: any other database failure
        """
        if not user.hashed_password:
            raise ValueError("Refusing to save a user without a hashed password")

        sql = """
            INSERT INTO users (email_address, first_name, last_name, hashed_password, created_at, updated_at)
            VALUES (%s, %s, %s, %s, NOW(), NOW())
            RETURNING id
        """

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(
                    sql,
                    (user.email_address, user.first_name, user.last_name, user.hashed_password),
                )
                row = cursor.fetchone()
                conn.commit()
        except pg_errors.UniqueViolation as e:
            raise DuplicateEmail(user.email_address) from e
        except psycopg.Error as e:
            raise PersistenceError("User insert failed") from e

        user.id = row[0]
        return user


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
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
