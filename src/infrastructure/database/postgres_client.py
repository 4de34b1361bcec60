"""PostgreSQL client for running the profile store against a local database.

Used instead of Supabase tables when USE_LOCAL_DB=1. The schema lives in
sql/001_users.sql.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator

import psycopg2
from psycopg2 import pool, sql
from psycopg2.extras import RealDictCursor

from src.infrastructure.config import PostgresSettings


class PostgresClient:
    """PostgreSQL database client with connection pooling."""

    def __init__(self, settings: PostgresSettings, minconn: int = 1, maxconn: int = 10) -> None:
        try:
            self._pool = pool.SimpleConnectionPool(
                minconn=minconn,
                maxconn=maxconn,
                host=settings.host,
                port=settings.port,
                database=settings.database,
                user=settings.user,
                password=settings.password,
            )
        except psycopg2.Error as exc:  # pragma: no cover
            raise RuntimeError(f"Failed to initialize PostgreSQL connection pool: {exc}") from exc

    @contextmanager
    def get_cursor(self) -> Generator[Any, None, None]:
        """Yield a dict cursor inside a transaction.

        Commits on success, rolls back on any exception and always returns the
        connection to the pool.
        """
        conn = self._pool.getconn()
        try:
            cursor = conn.cursor(cursor_factory=RealDictCursor)
            try:
                yield cursor
            finally:
                cursor.close()
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def execute_many(self, query: str | sql.Composable, params: tuple = ()) -> list[dict[str, Any]]:
        with self.get_cursor() as cursor:
            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

    def execute_insert(self, query: str | sql.Composable, params: tuple = ()) -> dict[str, Any]:
        """Run an INSERT ... RETURNING and return the inserted row."""
        with self.get_cursor() as cursor:
            cursor.execute(query, params)
            result = cursor.fetchone()
            if not result:
                raise RuntimeError("Insert query did not return a row")
            return dict(result)

    def execute_update(self, query: str | sql.Composable, params: tuple = ()) -> int:
        """Run an UPDATE or DELETE and return the affected row count."""
        with self.get_cursor() as cursor:
            cursor.execute(query, params)
            return cursor.rowcount

    def close(self) -> None:
        self._pool.closeall()
