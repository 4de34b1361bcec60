from __future__ import annotations

import threading
from datetime import UTC, datetime

from psycopg2 import sql
from supabase import Client

from src.domain.entities.profile import ProfileEntity
from src.domain.exceptions import ProfileStoreError
from src.infrastructure.database.postgres_client import PostgresClient


def _error_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)


class ProfileRepository:
    """Profile records keyed by auth user id.

    Backed by, in order of precedence: a local PostgreSQL pool, the in-memory
    dict (no Supabase client), or a Supabase table.
    """

    def __init__(
        self,
        client: Client | None,
        table: str = "users",
        pg_client: PostgresClient | None = None,
    ) -> None:
        self.client = client
        self.table = table
        self.pg_client = pg_client
        self._lock = threading.Lock()
        self._mem: dict[str, ProfileEntity] = {}

    @property
    def disabled(self) -> bool:
        return self.pg_client is None and self.client is None

    def _row_to_entity(self, row: dict, identity_id: str) -> ProfileEntity:
        """Convert database row to ProfileEntity."""
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)

        return ProfileEntity(
            identity_id=row.get("auth_user_id", identity_id),
            email=row.get("email"),
            fullname=row.get("fullname"),
            profile_picture=row.get("profile_picture"),
            created_at=created_at,
        )

    def insert(
        self,
        identity_id: str,
        email: str,
        fullname: str,
        profile_picture: str | None = None,
    ) -> None:
        # PostgreSQL mode
        if self.pg_client is not None:
            query = sql.SQL(
                """
                INSERT INTO {} (auth_user_id, email, fullname, profile_picture, created_at)
                VALUES (%s, %s, %s, %s, CURRENT_TIMESTAMP)
                RETURNING auth_user_id
                """
            ).format(sql.Identifier(self.table))
            try:
                self.pg_client.execute_insert(query, (identity_id, email, fullname, profile_picture))
            except Exception as exc:
                raise ProfileStoreError(f"PostgreSQL insert profile failed: {exc}") from exc
            return

        # In-memory mode
        if self.disabled:
            with self._lock:
                if identity_id in self._mem:
                    raise ProfileStoreError(
                        f'duplicate key value violates unique constraint "{self.table}_auth_user_id_key"'
                    )
                self._mem[identity_id] = ProfileEntity(
                    identity_id=identity_id,
                    email=email,
                    fullname=fullname,
                    profile_picture=profile_picture,
                    created_at=datetime.now(UTC),
                )
            return

        # Supabase mode
        row = {
            "auth_user_id": identity_id,
            "email": email,
            "fullname": fullname,
            "profile_picture": profile_picture,
        }
        try:
            self.client.table(self.table).insert([row]).execute()
        except Exception as exc:
            raise ProfileStoreError(_error_message(exc)) from exc

    def get(self, identity_id: str) -> ProfileEntity:
        """Return the single profile row for `identity_id`.

        Zero or several matching rows are a store failure, never an empty result.
        """
        # PostgreSQL mode
        if self.pg_client is not None:
            query = sql.SQL(
                """
                SELECT auth_user_id, email, fullname, profile_picture, created_at
                FROM {} WHERE auth_user_id = %s
                """
            ).format(sql.Identifier(self.table))
            try:
                rows = self.pg_client.execute_many(query, (identity_id,))
            except Exception as exc:
                raise ProfileStoreError(f"PostgreSQL select profile failed: {exc}") from exc
            if len(rows) != 1:
                raise ProfileStoreError(
                    f"Expected exactly one profile for {identity_id}, found {len(rows)}"
                )
            return self._row_to_entity(rows[0], identity_id)

        # In-memory mode
        if self.disabled:
            with self._lock:
                entity = self._mem.get(identity_id)
            if entity is None:
                raise ProfileStoreError(
                    "JSON object requested, multiple (or no) rows returned"
                )
            return entity

        # Supabase mode
        try:
            res = (
                self.client.table(self.table)
                .select("auth_user_id, fullname, profile_picture, email, created_at")
                .eq("auth_user_id", identity_id)
                .single()
                .execute()
            )
        except Exception as exc:
            raise ProfileStoreError(_error_message(exc)) from exc
        if not res.data:
            raise ProfileStoreError("JSON object requested, multiple (or no) rows returned")
        return self._row_to_entity(res.data, identity_id)

    def delete(self, identity_id: str) -> None:
        # PostgreSQL mode
        if self.pg_client is not None:
            query = sql.SQL("DELETE FROM {} WHERE auth_user_id = %s").format(sql.Identifier(self.table))
            try:
                self.pg_client.execute_update(query, (identity_id,))
            except Exception as exc:
                raise ProfileStoreError(f"PostgreSQL delete profile failed: {exc}") from exc
            return

        # In-memory mode
        if self.disabled:
            with self._lock:
                self._mem.pop(identity_id, None)
            return

        # Supabase mode
        try:
            self.client.table(self.table).delete().eq("auth_user_id", identity_id).execute()
        except Exception as exc:
            raise ProfileStoreError(_error_message(exc)) from exc
