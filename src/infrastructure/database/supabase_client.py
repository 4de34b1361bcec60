from __future__ import annotations

import secrets
import threading
import uuid
from datetime import UTC, datetime
from typing import Any

from supabase import Client, ClientOptions, create_client

from src.domain.entities.identity import IdentityEntity, SessionEntity, SignUpResult
from src.domain.exceptions import IdentityServiceError
from src.infrastructure.config import Settings
from src.infrastructure.logging import get_logger

logger = get_logger(__name__)


def create_supabase_client(settings: Settings) -> Client | None:
    """Build the one client shared by every request, or None in in-memory mode."""
    if settings.supabase_disabled:
        return None
    if not settings.supabase_configured:
        logger.warning("SUPABASE_URL/SUPABASE_KEY not set, using in-memory backends")
        return None
    # Sessions must not stick to the shared client between requests
    options = ClientOptions(auto_refresh_token=False, persist_session=False)
    return create_client(settings.supabase_url, settings.supabase_key, options=options)


def _error_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)


def _user_to_entity(user: Any) -> IdentityEntity:
    raw = user.model_dump(mode="json") if hasattr(user, "model_dump") else dict(user)
    return IdentityEntity(id=str(user.id), email=user.email, raw=raw)


class SupabaseIdentityService:
    """Identity operations backed by Supabase Auth.

    When no client is given (SUPABASE_DISABLED=1 or missing credentials) the
    identities live in an in-memory dict owned by this instance.
    """

    def __init__(self, client: Client | None) -> None:
        self.client = client
        self._lock = threading.Lock()
        self._mem: dict[str, dict[str, Any]] = {}

    @property
    def disabled(self) -> bool:
        return self.client is None

    def create_identity(self, email: str, password: str) -> SignUpResult:
        if self.disabled:
            return self._mem_create(email, password)
        try:
            res = self.client.auth.sign_up({"email": email, "password": password})
        except Exception as exc:
            raise IdentityServiceError(_error_message(exc)) from exc
        if res.user is None:
            raise IdentityServiceError("Identity service did not return a user")
        session = res.session.model_dump(mode="json") if res.session else None
        return SignUpResult(user=_user_to_entity(res.user), session=session)

    def authenticate(self, email: str, password: str) -> SessionEntity:
        if self.disabled:
            return self._mem_authenticate(email, password)
        try:
            res = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:
            raise IdentityServiceError(_error_message(exc)) from exc
        if res.session is None or res.user is None:
            raise IdentityServiceError("Identity service did not return a session")
        return SessionEntity(access_token=res.session.access_token, user=_user_to_entity(res.user))

    def get_identity(self, identity_id: str) -> IdentityEntity:
        if self.disabled:
            with self._lock:
                record = self._mem.get(identity_id)
            if record is None:
                raise IdentityServiceError("User not found")
            return self._mem_entity(record)
        try:
            res = self.client.auth.admin.get_user_by_id(identity_id)
        except Exception as exc:
            raise IdentityServiceError(_error_message(exc)) from exc
        if res is None or res.user is None:
            raise IdentityServiceError("User not found")
        return _user_to_entity(res.user)

    def delete_identity(self, identity_id: str) -> None:
        if self.disabled:
            with self._lock:
                if self._mem.pop(identity_id, None) is None:
                    raise IdentityServiceError("User not found")
            return
        try:
            self.client.auth.admin.delete_user(identity_id)
        except Exception as exc:
            raise IdentityServiceError(_error_message(exc)) from exc

    # In-memory mode

    @staticmethod
    def _mem_entity(record: dict[str, Any]) -> IdentityEntity:
        raw = {
            "id": record["id"],
            "email": record["email"],
            "created_at": record["created_at"],
            "aud": "authenticated",
            "role": "authenticated",
        }
        return IdentityEntity(id=record["id"], email=record["email"], raw=raw)

    def _mem_create(self, email: str, password: str) -> SignUpResult:
        if not email or not password:
            raise IdentityServiceError("Signup requires a valid email and password")
        normalized = email.strip().lower()
        with self._lock:
            if any(r["email"] == normalized for r in self._mem.values()):
                raise IdentityServiceError("User already registered")
            record = {
                "id": str(uuid.uuid4()),
                "email": normalized,
                "password": password,
                "created_at": datetime.now(UTC).isoformat(),
            }
            self._mem[record["id"]] = record
        return SignUpResult(user=self._mem_entity(record), session=None)

    def _mem_authenticate(self, email: str, password: str) -> SessionEntity:
        normalized = (email or "").strip().lower()
        with self._lock:
            record = next((r for r in self._mem.values() if r["email"] == normalized), None)
        if record is None or not secrets.compare_digest(
            record["password"].encode(), (password or "").encode()
        ):
            raise IdentityServiceError("Invalid login credentials")
        token = f"fake-{secrets.token_urlsafe(24)}"
        return SessionEntity(access_token=token, user=self._mem_entity(record))
