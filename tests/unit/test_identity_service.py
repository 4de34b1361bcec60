from __future__ import annotations

from unittest.mock import Mock

import pytest

from src.domain.exceptions import IdentityServiceError
from src.infrastructure.config import Settings
from src.infrastructure.database.supabase_client import (
    SupabaseIdentityService,
    create_supabase_client,
)


class FakeAuthApiError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def make_user(user_id="user-1", email="ada@lovelace.io"):
    user = Mock()
    user.id = user_id
    user.email = email
    user.model_dump.return_value = {"id": user_id, "email": email, "aud": "authenticated"}
    return user


class TestInMemoryIdentityService:
    def test_create_and_lookup(self):
        service = SupabaseIdentityService(None)
        result = service.create_identity("Ada@Lovelace.io", "pw")

        assert result.session is None
        assert result.user.email == "ada@lovelace.io"
        assert service.get_identity(result.user.id).email == "ada@lovelace.io"

    def test_duplicate_email_rejected(self):
        service = SupabaseIdentityService(None)
        service.create_identity("ada@lovelace.io", "pw")
        with pytest.raises(IdentityServiceError, match="User already registered"):
            service.create_identity("ada@lovelace.io", "other")

    def test_authenticate(self):
        service = SupabaseIdentityService(None)
        created = service.create_identity("ada@lovelace.io", "pw")

        session = service.authenticate("ada@lovelace.io", "pw")
        assert session.access_token
        assert session.user.id == created.user.id

        with pytest.raises(IdentityServiceError):
            service.authenticate("ada@lovelace.io", "wrong")
        with pytest.raises(IdentityServiceError):
            service.authenticate("nobody@lovelace.io", "pw")

    def test_delete(self):
        service = SupabaseIdentityService(None)
        created = service.create_identity("ada@lovelace.io", "pw")
        service.delete_identity(created.user.id)

        with pytest.raises(IdentityServiceError, match="User not found"):
            service.get_identity(created.user.id)
        with pytest.raises(IdentityServiceError, match="User not found"):
            service.delete_identity(created.user.id)


class TestSupabaseIdentityService:
    def test_sign_up_payload(self):
        client = Mock()
        session = Mock()
        session.model_dump.return_value = {"access_token": "jwt"}
        client.auth.sign_up.return_value = Mock(user=make_user(), session=session)

        result = SupabaseIdentityService(client).create_identity("ada@lovelace.io", "pw")

        client.auth.sign_up.assert_called_once_with({"email": "ada@lovelace.io", "password": "pw"})
        assert result.to_payload() == {
            "user": {"id": "user-1", "email": "ada@lovelace.io", "aud": "authenticated"},
            "session": {"access_token": "jwt"},
        }

    def test_sign_up_error_carries_provider_message(self):
        client = Mock()
        client.auth.sign_up.side_effect = FakeAuthApiError("User already registered")

        with pytest.raises(IdentityServiceError) as excinfo:
            SupabaseIdentityService(client).create_identity("ada@lovelace.io", "pw")
        assert excinfo.value.message == "User already registered"
        assert excinfo.value.status_code == 500

    def test_sign_in(self):
        client = Mock()
        client.auth.sign_in_with_password.return_value = Mock(
            user=make_user(), session=Mock(access_token="jwt")
        )

        session = SupabaseIdentityService(client).authenticate("ada@lovelace.io", "pw")
        assert session.access_token == "jwt"
        assert session.user.raw["id"] == "user-1"

    def test_sign_in_error(self):
        client = Mock()
        client.auth.sign_in_with_password.side_effect = FakeAuthApiError("Invalid login credentials")

        with pytest.raises(IdentityServiceError, match="Invalid login credentials"):
            SupabaseIdentityService(client).authenticate("ada@lovelace.io", "bad")

    def test_admin_lookup_and_delete(self):
        client = Mock()
        client.auth.admin.get_user_by_id.return_value = Mock(user=make_user(email="new@lovelace.io"))
        service = SupabaseIdentityService(client)

        assert service.get_identity("user-1").email == "new@lovelace.io"
        service.delete_identity("user-1")
        client.auth.admin.delete_user.assert_called_once_with("user-1")

    def test_admin_errors_wrapped(self):
        client = Mock()
        client.auth.admin.get_user_by_id.side_effect = FakeAuthApiError("User not allowed")
        client.auth.admin.delete_user.side_effect = RuntimeError("boom")
        service = SupabaseIdentityService(client)

        with pytest.raises(IdentityServiceError, match="User not allowed"):
            service.get_identity("user-1")
        with pytest.raises(IdentityServiceError, match="boom"):
            service.delete_identity("user-1")


def test_no_client_when_disabled_or_unconfigured():
    assert create_supabase_client(Settings(supabase_disabled=True, supabase_url="u", supabase_key="k")) is None
    assert create_supabase_client(Settings()) is None
