"""
Tests for the signup, signin, profile and delete use cases.
"""
from __future__ import annotations

from unittest.mock import Mock

import pytest

from src.application.use_cases.delete_user import DeleteUserUseCase
from src.application.use_cases.get_profile import GetCompleteProfileUseCase, GetProfileUseCase
from src.application.use_cases.signin import SigninUseCase
from src.application.use_cases.signup import SignupUseCase
from src.domain.entities.identity import IdentityEntity, SessionEntity, SignUpResult
from src.domain.entities.profile import ProfileEntity
from src.domain.exceptions import (
    IdentityServiceError,
    InvalidCredentialsError,
    ProfileStoreError,
)


@pytest.fixture
def identity():
    service = Mock()
    user = IdentityEntity(id="user-1", email="ada@lovelace.io", raw={"id": "user-1", "email": "ada@lovelace.io"})
    service.create_identity.return_value = SignUpResult(user=user, session=None)
    service.authenticate.return_value = SessionEntity(access_token="jwt", user=user)
    service.get_identity.return_value = user
    return service


@pytest.fixture
def profiles():
    repo = Mock()
    repo.get.return_value = ProfileEntity(
        identity_id="user-1",
        email="old@lovelace.io",
        fullname="Ada Lovelace",
        profile_picture="https://cdn.lovelace.io/ada.png",
    )
    return repo


class TestSignupUseCase:
    def test_creates_identity_then_profile(self, identity, profiles):
        result = SignupUseCase(identity, profiles).execute("ada@lovelace.io", "pw", "Ada Lovelace", None)

        assert result.to_payload() == {"user": {"id": "user-1", "email": "ada@lovelace.io"}, "session": None}
        identity.create_identity.assert_called_once_with("ada@lovelace.io", "pw")
        profiles.insert.assert_called_once_with("user-1", "ada@lovelace.io", "Ada Lovelace", None)

    def test_identity_failure_skips_profile(self, identity, profiles):
        identity.create_identity.side_effect = IdentityServiceError("User already registered")

        with pytest.raises(IdentityServiceError, match="already registered"):
            SignupUseCase(identity, profiles).execute("ada@lovelace.io", "pw", "Ada Lovelace")
        profiles.insert.assert_not_called()

    def test_profile_failure_leaves_identity_by_default(self, identity, profiles):
        profiles.insert.side_effect = ProfileStoreError("insert failed")

        with pytest.raises(ProfileStoreError, match="insert failed"):
            SignupUseCase(identity, profiles).execute("ada@lovelace.io", "pw", "Ada Lovelace")
        identity.delete_identity.assert_not_called()

    def test_profile_failure_rolls_back_identity_when_enabled(self, identity, profiles):
        profiles.insert.side_effect = ProfileStoreError("insert failed")

        with pytest.raises(ProfileStoreError, match="insert failed"):
            SignupUseCase(identity, profiles, rollback_on_profile_failure=True).execute(
                "ada@lovelace.io", "pw", "Ada Lovelace"
            )
        identity.delete_identity.assert_called_once_with("user-1")

    def test_failed_rollback_still_reports_store_error(self, identity, profiles):
        profiles.insert.side_effect = ProfileStoreError("insert failed")
        identity.delete_identity.side_effect = IdentityServiceError("admin only")

        with pytest.raises(ProfileStoreError, match="insert failed"):
            SignupUseCase(identity, profiles, rollback_on_profile_failure=True).execute(
                "ada@lovelace.io", "pw", "Ada Lovelace"
            )


class TestSigninUseCase:
    def test_returns_session(self, identity):
        session = SigninUseCase(identity).execute("ada@lovelace.io", "pw")
        assert session.access_token == "jwt"

    def test_any_identity_error_becomes_invalid_credentials(self, identity):
        identity.authenticate.side_effect = IdentityServiceError("Email not confirmed")

        with pytest.raises(InvalidCredentialsError) as excinfo:
            SigninUseCase(identity).execute("ada@lovelace.io", "pw")
        assert excinfo.value.status_code == 401
        assert excinfo.value.message == "Invalid credentials"


class TestProfileUseCases:
    def test_get_profile_reads_store_only(self, profiles):
        profile = GetProfileUseCase(profiles).execute("user-1")
        assert profile.email == "old@lovelace.io"
        profiles.get.assert_called_once_with("user-1")

    def test_complete_profile_takes_email_from_identity(self, identity, profiles):
        merged = GetCompleteProfileUseCase(identity, profiles).execute("user-1")
        assert merged == {
            "email": "ada@lovelace.io",
            "fullname": "Ada Lovelace",
            "profile_picture": "https://cdn.lovelace.io/ada.png",
        }

    def test_complete_profile_has_no_partial_result(self, identity, profiles):
        profiles.get.side_effect = ProfileStoreError("no rows")
        with pytest.raises(ProfileStoreError):
            GetCompleteProfileUseCase(identity, profiles).execute("user-1")


class TestDeleteUserUseCase:
    def test_deletes_identity_then_profile(self, identity, profiles):
        calls = Mock()
        calls.attach_mock(identity.delete_identity, "delete_identity")
        calls.attach_mock(profiles.delete, "delete_profile")

        DeleteUserUseCase(identity, profiles).execute("user-1")

        assert [c[0] for c in calls.mock_calls] == ["delete_identity", "delete_profile"]

    def test_identity_failure_stops_before_profile(self, identity, profiles):
        identity.delete_identity.side_effect = IdentityServiceError("User not found")

        with pytest.raises(IdentityServiceError):
            DeleteUserUseCase(identity, profiles).execute("user-1")
        profiles.delete.assert_not_called()

    def test_profile_failure_is_reported(self, identity, profiles):
        profiles.delete.side_effect = ProfileStoreError("delete failed")

        with pytest.raises(ProfileStoreError):
            DeleteUserUseCase(identity, profiles).execute("user-1")
        identity.delete_identity.assert_called_once_with("user-1")
