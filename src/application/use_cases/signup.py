from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities.identity import SignUpResult
from src.domain.exceptions import GatewayError, ProfileStoreError
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseIdentityService
from src.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SignupUseCase:
    identity: SupabaseIdentityService
    profiles: ProfileRepository
    rollback_on_profile_failure: bool = False

    def execute(
        self,
        email: str,
        password: str,
        fullname: str,
        profile_picture: str | None = None,
    ) -> SignUpResult:
        """
        Create the identity, then its profile row.

        The two writes are not atomic. If the profile insert fails the identity
        is left in place (an orphan) unless rollback_on_profile_failure is set,
        in which case a best-effort delete of the identity is attempted before
        the store error is re-raised.
        """
        # IdentityServiceError propagates untouched, nothing has been written yet
        result = self.identity.create_identity(email, password)
        identity_id = result.user.id

        try:
            self.profiles.insert(identity_id, email, fullname, profile_picture)
        except ProfileStoreError as exc:
            if self.rollback_on_profile_failure:
                self._compensate(identity_id)
            else:
                logger.error(
                    "Profile insert failed, identity left without profile",
                    extra={"identity_id": identity_id, "error_message": exc.message},
                )
            raise

        logger.info("Account provisioned", extra={"identity_id": identity_id})
        return result

    def _compensate(self, identity_id: str) -> None:
        try:
            self.identity.delete_identity(identity_id)
        except GatewayError as exc:
            logger.error(
                "Rollback of identity failed, identity left without profile",
                extra={"identity_id": identity_id, "error_message": exc.message},
            )
            return
        logger.warning("Identity rolled back after profile insert failure", extra={"identity_id": identity_id})
