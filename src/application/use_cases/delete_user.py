from __future__ import annotations

from dataclasses import dataclass

from src.domain.exceptions import ProfileStoreError
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseIdentityService
from src.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DeleteUserUseCase:
    identity: SupabaseIdentityService
    profiles: ProfileRepository

    def execute(self, identity_id: str) -> None:
        """Delete the identity, then its profile row. No rollback between the two."""
        self.identity.delete_identity(identity_id)
        try:
            self.profiles.delete(identity_id)
        except ProfileStoreError as exc:
            logger.error(
                "Profile delete failed after identity was removed",
                extra={"identity_id": identity_id, "error_message": exc.message},
            )
            raise
        logger.info("Account deleted", extra={"identity_id": identity_id})
