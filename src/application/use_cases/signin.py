from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities.identity import SessionEntity
from src.domain.exceptions import IdentityServiceError, InvalidCredentialsError
from src.infrastructure.database.supabase_client import SupabaseIdentityService
from src.infrastructure.logging import get_logger

logger = get_logger(__name__)


@dataclass
class SigninUseCase:
    identity: SupabaseIdentityService

    def execute(self, email: str, password: str) -> SessionEntity:
        # Wrong password, unknown account and provider errors all look the same
        # to the caller.
        try:
            return self.identity.authenticate(email, password)
        except IdentityServiceError as exc:
            logger.info("Sign-in rejected", extra={"error_message": exc.message})
            raise InvalidCredentialsError() from exc
