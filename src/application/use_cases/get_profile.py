from __future__ import annotations

from dataclasses import dataclass

from src.domain.entities.profile import ProfileEntity
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseIdentityService


@dataclass
class GetProfileUseCase:
    profiles: ProfileRepository

    def execute(self, identity_id: str) -> ProfileEntity:
        return self.profiles.get(identity_id)


@dataclass
class GetCompleteProfileUseCase:
    identity: SupabaseIdentityService
    profiles: ProfileRepository

    def execute(self, identity_id: str) -> dict[str, str | None]:
        """
        Merge the identity's email with the stored fullname and picture.

        The email always comes from the identity service, even when the copy
        in the profile row has drifted. Either read failing fails the whole call.
        """
        user = self.identity.get_identity(identity_id)
        profile = self.profiles.get(identity_id)
        return {
            "email": user.email,
            "fullname": profile.fullname,
            "profile_picture": profile.profile_picture,
        }
