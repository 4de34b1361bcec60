from __future__ import annotations

from fastapi import Depends, Request

from src.application.use_cases.delete_user import DeleteUserUseCase
from src.application.use_cases.get_profile import GetCompleteProfileUseCase, GetProfileUseCase
from src.application.use_cases.signin import SigninUseCase
from src.application.use_cases.signup import SignupUseCase
from src.infrastructure.config import Settings
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseIdentityService

# Collaborators are built once in create_app and hung off app.state.


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity_service(request: Request) -> SupabaseIdentityService:
    return request.app.state.identity


def get_profile_repo(request: Request) -> ProfileRepository:
    return request.app.state.profiles


def get_signup_use_case(
    identity: SupabaseIdentityService = Depends(get_identity_service),
    profiles: ProfileRepository = Depends(get_profile_repo),
    settings: Settings = Depends(get_settings),
) -> SignupUseCase:
    return SignupUseCase(identity, profiles, settings.rollback_on_profile_failure)


def get_signin_use_case(
    identity: SupabaseIdentityService = Depends(get_identity_service),
) -> SigninUseCase:
    return SigninUseCase(identity)


def get_profile_use_case(
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> GetProfileUseCase:
    return GetProfileUseCase(profiles)


def get_complete_profile_use_case(
    identity: SupabaseIdentityService = Depends(get_identity_service),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> GetCompleteProfileUseCase:
    return GetCompleteProfileUseCase(identity, profiles)


def get_delete_user_use_case(
    identity: SupabaseIdentityService = Depends(get_identity_service),
    profiles: ProfileRepository = Depends(get_profile_repo),
) -> DeleteUserUseCase:
    return DeleteUserUseCase(identity, profiles)
