from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from src.application.dtos.common_dto import ErrorResponse
from src.application.dtos.user_dto import (
    CompleteProfileResponse,
    DeleteUserResponse,
    ProfileResponse,
)
from src.application.use_cases.delete_user import DeleteUserUseCase
from src.application.use_cases.get_profile import GetCompleteProfileUseCase, GetProfileUseCase
from src.infrastructure.api.dependencies import (
    get_complete_profile_use_case,
    get_delete_user_use_case,
    get_profile_use_case,
)

router = APIRouter(tags=["User"])

# Only included when ENABLE_USER_DELETION=1
deletion_router = APIRouter(tags=["User"])


@router.get(
    "/profile/{authUserId}",
    response_model=ProfileResponse,
    summary="Get user profile",
    description="Return the stored profile row. Unknown ids are an error, not an empty object.",
    response_description="User profile retrieved successfully",
    responses={500: {"model": ErrorResponse, "description": "Error retrieving user profile"}},
)
def get_profile(
    authUserId: str = Path(..., min_length=1, description="UUID of the user in the identity service"),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
):
    profile = use_case.execute(authUserId)
    return {
        "fullname": profile.fullname,
        "profile_picture": profile.profile_picture,
        "email": profile.email,
    }


@router.get(
    "/complete-profile/{authUserId}",
    response_model=CompleteProfileResponse,
    summary="Get complete user profile",
    description="""
    Merge the identity service's email with the stored fullname and picture.

    The email always comes from the identity service. If either lookup fails
    the whole request fails.
    """,
    response_description="Complete user profile retrieved successfully",
    responses={500: {"model": ErrorResponse, "description": "Error retrieving complete user profile"}},
)
def get_complete_profile(
    authUserId: str = Path(..., min_length=1, description="UUID of the user in the identity service"),
    use_case: GetCompleteProfileUseCase = Depends(get_complete_profile_use_case),
):
    return use_case.execute(authUserId)


@deletion_router.delete(
    "/delete-user/{authUserId}",
    response_model=DeleteUserResponse,
    summary="Delete a user",
    description="""
    Delete the identity, then the profile row.

    If the profile delete fails the identity is already gone.
    """,
    response_description="User deleted successfully",
    responses={500: {"model": ErrorResponse, "description": "Error deleting user"}},
)
def delete_user(
    authUserId: str = Path(..., min_length=1, description="UUID of the user in the identity service"),
    use_case: DeleteUserUseCase = Depends(get_delete_user_use_case),
):
    use_case.execute(authUserId)
    return {"message": "User deleted successfully"}
