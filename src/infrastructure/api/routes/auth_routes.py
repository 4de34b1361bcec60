from __future__ import annotations

from fastapi import APIRouter, Depends, status

from src.application.dtos.common_dto import ErrorResponse
from src.application.dtos.user_dto import (
    SigninRequest,
    SigninResponse,
    SignupRequest,
    SignupResponse,
)
from src.application.use_cases.signin import SigninUseCase
from src.application.use_cases.signup import SignupUseCase
from src.infrastructure.api.dependencies import get_signin_use_case, get_signup_use_case

router = APIRouter(
    tags=["User"],
    responses={
        422: {"description": "Validation Error - Invalid request format"},
    },
)


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign up a new user",
    description="""
    Create an identity for the given email and password, then store the
    user's profile row.

    The two writes are not transactional: if storing the profile fails, the
    identity may already exist without a profile.
    """,
    response_description="Identity-creation payload (user and session)",
    responses={500: {"model": ErrorResponse, "description": "Error during sign up"}},
)
def signup(
    body: SignupRequest,
    use_case: SignupUseCase = Depends(get_signup_use_case),
):
    """Create identity and profile."""
    result = use_case.execute(body.email, body.password, body.fullname, body.profile_picture)
    return result.to_payload()


@router.post(
    "/signin",
    response_model=SigninResponse,
    status_code=status.HTTP_200_OK,
    summary="Sign in an existing user",
    description="""
    Authenticate with email and password.

    Any failure, including unknown accounts, is reported as
    `401 {"error": "Invalid credentials"}`.
    """,
    response_description="Access token and the authenticated user",
    responses={401: {"model": ErrorResponse, "description": "Invalid credentials"}},
)
def signin(
    body: SigninRequest,
    use_case: SigninUseCase = Depends(get_signin_use_case),
):
    session = use_case.execute(body.email, body.password)
    return {"access_token": session.access_token, "user": session.user.raw}
