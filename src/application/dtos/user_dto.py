from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.networks import validate_email


class SignupRequest(BaseModel):
    """Request body for creating an account and its profile."""
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(
        ...,
        description="User's email address, forwarded exactly as sent",
        examples=["user@example.com"],
        json_schema_extra={"format": "email"},
    )
    password: str = Field(..., min_length=1, description="User's password", examples=["password123"])
    fullname: str = Field(..., min_length=1, description="User's full name", examples=["John Doe"])
    profile_picture: str | None = Field(
        None,
        alias="profilePicture",
        description="URL of the user's profile picture",
        examples=["https://example.com/profile.jpg"],
    )

    @field_validator("email")
    @classmethod
    def check_email_syntax(cls, value: str) -> str:
        # Syntax check only; the identity service owns normalisation
        validate_email(value)
        return value


class SignupResponse(BaseModel):
    """Identity-creation payload as returned by the identity service."""
    user: dict[str, Any] = Field(..., description="Created identity, including its id and email")
    session: dict[str, Any] | None = Field(
        None, description="Session issued at signup, null when email confirmation is pending"
    )


class SigninRequest(BaseModel):
    """Credentials for signing in.

    The email is not syntax-checked here so that every bad login gets the
    same 401.
    """
    email: str = Field(..., description="User's email address", examples=["user@example.com"])
    password: str = Field(..., description="User's password", examples=["password123"])


class SigninResponse(BaseModel):
    access_token: str = Field(..., description="JWT access token for the session")
    user: dict[str, Any] = Field(..., description="Authenticated identity")


class ProfileResponse(BaseModel):
    """Profile as stored in the profile table."""
    fullname: str = Field(..., description="User's full name")
    profile_picture: str | None = Field(None, description="URL of the user's profile picture")
    email: str | None = Field(None, description="Email stored with the profile")


class CompleteProfileResponse(BaseModel):
    """Profile merged with the identity service's record."""
    email: str | None = Field(None, description="Email from the identity service")
    fullname: str = Field(..., description="User's full name")
    profile_picture: str | None = Field(None, description="URL of the user's profile picture")


class DeleteUserResponse(BaseModel):
    message: str = Field(..., examples=["User deleted successfully"])
