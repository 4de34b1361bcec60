"""Errors raised when the identity service or the profile store fails."""
from __future__ import annotations


class GatewayError(RuntimeError):
    """Base error carrying the upstream message and the HTTP status to answer with."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class IdentityServiceError(GatewayError):
    """Identity service rejected a create, authenticate, lookup or delete call."""


class ProfileStoreError(GatewayError):
    """Profile store insert/select/delete failed or matched an unexpected number of rows."""


class InvalidCredentialsError(GatewayError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Invalid credentials")
