from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class IdentityEntity:
    id: str
    email: str | None
    # provider JSON for the user, returned to callers as-is
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SignUpResult:
    user: IdentityEntity
    session: dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        return {"user": self.user.raw, "session": self.session}


@dataclass(frozen=True)
class SessionEntity:
    access_token: str
    user: IdentityEntity
