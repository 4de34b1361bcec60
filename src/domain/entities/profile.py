from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ProfileEntity:
    identity_id: str  # auth user id issued by the identity service
    email: str | None
    fullname: str
    profile_picture: str | None = None
    created_at: datetime | None = None
