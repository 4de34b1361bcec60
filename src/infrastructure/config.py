"""Process configuration read once from the environment at startup."""
from __future__ import annotations

import os
from dataclasses import dataclass, field

VALID_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:5173",  # Vite default
    "http://127.0.0.1:3000",
    "http://127.0.0.1:3001",
    "http://127.0.0.1:5173",
]


class ConfigurationError(Exception):
    """Raised when an environment variable holds an unusable value."""


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default) == "1"


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class PostgresSettings:
    host: str = "localhost"
    port: int = 5432
    database: str = "profiles"
    user: str = "profiles"
    password: str = "profiles_dev_password"


@dataclass(frozen=True, slots=True)
class Settings:
    supabase_url: str | None = None
    supabase_key: str | None = None
    supabase_disabled: bool = False
    use_local_db: bool = False
    postgres: PostgresSettings = field(default_factory=PostgresSettings)
    profile_table: str = "users"
    enable_user_deletion: bool = False
    rollback_on_profile_failure: bool = False
    env: str = "development"
    cors_origins: list[str] = field(default_factory=list)
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def in_memory(self) -> bool:
        """True when identities (and profiles, unless a local DB is used) live in process memory."""
        return self.supabase_disabled or not self.supabase_configured

    @classmethod
    def from_env(cls) -> Settings:
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"LOG_LEVEL must be one of {sorted(VALID_LOG_LEVELS)}, got {log_level!r}"
            )

        env = os.getenv("ENV", "development")
        raw_origins = os.getenv("CORS_ORIGINS")
        if raw_origins:
            origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
        elif env in ("development", "staging"):
            origins = list(_DEV_ORIGINS)
        else:
            origins = ["*"]

        return cls(
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_key=os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY") or None,
            supabase_disabled=_flag("SUPABASE_DISABLED"),
            use_local_db=_flag("USE_LOCAL_DB"),
            postgres=PostgresSettings(
                host=os.getenv("POSTGRES_HOST", "localhost"),
                port=_int("POSTGRES_PORT", 5432),
                database=os.getenv("POSTGRES_DB", "profiles"),
                user=os.getenv("POSTGRES_USER", "profiles"),
                password=os.getenv("POSTGRES_PASSWORD", "profiles_dev_password"),
            ),
            profile_table=os.getenv("PROFILE_TABLE", "users"),
            enable_user_deletion=_flag("ENABLE_USER_DELETION"),
            rollback_on_profile_failure=_flag("SIGNUP_ROLLBACK_ON_PROFILE_FAILURE"),
            env=env,
            cors_origins=origins,
            log_level=log_level,
            host=os.getenv("HOST", "0.0.0.0"),
            port=_int("PORT", 3000),
        )
