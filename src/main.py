from __future__ import annotations

import sys
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI

from src.application.dtos.common_dto import HealthResponse, RootResponse
from src.infrastructure.api.exception_handlers import register_exception_handlers
from src.infrastructure.api.middlewares import add_default_middlewares
from src.infrastructure.api.routes.auth_routes import router as auth_router
from src.infrastructure.api.routes.profile_routes import deletion_router
from src.infrastructure.api.routes.profile_routes import router as profile_router
from src.infrastructure.config import ConfigurationError, Settings
from src.infrastructure.database.postgres_client import PostgresClient
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import (
    SupabaseIdentityService,
    create_supabase_client,
)
from src.infrastructure.logging import setup_logging

SERVICE_NAME = "profile-gateway"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    pg_client = app.state.pg_client
    if pg_client is not None:
        pg_client.close()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logger = setup_logging(settings.log_level)

    app = FastAPI(
        title="User Management API",
        version=VERSION,
        description="""
        ## Profile Gateway

        API for managing users: signup, signin and profile lookups, backed by
        Supabase Auth for identities and a Supabase table for profiles.

        ### Error Responses
        - **401 Unauthorized**: Sign-in failed (always `{"error": "Invalid credentials"}`)
        - **422 Unprocessable Entity**: Validation error in request body or path
        - **500 Internal Server Error**: The identity service or profile store
          rejected the call; body is `{"error": "<upstream message>"}`
        """,
        docs_url="/api-docs",
        redoc_url=None,
        lifespan=lifespan,
    )

    client = create_supabase_client(settings)
    pg_client = PostgresClient(settings.postgres) if settings.use_local_db else None
    app.state.settings = settings
    app.state.pg_client = pg_client
    app.state.identity = SupabaseIdentityService(client)
    app.state.profiles = ProfileRepository(client, table=settings.profile_table, pg_client=pg_client)

    add_default_middlewares(app, settings)
    register_exception_handlers(app)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Get basic information about the API",
    )
    def root():
        return {"status": "ok", "service": SERVICE_NAME, "version": app.version}

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running",
    )
    def health():
        return {"status": "healthy"}

    app.include_router(auth_router)
    app.include_router(profile_router)
    if settings.enable_user_deletion:
        app.include_router(deletion_router)

    logger.info(
        "Application configured",
        extra={
            "in_memory_identities": client is None,
            "profile_backend": "postgres" if pg_client else ("memory" if client is None else "supabase"),
            "user_deletion": settings.enable_user_deletion,
        },
    )
    return app


def main() -> int:
    """Validate configuration, then serve the app with uvicorn.

    Imports build nothing; `uvicorn --factory src.main:create_app` also works.
    """
    load_dotenv()
    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        # Logging is not configured yet
        print(f"FATAL: Configuration error\n{exc}", file=sys.stderr)
        return 1

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level="warning",
        access_log=False,  # requests are logged by our middleware
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
