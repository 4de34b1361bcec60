import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'src' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")


@pytest.fixture()
def app_factory():
    """Build an app on in-memory backends; keyword args override Settings fields."""
    # lazy import after env configured
    from src.infrastructure.config import Settings
    from src.main import create_app

    def build(**overrides):
        values = {"supabase_disabled": True, "log_level": "WARNING"}
        values.update(overrides)
        return create_app(Settings(**values))

    return build


@pytest.fixture()
def app(app_factory):
    return app_factory()


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def deletion_app(app_factory):
    return app_factory(enable_user_deletion=True)


@pytest.fixture()
def deletion_client(deletion_app) -> TestClient:
    return TestClient(deletion_app)


@pytest.fixture()
def signup_body() -> dict[str, str]:
    return {
        "email": "ada@lovelace.io",
        "password": "analytical-engine",
        "fullname": "Ada Lovelace",
        "profilePicture": "https://cdn.lovelace.io/ada.png",
    }
