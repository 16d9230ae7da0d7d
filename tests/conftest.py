# Shared fixtures: an isolated SQLite database and image directory per test,
# an HTTP client bound to a freshly built application, and login helpers.

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Generator

import pytest
from fastapi.testclient import TestClient

from marketplace.core.config import (
    DatabaseSettings,
    RateLimitSettings,
    SecuritySettings,
    Settings,
    StorageSettings,
)
from marketplace.infrastructure.database import Database
from marketplace.main import create_app
from tests.factories import ADMIN_EMAIL, ADMIN_PASSWORD, PASSWORD


def build_settings(tmp_path: Path, **overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "environment": "test",
        "database": DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}"),
        "security": SecuritySettings(
            secret_key="test-secret-key",
            bcrypt_rounds=4,
            bootstrap_admin_email=ADMIN_EMAIL,
            bootstrap_admin_password=ADMIN_PASSWORD,
        ),
        "rate_limit": RateLimitSettings(api_limit=10_000, auth_limit=10_000),
        "storage": StorageSettings(image_dir=tmp_path / "images"),
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return build_settings(tmp_path)


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def login(client: TestClient, email: str, password: str) -> Dict[str, str]:
    response = client.post("/user/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    token = response.json()["payload"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client: TestClient) -> Dict[str, str]:
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def register_user(client: TestClient) -> Callable[..., Dict[str, Any]]:
    """Register a user and return its payload plus ready-to-use auth headers."""

    def _register(email: str, name: str = "Test User", password: str = PASSWORD) -> Dict[str, Any]:
        response = client.post("/user/register", json={"name": name, "email": email, "password": password})
        assert response.status_code == 201, response.text
        user = response.json()["payload"]
        return {"user": user, "headers": login(client, email, password)}

    return _register


@pytest.fixture
def run_with_db(settings: Settings) -> Callable[[Callable[[Database], Awaitable[Any]]], Any]:
    """Run an async scenario against a fresh database inside its own event loop."""

    def _run(scenario: Callable[[Database], Awaitable[Any]]) -> Any:
        async def main() -> Any:
            database = Database(settings.database)
            await database.create_all()
            try:
                return await scenario(database)
            finally:
                await database.dispose()

        return asyncio.run(main())

    return _run
