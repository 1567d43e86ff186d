from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from Friendbook.api.main import create_app
from Friendbook.core.config import Settings
from Friendbook.core.service import SocialService


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        JWT_SECRET="test-secret",
        PASSWORD_HASH_ITERATIONS=1_000,
        SEED_DEMO_DATA=False,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def service(settings: Settings, clock: FakeClock) -> SocialService:
    return SocialService(settings=settings, clock=clock)


@pytest.fixture()
def people(service: SocialService) -> Dict[str, int]:
    ids = {}
    for name in ("alice", "bob", "carol", "dave", "erin"):
        ids[name] = service.register(name, "secret123", name.title()).unwrap().user.id
    return ids


@pytest.fixture()
def befriend(service: SocialService):
    def _befriend(left: int, right: int) -> None:
        service.send_friend_request(left, right).unwrap()
        service.accept_friend_request(right, left).unwrap()

    return _befriend


@pytest.fixture()
def client(service: SocialService) -> TestClient:
    return TestClient(create_app(service=service))


@pytest.fixture()
def login(client: TestClient):
    def _login(username: str, password: str = "secret123") -> Dict[str, str]:
        response = client.post("/api/v1/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login
