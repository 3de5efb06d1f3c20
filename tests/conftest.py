"""Shared pytest fixtures."""

from collections.abc import AsyncGenerator, Iterator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from ezbase.app import App
from ezbase.config import Config
from ezbase.core.core import Core
from ezbase.web.server import create_fastapi_app

START_TIME = 1_700_000_000


class FakeClock:
    """Settable replacement for unix_now."""

    def __init__(self, now: int) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def config() -> Config:
    """Config with every store embedded in memory."""
    return Config(
        database_url="memory://",
        session_database_url="memory://",
        log_database_url="memory://",
        session_time=60,
    )


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Freeze the clock the session gate reads."""
    fake = FakeClock(START_TIME)
    monkeypatch.setattr("ezbase.core.modules.session.service.unix_now", fake)
    return fake


@pytest_asyncio.fixture
async def core(config: Config) -> AsyncGenerator[Core]:
    core = Core(config)
    await core.on_start()
    yield core
    await core.on_stop()


@pytest.fixture
def app_instance(config: Config) -> App:
    return App(config)


@pytest.fixture
def client(app_instance: App, config: Config) -> Iterator[TestClient]:
    with TestClient(create_fastapi_app(app_instance, config)) as test_client:
        yield test_client


@pytest.fixture
def logged_in_client(client: TestClient, clock: FakeClock) -> TestClient:
    """Client holding a fresh session cookie for a@x.com."""
    credentials = {"email": "a@x.com", "password": "secret"}
    assert client.post("/signup_email", json=credentials).status_code == 200
    assert client.post("/login_email", json=credentials).status_code == 200
    return client
