import pytest
from fastapi.testclient import TestClient

from tavern_logger.app import create_app
from tavern_logger.config import Settings
from tavern_logger.pipeline import LogRouter, SeenCache
from tavern_logger.storage import LogStore

TEST_API_KEY = "test-key"


@pytest.fixture
def logs_dir(tmp_path):
    """Fresh, not-yet-created logs directory per test."""
    return tmp_path / "logs"


@pytest.fixture
def store(logs_dir):
    return LogStore(logs_dir)


@pytest.fixture
def router(store):
    return LogRouter(store, SeenCache())


@pytest.fixture
def settings(logs_dir):
    return Settings(logs_dir=logs_dir, api_keys=frozenset({TEST_API_KEY}))


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def auth():
    return {"Authorization": f"Bearer {TEST_API_KEY}"}
