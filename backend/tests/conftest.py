import pytest
from fastapi.testclient import TestClient

from weatherverse.main import create_app
from weatherverse.models import StoreMode
from weatherverse.services import ReadingsStore


@pytest.fixture
def store():
    return ReadingsStore(mode=StoreMode.HISTORY, max_history=24)


@pytest.fixture
def latest_store():
    return ReadingsStore(mode=StoreMode.LATEST)


@pytest.fixture
def app(store):
    return create_app(store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


class RecordingNotifier:
    """Notifier that remembers what it was asked to send."""

    def __init__(self, succeed=True):
        self.sent = []
        self.succeed = succeed

    def send_threshold_alert(self, reading):
        self.sent.append(reading)
        return self.succeed


@pytest.fixture
def notifier():
    return RecordingNotifier()
