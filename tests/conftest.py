import pytest
from fastapi.testclient import TestClient
from response_analytics.models import ResponseEvent
from response_analytics.response_store import InMemoryResponseStore
from response_analytics.analytics_service import AnalyticsService
from response_analytics.main import app, get_store
from factories import response_data

@pytest.fixture
def make_event():
    def _make(**overrides) -> ResponseEvent:
        return ResponseEvent(**response_data(**overrides))
    return _make

@pytest.fixture
def store():
    return InMemoryResponseStore()

@pytest.fixture
def service(store):
    return AnalyticsService(store)

@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()
