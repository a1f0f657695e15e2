"""
Shared fixtures for API and service tests.

Every test gets a fresh in-memory storage, session store and a stub
code analyzer, installed on the app through dependency overrides.
"""

import json

import pytest
from fastapi.testclient import TestClient

from main import app
from botdash.api.deps import get_analyzer, get_sessions, get_storage
from botdash.core.errors import AnalysisFailedError
from botdash.core.memory_storage import MemStorage
from botdash.core.sessions import MemorySessionStore
from botdash.services.analysis_service import CodeAnalyzer, parse_analysis


class StubAnalyzer(CodeAnalyzer):
    """Analyzer that returns canned provider content instead of calling out."""

    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    async def analyze(self, code):
        self.calls.append(code)
        if self.error is not None:
            raise AnalysisFailedError(self.error)
        return parse_analysis(self.content)


VALID_ANALYSIS = {
    "suggestions": ["Use an embed for the reply"],
    "security": ["Do not echo user input unescaped"],
    "performance": [],
}


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture
def sessions():
    return MemorySessionStore(ttl_seconds=3600)


@pytest.fixture
def analyzer():
    return StubAnalyzer(content=json.dumps(VALID_ANALYSIS))


@pytest.fixture
def make_client(storage, sessions, analyzer):
    """Factory for clients with independent cookie jars sharing one backend."""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_sessions] = lambda: sessions
    app.dependency_overrides[get_analyzer] = lambda: analyzer

    yield lambda: TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    """Create FastAPI test client."""
    return make_client()


def register(client, username="alice", password="pw1"):
    """Register (and thereby log in) a user, returning the response JSON."""
    response = client.post("/api/register", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def alice(client):
    """Client logged in as alice."""
    register(client, "alice", "pw1")
    return client


@pytest.fixture
def bob(make_client):
    """Separate client logged in as bob."""
    other = make_client()
    register(other, "bob", "pw2")
    return other
