"""
Pytest configuration and fixtures for the string analyzer tests.
"""

import os

import pytest
from fastapi.testclient import TestClient
from hypothesis import Phase, Verbosity, settings

from app.crud import StringStore
from app.main import create_app

# -----------------------------------------------------------------------------
# Hypothesis Profiles
# -----------------------------------------------------------------------------
# Usage: HYPOTHESIS_PROFILE=fast pytest tests/
# -----------------------------------------------------------------------------

settings.register_profile(
    "fast",
    max_examples=10,
    phases=[Phase.generate],
    verbosity=Verbosity.quiet,
    deadline=None,
)

settings.register_profile(
    "dev",
    max_examples=50,
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def store():
    """A fresh, empty in-memory store."""
    return StringStore()


@pytest.fixture
def client(store):
    """Test client for an app bound to the `store` fixture."""
    with TestClient(create_app(store)) as test_client:
        yield test_client


@pytest.fixture
def seeded_client(client):
    """Client with racecar, hello world and level already stored."""
    for value in ("racecar", "hello world", "level"):
        response = client.post("/strings", json={"value": value})
        assert response.status_code == 201
    return client
