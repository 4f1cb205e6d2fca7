"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from content_board.app import app
from content_board.config import Settings


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a TestClient for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def settings() -> Settings:
    """Default settings, isolated from any local .env file and credentials."""
    return Settings(
        _env_file=None,
        youtube_api_key="",
        youtube_proxy_url="",
        gemini_api_key="",
    )
