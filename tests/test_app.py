"""Tests for the scrape endpoint with the pipeline dependency overridden."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from content_board.app import app, get_pipeline
from content_board.models.content import ExtractionResult, Metadata, MetadataType

RESULT = ExtractionResult.ok(
    title="Local Library Extends Hours",
    content="ARTICLE ANALYSIS:\nTitle: Local Library Extends Hours\n\nCONTENT:\nThe library stays open later.",
    metadata=Metadata(
        type=MetadataType.ARTICLE,
        url="https://news.example.org/story/123",
        domain="news.example.org",
        content_length=96,
        word_count=15,
        sources=["Web Page"],
    ),
)


@pytest.fixture
def pipeline():
    """Fake pipeline installed through the dependency override."""
    fake = MagicMock()
    fake.extract = AsyncMock(return_value=RESULT)
    app.dependency_overrides[get_pipeline] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    """Create a TestClient scoped to this module (not session-scoped conftest)."""
    return TestClient(app)


def test_scrape_returns_result(client: TestClient, pipeline):
    """POST /api/scrape returns the extraction result with camelCase metadata."""
    response = client.post(
        "/api/scrape",
        json={"url": "https://news.example.org/story/123", "type": "url"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["title"] == "Local Library Extends Hours"
    assert body["metadata"]["contentLength"] == 96
    assert body["metadata"]["wordCount"] == 15
    assert "error" not in body
    pipeline.extract.assert_awaited_once_with("https://news.example.org/story/123", "url")


def test_scrape_type_is_optional(client: TestClient, pipeline):
    client.post("/api/scrape", json={"url": "https://youtu.be/abc123def45"})
    pipeline.extract.assert_awaited_once_with("https://youtu.be/abc123def45", None)


@pytest.mark.parametrize("payload", [{}, {"url": ""}, {"url": "   "}])
def test_scrape_requires_url(client: TestClient, pipeline, payload):
    """Missing URL returns 400 without calling the pipeline."""
    response = client.post("/api/scrape", json=payload)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "URL is required"}
    pipeline.extract.assert_not_awaited()


def test_scrape_extraction_failure_is_200(client: TestClient, pipeline):
    """Extraction failures are reported in the body, not as HTTP errors."""
    pipeline.extract.return_value = ExtractionResult.failure(
        "Extraction failed after 3 attempts: HTTP 404: Not Found"
    )

    response = client.post("/api/scrape", json={"url": "https://example.com/missing"})

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "error": "Extraction failed after 3 attempts: HTTP 404: Not Found",
    }


def test_scrape_unexpected_error_is_500(client: TestClient, pipeline):
    """Unexpected exceptions become a 500 with the error message."""
    pipeline.extract.side_effect = RuntimeError("pipeline exploded")

    response = client.post("/api/scrape", json={"url": "https://example.com/page"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "pipeline exploded"}
