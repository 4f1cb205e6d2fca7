"""Tests for article extraction with mocked transport and trafilatura."""

from types import SimpleNamespace
from unittest.mock import patch

import httpx
import pytest

from content_board.extraction.article import (
    ArticleStrategyChain,
    scrape_article,
    select_body,
)
from content_board.extraction.errors import TransportError

ARTICLE_URL = "https://blog.example.com/posts/async-python"

JSON_LD_BODY = (
    "Structured concurrency keeps every task scoped to a parent. "
    "When the parent exits, its children are cancelled or awaited, which makes "
    "error handling predictable and resource cleanup reliable. Task groups bring "
    "this model to asyncio in the standard library."
)

JSON_LD_HTML = f"""<html><head>
<title>Structured Concurrency in Python</title>
<meta name="author" content="Dana Writer">
<meta property="article:published_time" content="2026-03-02T08:00:00Z">
<meta name="description" content="Why task groups matter.">
<script type="application/ld+json">{{"@type":"Article","articleBody":"{JSON_LD_BODY}"}}</script>
</head><body><p>Cookie banner text that should not be used as the body.</p></body></html>"""


def _page(body: str) -> str:
    return f"<html><head><title>Boundary Test Page</title></head><body><article>{body}</article></body></html>"


async def _run(settings, handler):
    chain = ArticleStrategyChain(settings)
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        return await chain.run(http, ARTICLE_URL)


def _serve(html: str):
    return lambda request: httpx.Response(200, text=html)


@pytest.mark.asyncio
@patch("content_board.extraction.article.bare_extraction", return_value=None)
async def test_body_of_99_chars_fails(mock_bare, settings):
    """Just under the article threshold is rejected."""
    result = await _run(settings, _serve(_page("a" * 99)))

    assert result.success is False
    assert "Could not extract meaningful content" in result.error


@pytest.mark.asyncio
@patch("content_board.extraction.article.bare_extraction", return_value=None)
async def test_body_of_101_chars_succeeds(mock_bare, settings):
    """Just over the article threshold is accepted and wrapped."""
    result = await _run(settings, _serve(_page("a" * 101)))

    assert result.success is True
    assert result.title == "Boundary Test Page"
    assert ("a" * 101) in result.content
    assert len(result.content) >= 50


@pytest.mark.asyncio
@patch("content_board.extraction.article.bare_extraction")
async def test_json_ld_article_block(mock_bare, settings):
    """JSON-LD body and meta tags produce the full structured block."""
    result = await _run(settings, _serve(JSON_LD_HTML))

    mock_bare.assert_not_called()
    assert result.success is True
    assert result.content == "\n".join(
        [
            "ARTICLE ANALYSIS:",
            "Title: Structured Concurrency in Python",
            "Author: Dana Writer",
            "Published: 2026-03-02T08:00:00Z",
            "Source: blog.example.com",
            "",
            "CONTENT:",
            JSON_LD_BODY,
            "",
            "SUMMARY: Why task groups matter.",
        ]
    )
    assert result.metadata.type.value == "article"
    assert result.metadata.domain == "blog.example.com"
    assert result.metadata.sources == ["Web Page"]
    assert result.metadata.has_metadata is True


@pytest.mark.asyncio
@patch("content_board.extraction.article.bare_extraction", return_value=None)
async def test_unknown_author_placeholder(mock_bare, settings):
    """Missing author is rendered as a placeholder line."""
    result = await _run(settings, _serve(_page("b" * 150)))

    assert "Author: Unknown Author" in result.content
    assert result.metadata.author is None


@pytest.mark.asyncio
@patch("content_board.extraction.article.bare_extraction", return_value=None)
async def test_scripts_and_styles_removed(mock_bare, settings):
    """Inline script and style content never reaches the body."""
    body = "<script>window.tracker = {}</script><style>.x{color:red}</style>" + "<p>" + "c" * 120 + "</p>"
    result = await _run(settings, _serve(_page(body)))

    assert result.success is True
    assert "tracker" not in result.content
    assert "color:red" not in result.content


@pytest.mark.asyncio
async def test_readability_fallback_replaces_thin_body(settings):
    """A thin pattern scrape is replaced by a longer trafilatura result."""
    long_text = "Readable paragraph text. " * 12
    doc = SimpleNamespace(
        text=long_text,
        title="Readable Title",
        author="Rae Author",
        date="2026-04-01",
        description=None,
    )
    with patch("content_board.extraction.article.bare_extraction", return_value=doc) as mock_bare:
        result = await _run(settings, _serve(_page("thin body text")))

    mock_bare.assert_called_once()
    assert result.success is True
    assert long_text.strip() in result.content
    # Pattern title wins; readability only fills gaps
    assert result.title == "Boundary Test Page"
    assert result.metadata.author == "Rae Author"
    assert result.metadata.sources == ["Readability Fallback"]


@pytest.mark.asyncio
async def test_readability_error_keeps_scraped_body(settings):
    """A trafilatura exception leaves the pattern scrape in place."""
    with patch(
        "content_board.extraction.article.bare_extraction",
        side_effect=ValueError("parser error"),
    ):
        result = await _run(settings, _serve(_page("d" * 150)))

    assert result.success is True
    assert result.metadata.sources == ["Web Page"]


@pytest.mark.asyncio
async def test_http_error_raises_transport_error(settings):
    """Non-2xx responses propagate so the retry envelope can act."""
    with pytest.raises(TransportError) as exc_info:
        await _run(settings, lambda request: httpx.Response(404))

    assert exc_info.value.status_code == 404
    assert str(exc_info.value) == "HTTP 404: Not Found"


def test_select_body_prefers_first_rich_candidate():
    """The first candidate over the rich threshold wins over later, longer ones."""
    html = (
        "<article>" + "e" * 250 + "</article>"
        "<main>" + "f" * 400 + "</main>"
    )
    assert select_body(html, 200) == "e" * 250


def test_select_body_falls_back_to_longest():
    """Without a rich candidate, the longest one is used."""
    html = "<article>" + "g" * 60 + "</article><main>" + "h" * 90 + "</main>"
    assert select_body(html, 200) == "h" * 90


def test_scrape_article_without_body(settings):
    """Metadata alone is not a usable scrape."""
    outcome = scrape_article("<html><head><title>Only A Title</title></head></html>", settings)
    assert outcome.fields == {"title": "Only A Title"}
    assert outcome.failure_reason == "no body candidate matched"
