"""Generic article extraction: ordered regex patterns with a trafilatura fallback."""

import asyncio
import logging

import httpx
from trafilatura import bare_extraction

from content_board.config import Settings
from content_board.extraction.fetch import fetch_text
from content_board.extraction.patterns import (
    ANY_CHARS,
    JSON_STRING,
    HtmlBlock,
    JsonText,
    ParagraphAggregate,
    RegexField,
    collapse_whitespace,
    extract_field,
    iter_candidates,
)
from content_board.extraction.synthesis import (
    SOURCE_READABILITY,
    SOURCE_WEB_PAGE,
    merge_fields,
    synthesize_article,
)
from content_board.models.content import ExtractionResult, StrategyOutcome

logger = logging.getLogger(__name__)

TITLE_PATTERNS = [
    RegexField(r"<title[^>]*>([^<]+)</title>", transform=collapse_whitespace),
    RegexField(r'<meta\s+property="og:title"\s+content="([^"]+)"', transform=collapse_whitespace),
    RegexField(r'<meta\s+name="title"\s+content="([^"]+)"', transform=collapse_whitespace),
    RegexField(r"<h1[^>]*>([^<]+)</h1>", transform=collapse_whitespace),
]
# JSON-LD first, then semantic containers, then class-name guesses, then every <p>
BODY_PATTERNS = [
    JsonText(r'"articleBody"\s*:\s*' + JSON_STRING, flags=0),
    JsonText(r'"text"\s*:\s*' + JSON_STRING, flags=0),
    HtmlBlock(r"<article[^>]*>([\s\S]*?)</article>"),
    HtmlBlock(r"<main[^>]*>([\s\S]*?)</main>"),
    HtmlBlock(r'<div[^>]*class="[^"]*content[^"]*"[^>]*>([\s\S]*?)</div>'),
    HtmlBlock(r'<div[^>]*class="[^"]*article[^"]*"[^>]*>([\s\S]*?)</div>'),
    ParagraphAggregate(),
]
AUTHOR_PATTERNS = [
    RegexField(r'<meta\s+name="author"\s+content="([^"]+)"'),
    RegexField(r'<meta\s+property="article:author"\s+content="([^"]+)"'),
    RegexField(r'"author"\s*:\s*' + JSON_STRING),
    RegexField(r'"author"\s*:\s*\{[^{}]*?"name"\s*:\s*' + JSON_STRING),
]
PUBLISHED_PATTERNS = [
    RegexField(r'<meta\s+property="article:published_time"\s+content="([^"]+)"'),
    RegexField(r'<meta\s+name="date"\s+content="([^"]+)"'),
    RegexField(r'"datePublished"\s*:\s*' + JSON_STRING),
]
DESCRIPTION_PATTERNS = [
    RegexField(r'<meta\s+name="description"\s+content="([^"]+)"'),
    RegexField(r'<meta\s+property="og:description"\s+content="([^"]+)"'),
]


def select_body(html: str, rich_chars: int) -> str | None:
    """First body candidate over ``rich_chars``; otherwise the longest candidate seen."""
    best = None
    for candidate in iter_candidates(html, BODY_PATTERNS):
        if len(candidate) > rich_chars:
            return candidate
        if best is None or len(candidate) > len(best):
            best = candidate
    return best


def scrape_article(html: str, settings: Settings) -> StrategyOutcome:
    """Pattern-based scrape of title, body, author, publish date and description."""
    fields = {
        "title": extract_field(html, TITLE_PATTERNS, settings.min_title_chars),
        "content": select_body(html, settings.rich_article_chars),
        "author": extract_field(html, AUTHOR_PATTERNS, ANY_CHARS),
        "published_date": extract_field(html, PUBLISHED_PATTERNS, ANY_CHARS),
        "description": extract_field(html, DESCRIPTION_PATTERNS, ANY_CHARS),
    }
    fields = {key: value for key, value in fields.items() if value}
    if fields.get("content"):
        fields["content_source"] = SOURCE_WEB_PAGE
        return StrategyOutcome(name="patterns", fields=fields)
    return StrategyOutcome(name="patterns", fields=fields, failure_reason="no body candidate matched")


class ArticleStrategyChain:
    """Single fetch, pattern scrape, and a readability pass when the scrape is thin."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def run(self, http: httpx.AsyncClient, url: str) -> ExtractionResult:
        """Extract an article.

        Raises:
            TransportError: When the page cannot be downloaded (non-2xx,
                timeout, connection failure). The retry envelope handles it.
        """
        logger.info("Extracting article %s", url)
        html = await fetch_text(http, url, timeout=self.settings.page_timeout_seconds)

        scraped = scrape_article(html, self.settings)
        fields = dict(scraped.fields)

        if len(fields.get("content") or "") <= self.settings.rich_article_chars:
            fallback = await self.readability(html, url)
            if fallback.contributed:
                candidate = fallback.fields.get("content") or ""
                if len(candidate) > len(fields.get("content") or ""):
                    fields["content"] = candidate
                    fields["content_source"] = SOURCE_READABILITY
                merge_fields(fields, {k: v for k, v in fallback.fields.items() if k != "content"})
            else:
                logger.debug("Readability fallback gave nothing for %s: %s", url, fallback.failure_reason)

        return synthesize_article(url, fields, self.settings)

    async def readability(self, html: str, url: str) -> StrategyOutcome:
        """trafilatura main-text extraction over the already-downloaded HTML."""
        try:
            # Sync call wrapped in to_thread
            doc = await asyncio.to_thread(bare_extraction, html, url=url, with_metadata=True)
        except Exception as exc:
            logger.warning("trafilatura extraction failed for %s: %s", url, exc)
            return StrategyOutcome.failed("readability", f"{type(exc).__name__}: {exc}")

        if doc is None:
            return StrategyOutcome.failed("readability", "no main text found")

        fields = {
            "content": (doc.text or "").strip(),
            "title": doc.title,
            "author": doc.author,
            "published_date": doc.date,
            "description": doc.description,
        }
        fields = {key: value for key, value in fields.items() if value}
        if not fields:
            return StrategyOutcome.failed("readability", "no main text found")
        return StrategyOutcome(name="readability", fields=fields)
