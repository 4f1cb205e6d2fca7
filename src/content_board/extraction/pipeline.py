"""Extraction pipeline: classify, dispatch to a strategy chain, retry on transport failure."""

import asyncio
import functools
import logging
import time
from collections.abc import Callable

import httpx
from pydantic import ValidationError
from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api.proxies import GenericProxyConfig

from content_board.config import Settings, get_settings
from content_board.extraction.article import ArticleStrategyChain
from content_board.extraction.fetch import build_client
from content_board.extraction.retry import Sleep, run_with_retry
from content_board.extraction.router import resolve_content_class
from content_board.extraction.social import extract_social
from content_board.extraction.youtube import VideoStrategyChain
from content_board.extraction.youtube_api import YouTubeDataClient
from content_board.llm.client import build_gemini_client
from content_board.llm.transcriber import GeminiTranscriber
from content_board.models.content import (
    ContentClass,
    ExtractionRequest,
    ExtractionResult,
)

logger = logging.getLogger(__name__)


def _describe_invalid_request(exc: ValidationError) -> str:
    """First validation problem, phrased for the caller."""
    error = exc.errors()[0]
    field = error["loc"][0] if error["loc"] else ""
    if field == "type":
        return f"Unsupported content type: {error.get('input')!r}"
    return str(error["msg"]).removeprefix("Value error, ")


class ExtractionPipeline:
    """Composition root for extraction.

    Owns the collaborators the strategy chains need (a transcript API factory,
    optional YouTube Data API client, optional transcriber). HTTP clients and
    transcript API instances are created per attempt, so concurrent
    extractions share no mutable state.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transcript_api_factory: Callable[[], YouTubeTranscriptApi] = YouTubeTranscriptApi,
        data_client: YouTubeDataClient | None = None,
        transcriber: GeminiTranscriber | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.sleep = sleep
        self.video_chain = VideoStrategyChain(
            settings,
            transcript_api_factory=transcript_api_factory,
            data_client=data_client,
            transcriber=transcriber,
        )
        self.article_chain = ArticleStrategyChain(settings)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtractionPipeline":
        """Wire optional strategies from configured credentials. Missing keys just disable them."""
        proxy_config = (
            GenericProxyConfig(https_url=settings.youtube_proxy_url)
            if settings.youtube_proxy_url
            else None
        )
        data_client = (
            YouTubeDataClient(settings.youtube_api_key, timeout=settings.api_timeout_seconds)
            if settings.youtube_api_key
            else None
        )
        gemini = build_gemini_client(settings)
        transcriber = GeminiTranscriber(gemini, settings.gemini_model) if gemini else None
        return cls(
            settings,
            transcript_api_factory=functools.partial(
                YouTubeTranscriptApi, proxy_config=proxy_config
            ),
            data_client=data_client,
            transcriber=transcriber,
        )

    async def extract(
        self, url: str | None, declared_type: ContentClass | str | None = None
    ) -> ExtractionResult:
        """Validate the input, then run the request. Invalid input fails without any network call."""
        try:
            request = ExtractionRequest(url=url or "", type=declared_type or None)
        except ValidationError as exc:
            message = _describe_invalid_request(exc)
            logger.info("Rejected extraction request: %s", message)
            return ExtractionResult.failure(message)
        return await self.run(request)

    async def run(self, request: ExtractionRequest) -> ExtractionResult:
        """Classify and extract, wrapped in the retry envelope."""
        content_class = resolve_content_class(request.url, request.type)
        logger.info("Starting extraction for %s: %s", content_class.value, request.url)
        started = time.monotonic()

        result = await run_with_retry(
            lambda: self._attempt(request.url, content_class),
            self.settings,
            sleep=self.sleep,
        )

        elapsed = time.monotonic() - started
        if result.success:
            logger.info(
                "Extracted %s in %.1fs (%d chars, sources: %s)",
                request.url,
                elapsed,
                len(result.content or ""),
                ", ".join(result.metadata.sources or []) if result.metadata else "",
            )
        else:
            logger.warning("Extraction failed for %s in %.1fs: %s", request.url, elapsed, result.error)
        return result

    async def _attempt(self, url: str, content_class: ContentClass) -> ExtractionResult:
        """One full try. Raises on transport failure so the envelope can retry."""
        if content_class in (ContentClass.TIKTOK, ContentClass.INSTAGRAM):
            return extract_social(url, content_class)

        deadline = time.monotonic() + self.settings.attempt_timeout_seconds
        async with build_client(self.transport) as http:
            if content_class == ContentClass.YOUTUBE:
                return await self.video_chain.run(http, url, deadline=deadline)
            return await self.article_chain.run(http, url)


async def extract(url: str | None, declared_type: ContentClass | str | None = None) -> ExtractionResult:
    """Extract a URL using a pipeline wired from application settings."""
    pipeline = ExtractionPipeline.from_settings(get_settings())
    return await pipeline.extract(url, declared_type)
