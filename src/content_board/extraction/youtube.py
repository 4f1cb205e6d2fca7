"""YouTube extraction: transcript, page scrape, oEmbed, Data API, and AI transcription.

Each strategy returns a StrategyOutcome and never raises. Later strategies
only fill fields that earlier ones left empty.
"""

import asyncio
import logging
import re
import time
from collections.abc import Callable, Iterable

import httpx
from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api._errors import (
    InvalidVideoId,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
)

from content_board.config import Settings
from content_board.extraction.errors import TransportError
from content_board.extraction.fetch import fetch_json, fetch_text
from content_board.extraction.patterns import (
    ANY_CHARS,
    JSON_STRING,
    RegexField,
    extract_field,
)
from content_board.extraction.router import extract_youtube_video_id
from content_board.extraction.synthesis import (
    SOURCE_AI_TRANSCRIPTION,
    SOURCE_TRANSCRIPT,
    merge_fields,
    synthesize_video,
)
from content_board.extraction.youtube_api import YouTubeDataClient
from content_board.llm.transcriber import GeminiTranscriber
from content_board.models.content import ExtractionResult, StrategyOutcome

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
OEMBED_ENDPOINT = "https://www.youtube.com/oembed"

# Language hints tried in order; None means "whatever transcript exists"
TRANSCRIPT_LANGUAGES: list[list[str] | None] = [["en"], ["ar"], None]

# View-count text ("12K") often gets scraped in place of the real title
WEAK_TITLE_PATTERN = re.compile(r"^\d+[kKmM]?$")
WEAK_TITLE_MIN_CHARS = 3

# Minimum remaining attempt budget (seconds) for the transcription call
_TRANSCRIPTION_MIN_REMAINING = 3.0

_BRACKETED = re.compile(r"\[.*?\]")
_WHITESPACE = re.compile(r"\s+")


def _strip_youtube_suffix(title: str) -> str:
    return re.sub(r"\s*-\s*YouTube$", "", title)


# Most structured first
TITLE_PATTERNS = [
    RegexField(r'<meta\s+property="og:title"\s+content="([^"]*)"'),
    RegexField(r'<meta\s+name="title"\s+content="([^"]*)"'),
    RegexField(r'"videoDetails":\{.*?"title":' + JSON_STRING, flags=0),
    RegexField(r"<title>([^<]+)</title>", transform=_strip_youtube_suffix),
]
DESCRIPTION_PATTERNS = [
    RegexField(r'"shortDescription":' + JSON_STRING, flags=0),
    RegexField(r'"description":\{"simpleText":' + JSON_STRING, flags=0),
    RegexField(r'<meta\s+property="og:description"\s+content="([^"]*)"'),
    RegexField(r'<meta\s+name="description"\s+content="([^"]*)"'),
]
# JSON patterns first; itemprop="name" is a last resort since it often holds the video title
CHANNEL_PATTERNS = [
    RegexField(r'"ownerChannelName":' + JSON_STRING, flags=0),
    RegexField(r'"author":' + JSON_STRING, flags=0),
    RegexField(r'"channelName":' + JSON_STRING, flags=0),
    RegexField(r'<meta\s+name="author"\s+content="([^"]*)"'),
    RegexField(r'<link\s+itemprop="name"\s+content="([^"]*)"'),
]
VIEW_COUNT_PATTERNS = [
    RegexField(r'"viewCount":"(\d+)"', flags=0),
    RegexField(r"(\d+(?:,\d{3})*)\s+views"),
]
DURATION_PATTERNS = [
    RegexField(r'"lengthSeconds":"(\d+)"', flags=0),
]
PUBLISH_DATE_PATTERNS = [
    RegexField(r'"publishDate":"([^"]+)"', flags=0),
    RegexField(r'<meta\s+itemprop="datePublished"\s+content="([^"]+)"'),
    RegexField(r'<meta\s+itemprop="uploadDate"\s+content="([^"]+)"'),
]
THUMBNAIL_PATTERNS = [
    RegexField(r'<meta\s+property="og:image"\s+content="([^"]+)"'),
]


def is_weak_title(title: str | None) -> bool:
    """Empty, very short, or numeric-with-suffix (``12K``) titles are not trusted."""
    if not title or len(title) < WEAK_TITLE_MIN_CHARS:
        return True
    return bool(WEAK_TITLE_PATTERN.match(title))


def clean_transcript(segments: Iterable[str]) -> str:
    """Join segments, drop bracketed annotations like ``[Music]``, collapse whitespace."""
    text = " ".join(segments)
    text = _BRACKETED.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def parse_watch_page(html: str, settings: Settings) -> dict:
    """Pull title, description, channel, views, duration, date and thumbnail from a watch page."""
    fields: dict = {
        "title": extract_field(html, TITLE_PATTERNS, settings.min_title_chars),
        "description": extract_field(html, DESCRIPTION_PATTERNS, settings.min_description_chars),
        "author": extract_field(html, CHANNEL_PATTERNS, ANY_CHARS),
        "view_count": extract_field(html, VIEW_COUNT_PATTERNS, ANY_CHARS),
        "published_date": extract_field(html, PUBLISH_DATE_PATTERNS, ANY_CHARS),
    }
    length = extract_field(html, DURATION_PATTERNS, ANY_CHARS)
    if length:
        fields["duration_seconds"] = int(length)
    thumbnail = extract_field(html, THUMBNAIL_PATTERNS, ANY_CHARS)
    if thumbnail:
        fields["thumbnails"] = [thumbnail]
    return {key: value for key, value in fields.items() if value}


class VideoStrategyChain:
    """Ordered, independently-fallible strategies for YouTube URLs.

    Collaborators are injected by the pipeline. ``data_client`` and
    ``transcriber`` are None when their credentials are not configured,
    which simply removes those strategies from the chain.

    ``transcript_api_factory`` is called once per transcript lookup:
    ``YouTubeTranscriptApi`` holds a requests session and is not thread-safe,
    so concurrent extractions never share one.
    """

    def __init__(
        self,
        settings: Settings,
        transcript_api_factory: Callable[[], YouTubeTranscriptApi],
        data_client: YouTubeDataClient | None = None,
        transcriber: GeminiTranscriber | None = None,
    ) -> None:
        self.settings = settings
        self.transcript_api_factory = transcript_api_factory
        self.data_client = data_client
        self.transcriber = transcriber

    async def run(
        self, http: httpx.AsyncClient, url: str, deadline: float | None = None
    ) -> ExtractionResult:
        """Run every eligible strategy, then hand the merged fields to the synthesizer."""
        video_id = extract_youtube_video_id(url)
        if video_id is None:
            return ExtractionResult.failure("Invalid YouTube URL")

        logger.info("Extracting YouTube video %s", video_id)
        fields: dict = {}
        outcomes: list[StrategyOutcome] = []

        def record(outcome: StrategyOutcome) -> None:
            outcomes.append(outcome)
            merge_fields(fields, outcome.fields)

        record(await self.fetch_transcript(video_id))
        record(await self.scrape_page(http, video_id))

        if is_weak_title(fields.get("title")):
            weak_title = fields.pop("title", None)
            record(await self.fetch_oembed(http, video_id))
            if not fields.get("title") and weak_title:
                fields["title"] = weak_title
        else:
            record(StrategyOutcome.skipped("oembed", "title looks reliable"))

        record(await self.fetch_platform_api(http, video_id, fields))

        if len(fields.get("transcript") or "") <= self.settings.min_transcript_chars:
            fields.pop("transcript", None)
            fields.pop("transcript_source", None)
            record(await self.transcribe(video_id, deadline))

        for outcome in outcomes:
            if outcome.failure_reason:
                logger.debug(
                    "Strategy %s contributed nothing for %s: %s",
                    outcome.name,
                    video_id,
                    outcome.failure_reason,
                )
        return synthesize_video(url, video_id, fields, outcomes, self.settings)

    async def fetch_transcript(self, video_id: str) -> StrategyOutcome:
        """Structured transcript, trying each language hint in turn."""
        transcript_api = self.transcript_api_factory()
        last_error = "no transcript returned"
        for languages in TRANSCRIPT_LANGUAGES:
            try:
                segments = await asyncio.to_thread(
                    _fetch_segments, transcript_api, video_id, languages
                )
            except (TranscriptsDisabled, VideoUnavailable, InvalidVideoId) as exc:
                # Permanent for this video; other languages will not help
                logger.info("Transcript unavailable for %s: %s", video_id, type(exc).__name__)
                return StrategyOutcome.failed("transcript", _describe_transcript_error(exc))
            except NoTranscriptFound:
                last_error = f"no transcript found for languages {languages}"
                continue
            except Exception as exc:
                # IP blocks, request errors, parse errors
                logger.warning("Transcript fetch failed for %s (%s): %s", video_id, languages, exc)
                last_error = f"{type(exc).__name__}: {exc}"
                continue

            text = clean_transcript(segment.text for segment in segments)
            if text:
                logger.info("Transcript found for %s with %d segments", video_id, len(segments))
                return StrategyOutcome(
                    name="transcript",
                    fields={"transcript": text, "transcript_source": SOURCE_TRANSCRIPT},
                )
        return StrategyOutcome.failed("transcript", last_error)

    async def scrape_page(self, http: httpx.AsyncClient, video_id: str) -> StrategyOutcome:
        """Watch-page HTML scraped with ordered pattern variants per field."""
        try:
            html = await fetch_text(
                http,
                WATCH_URL.format(video_id=video_id),
                timeout=self.settings.page_timeout_seconds,
            )
        except TransportError as exc:
            logger.warning("Watch page fetch failed for %s: %s", video_id, exc)
            return StrategyOutcome.failed("page_scrape", str(exc))

        fields = parse_watch_page(html, self.settings)
        if not fields:
            return StrategyOutcome.failed("page_scrape", "no fields matched on watch page")
        return StrategyOutcome(name="page_scrape", fields=fields)

    async def fetch_oembed(self, http: httpx.AsyncClient, video_id: str) -> StrategyOutcome:
        """Public oEmbed endpoint; a cheap corrective for weak scraped titles."""
        try:
            data = await fetch_json(
                http,
                OEMBED_ENDPOINT,
                timeout=self.settings.oembed_timeout_seconds,
                params={"url": WATCH_URL.format(video_id=video_id), "format": "json"},
            )
        except TransportError as exc:
            logger.warning("oEmbed fallback failed for %s: %s", video_id, exc)
            return StrategyOutcome.failed("oembed", str(exc))

        fields = {"title": data.get("title"), "author": data.get("author_name")}
        fields = {key: value for key, value in fields.items() if isinstance(value, str) and value}
        if not fields:
            return StrategyOutcome.failed("oembed", "oEmbed response had no title or author")
        logger.info("oEmbed fallback used for title/author of %s", video_id)
        return StrategyOutcome(name="oembed", fields=fields)

    async def fetch_platform_api(
        self, http: httpx.AsyncClient, video_id: str, fields: dict
    ) -> StrategyOutcome:
        """YouTube Data API; runs only with a key and while title or description is missing."""
        if self.data_client is None:
            return StrategyOutcome.skipped("platform_api", "no API key configured")
        if fields.get("title") and fields.get("description"):
            return StrategyOutcome.skipped("platform_api", "title and description present")

        try:
            api_fields = await self.data_client.fetch_video(http, video_id)
        except TransportError as exc:
            logger.warning("YouTube API call failed for %s: %s", video_id, exc)
            return StrategyOutcome.failed("platform_api", str(exc))
        except Exception as exc:
            # Malformed payloads
            logger.warning("YouTube API response unusable for %s: %s", video_id, exc)
            return StrategyOutcome.failed("platform_api", f"{type(exc).__name__}: {exc}")

        if not api_fields:
            return StrategyOutcome.failed("platform_api", "video unavailable via API")
        return StrategyOutcome(name="platform_api", fields=api_fields)

    async def transcribe(self, video_id: str, deadline: float | None) -> StrategyOutcome:
        """AI transcription; only when configured and no transcript was accepted."""
        if self.transcriber is None:
            return StrategyOutcome.skipped("transcription", "no transcription service configured")

        budget = self.settings.transcription_timeout_seconds
        if deadline is not None:
            remaining = deadline - time.monotonic() - _TRANSCRIPTION_MIN_REMAINING
            if remaining <= 0:
                return StrategyOutcome.skipped("transcription", "attempt budget exhausted")
            budget = min(budget, remaining)

        try:
            async with asyncio.timeout(budget):
                text = await self.transcriber.transcribe(WATCH_URL.format(video_id=video_id))
        except TimeoutError:
            logger.warning("Transcription timed out after %.1fs for %s", budget, video_id)
            return StrategyOutcome.failed("transcription", f"transcription timed out after {budget:.0f}s")
        except Exception as exc:
            logger.warning("Transcription failed for %s: %s", video_id, exc)
            return StrategyOutcome.failed("transcription", f"{type(exc).__name__}: {exc}")

        text = clean_transcript([text])
        if len(text) <= self.settings.min_transcript_chars:
            return StrategyOutcome.failed("transcription", "transcription returned too little text")
        return StrategyOutcome(
            name="transcription",
            fields={"transcript": text, "transcript_source": SOURCE_AI_TRANSCRIPTION},
        )


def _describe_transcript_error(exc: Exception) -> str:
    if isinstance(exc, TranscriptsDisabled):
        return "transcripts are disabled for this video"
    if isinstance(exc, InvalidVideoId):
        return "invalid video id"
    return "video is unavailable"


def _fetch_segments(
    transcript_api: YouTubeTranscriptApi, video_id: str, languages: list[str] | None
) -> list:
    if languages is not None:
        return list(transcript_api.fetch(video_id, languages=languages))
    transcript = next(iter(transcript_api.list(video_id)), None)
    if transcript is None:
        return []
    return list(transcript.fetch())
