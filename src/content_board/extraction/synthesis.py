"""Merging strategy outputs into a final ExtractionResult.

The synthesizer owns the "is this good enough" decisions: which sections make
it into the content body, when to fall back to a structured low-confidence
block, and how to word a failure.
"""

from collections.abc import Iterable
from urllib.parse import urlparse

from content_board.config import Settings
from content_board.models.content import (
    ExtractionResult,
    Metadata,
    MetadataType,
    StrategyOutcome,
)

# Labels recorded in metadata.sources
SOURCE_TRANSCRIPT = "Video Transcript"
SOURCE_AI_TRANSCRIPTION = "AI Transcription"
SOURCE_DESCRIPTION = "Video Description"
SOURCE_ANALYSIS = "Enhanced Analysis"
SOURCE_WEB_PAGE = "Web Page"
SOURCE_READABILITY = "Readability Fallback"

# (markers, message); first marker hit wins
VIDEO_FAILURE_HINTS: list[tuple[tuple[str, ...], str]] = [
    (
        ("transcript",),
        "This video does not have transcripts available. "
        "Try a different video with captions/subtitles enabled.",
    ),
    (
        ("private", "unavailable"),
        "This video is private or unavailable. Please check the URL and try a public video.",
    ),
    (
        ("blocked", "restricted"),
        "Access to this video is restricted. "
        "Try a different video or check regional availability.",
    ),
]
VIDEO_GENERIC_FAILURE = (
    "Could not extract sufficient content from this YouTube video. The video may be "
    "private, have restricted access, or lack transcript data."
)
ARTICLE_INSUFFICIENT = (
    "Could not extract meaningful content from this article. "
    "The site may use heavy JavaScript or have access restrictions."
)


def merge_fields(target: dict, fields: dict) -> None:
    """Copy values into ``target`` only where ``target`` has nothing yet."""
    for key, value in fields.items():
        if value and not target.get(key):
            target[key] = value


def last_failure_reason(outcomes: Iterable[StrategyOutcome]) -> str | None:
    """Most recent failure among strategies that actually ran."""
    reason = None
    for outcome in outcomes:
        if outcome.attempted and outcome.failure_reason:
            reason = outcome.failure_reason
    return reason


def classify_video_failure(reason: str | None) -> str:
    """Turn the last recorded failure into a user-facing message."""
    lowered = (reason or "").lower()
    for markers, message in VIDEO_FAILURE_HINTS:
        if any(marker in lowered for marker in markers):
            return message
    return VIDEO_GENERIC_FAILURE


def format_duration(seconds: int | None) -> str | None:
    """``213`` -> ``"3:33"``, ``3723`` -> ``"1:02:03"``."""
    if not seconds:
        return None
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _word_count(text: str) -> int:
    return len(text.split())


def build_video_analysis(video_id: str, fields: dict) -> str:
    """Structured low-confidence block built only from collected metadata."""
    lines = [
        "VIDEO ANALYSIS:",
        f"Title: {fields.get('title') or f'YouTube Video {video_id}'}",
        f"Channel: {fields.get('author') or 'Unknown Channel'}",
    ]
    if fields.get("view_count"):
        lines.append(f"Views: {fields['view_count']}")
    if fields.get("published_date"):
        lines.append(f"Published: {fields['published_date']}")
    duration = format_duration(fields.get("duration_seconds"))
    if duration:
        lines.append(f"Duration: {duration}")
    lines += [
        "",
        "CONTENT SUMMARY:",
        "A transcript and a usable description could not be retrieved for this video. "
        "This summary is assembled only from the metadata listed above and should be "
        "treated as low-confidence; watch the video for its actual content.",
    ]
    return "\n".join(lines)


def synthesize_video(
    url: str,
    video_id: str,
    fields: dict,
    outcomes: list[StrategyOutcome],
    settings: Settings,
) -> ExtractionResult:
    """Assemble the video content body in priority order and apply the acceptance gate.

    Priority: transcript > title > description > channel > view count. When the
    assembled body is thin, it is replaced by the metadata-only analysis block
    and tagged ``Enhanced Analysis``.
    """
    sections: list[str] = []
    sources: list[str] = []

    transcript = fields.get("transcript") or ""
    has_transcript = len(transcript) > settings.min_transcript_chars
    if has_transcript:
        sections.append(f"TRANSCRIPT:\n{transcript}")
        sources.append(fields.get("transcript_source") or SOURCE_TRANSCRIPT)

    if fields.get("title"):
        sections.append(f"TITLE: {fields['title']}")

    description = fields.get("description") or ""
    has_description = len(description) > settings.min_description_chars
    if has_description:
        sections.append(f"DESCRIPTION:\n{description}")
        sources.append(SOURCE_DESCRIPTION)

    if fields.get("author"):
        sections.append(f"CHANNEL: {fields['author']}")
    if fields.get("view_count"):
        sections.append(f"Views: {fields['view_count']}")

    content = "\n\n".join(sections)
    if len(content) < settings.rich_video_chars:
        content = build_video_analysis(video_id, fields)
        sources.append(SOURCE_ANALYSIS)

    content = content.strip()
    # Unreachable with default thresholds: the analysis block alone exceeds min_result_chars
    if len(content) < settings.min_result_chars:
        return ExtractionResult.failure(classify_video_failure(last_failure_reason(outcomes)))

    metadata = Metadata(
        type=MetadataType.VIDEO,
        url=url,
        platform="YouTube",
        video_id=video_id,
        author=fields.get("author"),
        view_count=fields.get("view_count"),
        published_date=fields.get("published_date"),
        duration=format_duration(fields.get("duration_seconds")),
        description=description or None,
        thumbnails=fields.get("thumbnails")
        or [f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"],
        content_length=len(content),
        word_count=_word_count(content),
        sources=sources,
        has_transcript=has_transcript,
        has_description=has_description,
        extraction_method=", ".join(sources),
    )
    return ExtractionResult.ok(
        title=fields.get("title") or f"YouTube Video - {video_id}",
        content=content,
        metadata=metadata,
    )


def synthesize_article(url: str, fields: dict, settings: Settings) -> ExtractionResult:
    """Apply the article acceptance gate and wrap the body in the standard block."""
    body = (fields.get("content") or "").strip()
    if len(body) < settings.min_article_chars:
        return ExtractionResult.failure(ARTICLE_INSUFFICIENT)

    domain = urlparse(url).hostname or ""
    title = fields.get("title") or "Untitled Article"
    author = fields.get("author")
    published = fields.get("published_date")
    description = fields.get("description")

    lines = [
        "ARTICLE ANALYSIS:",
        f"Title: {title}",
        f"Author: {author or 'Unknown Author'}",
    ]
    if published:
        lines.append(f"Published: {published}")
    lines += [f"Source: {domain}", "", "CONTENT:", body]
    if description:
        lines += ["", f"SUMMARY: {description}"]
    content = "\n".join(lines)

    source = fields.get("content_source") or SOURCE_WEB_PAGE
    metadata = Metadata(
        type=MetadataType.ARTICLE,
        url=url,
        domain=domain,
        author=author,
        published_date=published,
        description=description,
        content_length=len(content),
        word_count=_word_count(content),
        sources=[source],
        has_metadata=bool(author or published or description),
        extraction_method=source,
    )
    return ExtractionResult.ok(title=title, content=content, metadata=metadata)
