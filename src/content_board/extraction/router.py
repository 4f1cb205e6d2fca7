"""URL classification and YouTube video id parsing."""

import re
from urllib.parse import urlparse

from content_board.models.content import ContentClass

# Hostname substrings, checked in order
_HOST_MARKERS: list[tuple[tuple[str, ...], ContentClass]] = [
    (("youtube.com", "youtu.be"), ContentClass.YOUTUBE),
    (("tiktok.com",), ContentClass.TIKTOK),
    (("instagram.com",), ContentClass.INSTAGRAM),
]

# Direct shapes first, then watch URLs where v= is not the first parameter
VIDEO_ID_PATTERNS = [
    re.compile(r"(?:youtube\.com/(?:watch\?v=|embed/|v/|shorts/)|youtu\.be/)([^&\n?#/]+)"),
    re.compile(r"youtube\.com/watch\?(?:.*&)?v=([^&\n?#]+)"),
]


def classify(url: str) -> ContentClass:
    """Map a URL to a content class by hostname substring. Unknown URLs are generic articles.

    Only the host is inspected, so a path or query that mentions a platform
    does not change the class.
    """
    host = (urlparse(url.strip()).hostname or "").lower()
    for markers, content_class in _HOST_MARKERS:
        if any(marker in host for marker in markers):
            return content_class
    return ContentClass.URL


def resolve_content_class(url: str, declared: ContentClass | None = None) -> ContentClass:
    """Return the declared class when the caller supplied one, else classify the URL."""
    return declared if declared is not None else classify(url)


def extract_youtube_video_id(url: str) -> str | None:
    """Extract the video id from a YouTube URL.

    Handles: watch?v=, youtu.be/, embed/, v/, shorts/, and watch URLs with
    v= after other query params (e.g. ?feature=share&v=...).
    """
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match and match.group(1):
            return match.group(1)
    return None
