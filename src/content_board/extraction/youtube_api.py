"""YouTube Data API v3 client for canonical video metadata."""

import re

import httpx

from content_board.extraction.fetch import fetch_json

VIDEOS_ENDPOINT = "https://www.googleapis.com/youtube/v3/videos"

ISO_DURATION_PATTERN = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def parse_iso_duration(value: str) -> int | None:
    """Convert an ISO 8601 duration such as ``PT1H2M3S`` to seconds."""
    match = ISO_DURATION_PATTERN.match(value)
    if not match:
        return None
    parts = {k: int(v) for k, v in match.groupdict().items() if v}
    return (
        parts.get("days", 0) * 86400
        + parts.get("hours", 0) * 3600
        + parts.get("minutes", 0) * 60
        + parts.get("seconds", 0)
    )


class YouTubeDataClient:
    """Thin async wrapper over the ``videos.list`` endpoint.

    Constructed by the pipeline only when an API key is configured, then
    passed to the video strategy chain.
    """

    def __init__(self, api_key: str, timeout: float = 10.0) -> None:
        self.api_key = api_key
        self.timeout = timeout

    async def fetch_video(self, http: httpx.AsyncClient, video_id: str) -> dict:
        """Return title, description, channel, view count, publish date and duration.

        Only keys with a value are included. An unknown video returns ``{}``.

        Raises:
            TransportError: On HTTP or network failure.
        """
        data = await fetch_json(
            http,
            VIDEOS_ENDPOINT,
            timeout=self.timeout,
            params={
                "part": "snippet,statistics,contentDetails",
                "id": video_id,
                "key": self.api_key,
            },
        )
        items = data.get("items") or []
        if not items:
            return {}

        video = items[0]
        snippet = video.get("snippet") or {}
        statistics = video.get("statistics") or {}
        details = video.get("contentDetails") or {}
        thumbnail = ((snippet.get("thumbnails") or {}).get("high") or {}).get("url")

        duration_seconds = None
        if details.get("duration"):
            duration_seconds = parse_iso_duration(details["duration"])

        fields = {
            "title": snippet.get("title"),
            "description": snippet.get("description"),
            "author": snippet.get("channelTitle"),
            "view_count": statistics.get("viewCount"),
            "published_date": snippet.get("publishedAt"),
            "duration_seconds": duration_seconds,
            "thumbnails": [thumbnail] if thumbnail else None,
        }
        return {key: value for key, value in fields.items() if value}
