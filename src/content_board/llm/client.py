"""Gemini client construction.

The client is built once by the pipeline's composition root and handed to
the transcriber. Uses a bounded HTTP timeout and no HttpRetryOptions;
tenacity handles retries at the application level to avoid double-retry
behavior.
"""

from google import genai
from google.genai import types

from content_board.config import Settings


def build_gemini_client(settings: Settings) -> genai.Client | None:
    """Return a Gemini client, or None when no API key is configured."""
    if not settings.gemini_api_key:
        return None
    return genai.Client(
        api_key=settings.gemini_api_key,
        http_options=types.HttpOptions(
            timeout=int(settings.transcription_timeout_seconds * 1000)
        ),
    )
