"""Gemini integration: optional video transcription.

Public API:
    build_gemini_client(settings) -> genai.Client | None
    GeminiTranscriber(client, model).transcribe(video_url) -> str
"""

from content_board.llm.client import build_gemini_client
from content_board.llm.transcriber import GeminiTranscriber

__all__ = [
    "build_gemini_client",
    "GeminiTranscriber",
]
