"""Video transcription through Gemini's native YouTube URL support."""

import logging

from google import genai
from google.genai import types
from google.genai.errors import ClientError, ServerError
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = logging.getLogger(__name__)

TRANSCRIBE_PROMPT = (
    "Transcribe the spoken content of this video verbatim as plain text. "
    "Do not summarize, do not add timestamps, speaker labels, or commentary. "
    "If the video has no speech, reply with an empty response."
)


def _is_retryable(error: BaseException) -> bool:
    """Server errors (5xx) and rate limits (429) are transient; other client errors are not."""
    if isinstance(error, ServerError):
        return True
    if isinstance(error, ClientError) and error.code == 429:
        return True
    return False


class GeminiTranscriber:
    """Produces a transcript for a public YouTube video URL."""

    def __init__(self, client: genai.Client, model: str) -> None:
        self.client = client
        self.model = model

    async def transcribe(self, video_url: str) -> str:
        """Return the transcript text, or an empty string when the model gives none.

        Raises:
            ClientError: On permanent API errors (400, 401, 403).
            ServerError: After exhausting retries on server errors.
        """
        response = await self._generate(video_url)
        return (response.text or "").strip()

    @retry(
        retry=retry_if_exception(_is_retryable),
        wait=wait_exponential_jitter(initial=1, max=4, jitter=1),
        stop=stop_after_attempt(2),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _generate(self, video_url: str) -> types.GenerateContentResponse:
        return await self.client.aio.models.generate_content(
            model=self.model,
            contents=types.Content(
                role="user",
                parts=[
                    types.Part(file_data=types.FileData(file_uri=video_url)),
                    types.Part(text=TRANSCRIBE_PROMPT),
                ],
            ),
            config=types.GenerateContentConfig(temperature=0.0),
        )
