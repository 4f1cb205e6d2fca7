"""Bounded retry with exponential backoff and a per-attempt timeout."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from content_board.config import Settings
from content_board.extraction.errors import AttemptTimeoutError, TransportError
from content_board.models.content import ExtractionResult

logger = logging.getLogger(__name__)

# Transient (retryable) error types
RETRYABLE_ERRORS = (TransportError, AttemptTimeoutError, httpx.HTTPError, OSError)

Sleep = Callable[[float], Awaitable[None]]


async def _run_attempt(
    attempt: Callable[[], Awaitable[ExtractionResult]], timeout_seconds: float
) -> ExtractionResult:
    try:
        async with asyncio.timeout(timeout_seconds):
            return await attempt()
    except TimeoutError as exc:
        raise AttemptTimeoutError(f"attempt timed out after {timeout_seconds:.0f}s") from exc


def _exhausted_message(attempts: int, exc: BaseException) -> str:
    message = f"Extraction failed after {attempts} attempts: {exc}"
    if isinstance(exc, AttemptTimeoutError) or "timeout" in str(exc).lower():
        message += ". The website took too long to respond."
    elif isinstance(exc, TransportError) and exc.status_code == 403:
        message += ". Access to this website is restricted."
    return message


async def run_with_retry(
    attempt: Callable[[], Awaitable[ExtractionResult]],
    settings: Settings,
    sleep: Sleep = asyncio.sleep,
) -> ExtractionResult:
    """Run ``attempt`` up to ``settings.max_attempts`` times.

    Each try gets ``attempt_timeout_seconds``. Between tries the wait is
    ``min(initial * 2^(n-1), max)``: 1s, then 2s, capped at 5s by default.

    Any ExtractionResult returned by ``attempt`` is final, including failures
    and low-confidence successes; only transport errors and timeouts are
    retried. When every try fails, the result carries the attempt count and
    the last underlying error.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(settings.max_attempts),
        wait=wait_exponential(
            multiplier=settings.backoff_initial_seconds,
            max=settings.backoff_max_seconds,
        ),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        sleep=sleep,
        reraise=True,
    )
    attempts = 0
    try:
        async for retry_attempt in retrying:
            with retry_attempt:
                attempts = retry_attempt.retry_state.attempt_number
                return await _run_attempt(attempt, settings.attempt_timeout_seconds)
    except RETRYABLE_ERRORS as exc:
        logger.error("All %d extraction attempts failed. Last error: %s", attempts, exc)
        return ExtractionResult.failure(_exhausted_message(attempts, exc))
