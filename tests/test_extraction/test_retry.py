"""Tests for the retry envelope with a recording sleep."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from content_board.extraction.errors import TransportError
from content_board.extraction.retry import run_with_retry
from content_board.models.content import ExtractionResult, Metadata, MetadataType

OK = ExtractionResult.ok(
    title="Fine",
    content="Content that made it through after a flaky start.",
    metadata=Metadata(type=MetadataType.ARTICLE, url="https://example.com"),
)


class RecordingSleep:
    """Stands in for asyncio.sleep and records requested waits."""

    def __init__(self):
        self.waits: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


@pytest.mark.asyncio
async def test_fails_twice_then_succeeds(settings):
    """Two transport failures wait 1s then 2s before the third, successful try."""
    attempt = AsyncMock(side_effect=[TransportError("HTTP 503"), TransportError("HTTP 503"), OK])
    sleep = RecordingSleep()

    result = await run_with_retry(attempt, settings, sleep=sleep)

    assert result == OK
    assert attempt.await_count == 3
    assert sleep.waits == [1.0, 2.0]
    assert 2 <= sleep.waits[-1] <= 5


@pytest.mark.asyncio
async def test_all_attempts_fail(settings):
    """Exhaustion reports the attempt count and the last error."""
    attempt = AsyncMock(
        side_effect=[
            TransportError("HTTP 502: Bad Gateway", status_code=502),
            TransportError("HTTP 503: Service Unavailable", status_code=503),
            TransportError("HTTP 500: Internal Server Error", status_code=500),
        ]
    )
    sleep = RecordingSleep()

    result = await run_with_retry(attempt, settings, sleep=sleep)

    assert result.success is False
    assert result.error == "Extraction failed after 3 attempts: HTTP 500: Internal Server Error"
    assert attempt.await_count == 3
    assert len(sleep.waits) == 2


@pytest.mark.asyncio
async def test_forbidden_gets_access_hint(settings):
    attempt = AsyncMock(side_effect=TransportError("HTTP 403: Forbidden", status_code=403))

    result = await run_with_retry(attempt, settings, sleep=RecordingSleep())

    assert result.error.endswith("Access to this website is restricted.")


@pytest.mark.asyncio
async def test_failure_result_is_not_retried(settings):
    """A returned failure is final; only raised transport errors retry."""
    failure = ExtractionResult.failure("Invalid YouTube URL")
    attempt = AsyncMock(return_value=failure)
    sleep = RecordingSleep()

    result = await run_with_retry(attempt, settings, sleep=sleep)

    assert result == failure
    assert attempt.await_count == 1
    assert sleep.waits == []


@pytest.mark.asyncio
async def test_slow_attempt_times_out(settings):
    """Each try is cut off at the attempt timeout."""
    fast = settings.model_copy(update={"attempt_timeout_seconds": 0.05})

    async def slow():
        await asyncio.sleep(5)
        return OK

    result = await run_with_retry(slow, fast, sleep=RecordingSleep())

    assert result.success is False
    assert result.error.startswith("Extraction failed after 3 attempts: attempt timed out")
    assert result.error.endswith("The website took too long to respond.")


@pytest.mark.asyncio
async def test_unexpected_error_propagates(settings):
    """Programming errors are not retried or converted."""
    attempt = AsyncMock(side_effect=ValueError("bad state"))

    with pytest.raises(ValueError, match="bad state"):
        await run_with_retry(attempt, settings, sleep=RecordingSleep())

    assert attempt.await_count == 1


@pytest.mark.asyncio
async def test_backoff_is_capped(settings):
    """Waits double from the initial value and stop at the cap."""
    extended = settings.model_copy(update={"max_attempts": 5})
    attempt = AsyncMock(side_effect=TransportError("connection reset"))
    sleep = RecordingSleep()

    result = await run_with_retry(attempt, extended, sleep=sleep)

    assert result.error.startswith("Extraction failed after 5 attempts")
    assert sleep.waits == [1.0, 2.0, 4.0, 5.0]
