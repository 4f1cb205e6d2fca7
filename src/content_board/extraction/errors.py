"""Exception hierarchy for content extraction."""


class ExtractionError(Exception):
    """Base exception for all extraction errors."""


class TransportError(ExtractionError):
    """Raised for non-2xx responses and connection failures."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AttemptTimeoutError(ExtractionError):
    """Raised when one extraction attempt exceeds its time budget."""
