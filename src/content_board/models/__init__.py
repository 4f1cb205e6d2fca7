"""Data models and enums for the content extraction pipeline."""

from content_board.models.content import (
    ContentClass,
    ExtractionRequest,
    ExtractionResult,
    Metadata,
    MetadataType,
    StrategyOutcome,
)

__all__ = [
    "ContentClass",
    "ExtractionRequest",
    "ExtractionResult",
    "Metadata",
    "MetadataType",
    "StrategyOutcome",
]
