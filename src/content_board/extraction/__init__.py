"""Content extraction: YouTube, article, and social URL retrieval.

Public API:
    extract(url, declared_type=None) -> ExtractionResult
        Single entry point that classifies the URL, runs the matching
        strategy chain, and retries transport failures with backoff.
"""

from content_board.extraction.pipeline import ExtractionPipeline, extract
from content_board.extraction.router import classify, extract_youtube_video_id
from content_board.models.content import ContentClass, ExtractionResult

__all__ = [
    "extract",
    "ExtractionPipeline",
    "classify",
    "extract_youtube_video_id",
    "ContentClass",
    "ExtractionResult",
]
