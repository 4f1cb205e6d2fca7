"""Extraction request/result models, content classes, and strategy outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel


class ContentClass(str, Enum):
    """Source classes a URL can be routed to."""

    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"
    URL = "url"  # Generic article


class MetadataType(str, Enum):
    """Shape of the metadata attached to a result."""

    VIDEO = "video"
    ARTICLE = "article"
    SOCIAL = "social"
    CHANNEL = "channel"
    PLAYLIST = "playlist"


class ExtractionRequest(BaseModel):
    """A single extraction request. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    url: str
    type: ContentClass | None = None  # Declared class; inferred from the URL when absent

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("URL is required")
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Not a valid http(s) URL: {value}")
        return value


class Metadata(BaseModel):
    """Per-result metadata. Serialized with camelCase keys for the board UI."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: MetadataType
    url: str
    platform: str | None = None
    author: str | None = None
    duration: str | None = None
    published_date: str | None = None
    description: str | None = None
    thumbnails: list[str] | None = None
    highlights: list[str] | None = None
    sentiment: str | None = None
    entities: list[str] | None = None
    content_length: int | None = None
    word_count: int | None = None
    sources: list[str] | None = None

    # Source-specific extras
    video_id: str | None = None
    view_count: str | None = None
    domain: str | None = None
    note: str | None = None
    content_format: str | None = None  # e.g. "video", "visual"
    has_transcript: bool | None = None
    has_description: bool | None = None
    has_metadata: bool | None = None
    extraction_method: str | None = None


class ExtractionResult(BaseModel):
    """Outcome of one extraction. Built once, never mutated.

    Use ``ExtractionResult.ok()`` and ``ExtractionResult.failure()`` rather than
    the constructor so the success/failure shape stays consistent.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    title: str | None = None
    content: str | None = None
    metadata: Metadata | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> "ExtractionResult":
        if self.success:
            if not self.content or not self.content.strip():
                raise ValueError("successful result requires content")
            if self.error is not None:
                raise ValueError("successful result cannot carry an error")
        else:
            if not self.error:
                raise ValueError("failed result requires an error message")
            if self.content is not None or self.title is not None:
                raise ValueError("failed result cannot carry title or content")
        return self

    @classmethod
    def ok(cls, title: str, content: str, metadata: Metadata) -> "ExtractionResult":
        return cls(success=True, title=title, content=content, metadata=metadata)

    @classmethod
    def failure(cls, error: str) -> "ExtractionResult":
        return cls(success=False, error=error)


@dataclass
class StrategyOutcome:
    """What a single strategy invocation contributed.

    ``fields`` holds only the keys the strategy actually recovered (title,
    content, transcript, description, author, ...). A strategy that was not
    eligible to run has ``attempted=False``.
    """

    name: str
    attempted: bool = True
    fields: dict[str, Any] = field(default_factory=dict)
    failure_reason: str | None = None

    @property
    def contributed(self) -> bool:
        return bool(self.fields)

    @classmethod
    def skipped(cls, name: str, reason: str) -> "StrategyOutcome":
        return cls(name=name, attempted=False, failure_reason=reason)

    @classmethod
    def failed(cls, name: str, reason: str) -> "StrategyOutcome":
        return cls(name=name, failure_reason=reason)
