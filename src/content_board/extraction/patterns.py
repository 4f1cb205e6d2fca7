"""Ordered pattern matching for pulling fields out of raw HTML and inline JSON.

Source markup varies (JSON-LD, Open Graph tags, inline player state, legacy
meta tags), so each field is described by a priority-ordered list of
``FieldExtractor`` objects. ``extract_field`` returns the first value that
clears the field's minimum length; a miss means "not found", never an error.
"""

import html
import re
from collections.abc import Callable, Iterable, Iterator
from typing import Protocol

# Minimum lengths (exclusive) per field kind
BLOCK_MIN_CHARS = 20
ANY_CHARS = 0

# A JSON string literal body, honouring backslash escapes
JSON_STRING = r'"((?:[^"\\]|\\.)*)"'

_UNICODE_ESCAPE = re.compile(r"\\u([0-9a-fA-F]{4})")
_SCRIPT_OR_STYLE = re.compile(r"<(script|style)\b[\s\S]*?</\1\s*>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")
_PARAGRAPH = re.compile(r"<p(?:\s[^>]*)?>([\s\S]*?)</p\s*>", re.IGNORECASE)


class FieldExtractor(Protocol):
    """Anything that can try to pull one field value out of a document."""

    def try_extract(self, text: str) -> str | None: ...


def unescape(value: str) -> str:
    """Undo the encodings commonly found in scraped values.

    Handles ``\\uXXXX`` escapes, backslash-escaped quotes, slashes and
    newlines from inline JSON, then HTML entities.
    """
    value = _UNICODE_ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), value)
    value = value.replace('\\"', '"').replace("\\/", "/").replace("\\n", "\n")
    return html.unescape(value)


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def strip_tags(fragment: str) -> str:
    """Remove script/style blocks and all tags, then normalize whitespace."""
    fragment = _SCRIPT_OR_STYLE.sub("", fragment)
    fragment = _TAG.sub(" ", fragment)
    return collapse_whitespace(html.unescape(fragment))


class RegexField:
    """First capture group of a regex, un-escaped and trimmed."""

    def __init__(
        self,
        pattern: str,
        flags: int = re.IGNORECASE,
        transform: Callable[[str], str] | None = None,
    ) -> None:
        self.pattern = re.compile(pattern, flags)
        self.transform = transform

    def try_extract(self, text: str) -> str | None:
        match = self.pattern.search(text)
        if not match or not match.group(1):
            return None
        value = self._clean(match.group(1))
        if self.transform is not None:
            value = self.transform(value)
        return value.strip() or None

    def _clean(self, raw: str) -> str:
        return unescape(raw)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pattern.pattern!r})"


class HtmlBlock(RegexField):
    """A captured HTML fragment reduced to plain text."""

    def _clean(self, raw: str) -> str:
        return strip_tags(raw)


class JsonText(RegexField):
    """An inline JSON string that may itself carry markup (e.g. JSON-LD articleBody)."""

    def _clean(self, raw: str) -> str:
        return strip_tags(unescape(raw))


class ParagraphAggregate:
    """Every ``<p>`` in the document, tag-stripped, short ones dropped, joined by blank lines."""

    def __init__(self, min_paragraph_chars: int = BLOCK_MIN_CHARS) -> None:
        self.min_paragraph_chars = min_paragraph_chars

    def try_extract(self, text: str) -> str | None:
        paragraphs = (strip_tags(p) for p in _PARAGRAPH.findall(text))
        kept = [p for p in paragraphs if len(p) > self.min_paragraph_chars]
        return "\n\n".join(kept) or None

    def __repr__(self) -> str:
        return f"ParagraphAggregate(min_paragraph_chars={self.min_paragraph_chars})"


def iter_candidates(text: str, extractors: Iterable[FieldExtractor]) -> Iterator[str]:
    """Yield every non-empty value the extractors produce, in priority order."""
    for extractor in extractors:
        value = extractor.try_extract(text)
        if value:
            yield value


def extract_field(
    text: str,
    extractors: Iterable[FieldExtractor],
    min_length: int = ANY_CHARS,
) -> str | None:
    """Return the first extracted value longer than ``min_length``, or None."""
    for value in iter_candidates(text, extractors):
        if len(value) > min_length:
            return value
    return None
