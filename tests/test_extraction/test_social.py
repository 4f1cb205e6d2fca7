"""Tests for the TikTok and Instagram placeholders."""

from content_board.extraction.social import SOURCE_SOCIAL, extract_social
from content_board.models.content import ContentClass, MetadataType


def test_tiktok_placeholder():
    url = "https://www.tiktok.com/@user/video/7300000000000000000"
    result = extract_social(url, ContentClass.TIKTOK)

    assert result.success is True
    assert result.title == "TikTok Content"
    assert result.content.startswith(f"TikTok video from: {url}")
    assert result.metadata.type == MetadataType.SOCIAL
    assert result.metadata.platform == "TikTok"
    assert result.metadata.content_format == "video"
    assert "manual review recommended" in result.metadata.note
    assert result.metadata.sources == [SOURCE_SOCIAL]


def test_instagram_placeholder():
    url = "https://www.instagram.com/p/Cabc123/"
    result = extract_social(url, ContentClass.INSTAGRAM)

    assert result.title == "Instagram Content"
    assert result.content.startswith(f"Instagram post from: {url}")
    assert result.metadata.content_format == "visual"
    assert len(result.content) >= 50


def test_placeholder_is_deterministic():
    """Same URL, same result."""
    url = "https://www.instagram.com/reel/Cxyz/"
    assert extract_social(url, ContentClass.INSTAGRAM) == extract_social(url, ContentClass.INSTAGRAM)
