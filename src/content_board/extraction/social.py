"""TikTok and Instagram placeholders.

These platforms do not allow unauthenticated structured retrieval, so no
request is made. The result is a deterministic, clearly labelled advisory
block; callers must not treat it as verbatim source content.
"""

from content_board.models.content import (
    ContentClass,
    ExtractionResult,
    Metadata,
    MetadataType,
)

SOURCE_SOCIAL = "Social Placeholder"

_PLATFORMS = {
    ContentClass.TIKTOK: {
        "platform": "TikTok",
        "title": "TikTok Content",
        "content_format": "video",
        "noun": "video",
        "note": "Visual/audio content - manual review recommended",
        "body": (
            "TikTok content is short-form video whose substance lives in the visuals, "
            "music and speech rather than in page text."
        ),
    },
    ContentClass.INSTAGRAM: {
        "platform": "Instagram",
        "title": "Instagram Content",
        "content_format": "visual",
        "noun": "post",
        "note": "Visual content - manual review recommended",
        "body": (
            "Instagram content is image- and video-first (posts, Reels, Stories); "
            "captions and hashtags are secondary to the visuals."
        ),
    },
}


def extract_social(url: str, content_class: ContentClass) -> ExtractionResult:
    """Return the placeholder result for a TikTok or Instagram URL."""
    profile = _PLATFORMS[content_class]
    content = "\n\n".join(
        [
            f"{profile['platform']} {profile['noun']} from: {url}",
            profile["body"],
            (
                f"Note: the text of this {profile['platform']} {profile['noun']} was not retrieved. "
                f"{profile['platform']} does not allow automated extraction without "
                "signing in, so view the original and add any details manually."
            ),
        ]
    )
    metadata = Metadata(
        type=MetadataType.SOCIAL,
        url=url,
        platform=profile["platform"],
        content_format=profile["content_format"],
        note=profile["note"],
        content_length=len(content),
        word_count=len(content.split()),
        sources=[SOURCE_SOCIAL],
        extraction_method=SOURCE_SOCIAL,
    )
    return ExtractionResult.ok(title=profile["title"], content=content, metadata=metadata)
