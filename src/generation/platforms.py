"""Per-platform limits, styles and image sizes."""

from __future__ import annotations

from dataclasses import dataclass

from src.api.schemas import Platform


@dataclass(frozen=True)
class PlatformConfig:
    """Posting conventions for one social platform."""

    name: str
    short_name: str
    max_chars: int
    style: str
    image_width: int
    image_height: int
    image_style: str


PLATFORM_CONFIGS: dict[Platform, PlatformConfig] = {
    "x": PlatformConfig(
        name="X (Twitter)",
        short_name="X",
        max_chars=280,
        style="Concise, engaging, uses hashtags sparingly. Include relevant emojis. Good for quick updates and links.",
        image_width=1200,
        image_height=675,
        image_style="modern and engaging style, vibrant colors, minimal text, professional photography quality",
    ),
    "linkedin": PlatformConfig(
        name="LinkedIn",
        short_name="LinkedIn",
        max_chars=3000,
        style="Professional, detailed, structured with bullet points. Uses industry terminology and focuses on business value. Include relevant hashtags.",
        image_width=1200,
        image_height=627,
        image_style="corporate and professional style, business-appropriate, clean layout, trustworthy appearance",
    ),
    "bluesky": PlatformConfig(
        name="BlueSky",
        short_name="BlueSky",
        max_chars=300,
        style="Conversational and personal. Similar to X but can be more casual. Uses fewer hashtags and more natural language.",
        image_width=1200,
        image_height=627,
        image_style="friendly and minimalist style, soft colors, clean design, approachable look",
    ),
    "mastodon": PlatformConfig(
        name="Mastodon",
        short_name="Mastodon",
        max_chars=500,
        style="Community-focused, transparent. Uses hashtags meaningfully. Avoids marketing speak and prefers authentic voice.",
        image_width=1280,
        image_height=720,
        image_style="community-focused and authentic style, warm colors, inclusive imagery",
    ),
}

DEFAULT_PLATFORM: Platform = "x"


def resolve_platform(platform: str) -> Platform:
    """Map an arbitrary platform name onto a known one, defaulting to X."""
    if platform in PLATFORM_CONFIGS:
        return platform  # type: ignore[return-value]
    return DEFAULT_PLATFORM
