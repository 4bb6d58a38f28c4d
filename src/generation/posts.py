"""Post drafting with a PydanticAI agent, one draft per platform."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import BaseModel
from pydantic_ai import Agent

from src.api.schemas import PLATFORMS, Goal, Platform
from src.config import Settings
from src.errors import PostGenerationError
from src.generation.platforms import PLATFORM_CONFIGS
from src.generation.prompts import format_posts_prompt, format_system_prompt
from src.scrape.models import NormalizedPageContent

logger = logging.getLogger(__name__)


class PostDraftsOutput(BaseModel):
    """Structured model output; every field has a default so partial answers validate."""

    x: str = ""
    linkedin: str = ""
    bluesky: str = ""
    mastodon: str = ""
    x_image: str | None = None
    linkedin_image: str | None = None
    bluesky_image: str | None = None
    mastodon_image: str | None = None


@dataclass(frozen=True)
class PostDraft:
    platform: Platform
    content: str
    character_count: int
    suggested_image: str | None = None


def build_drafts(
    output: PostDraftsOutput, page: NormalizedPageContent
) -> dict[Platform, PostDraft]:
    """Turn model output into drafts, filling placeholders and image fallbacks."""
    fallback_image = page.images[0] if page.images else None
    drafts: dict[Platform, PostDraft] = {}
    for platform in PLATFORMS:
        text: str = getattr(output, platform)
        image: str | None = getattr(output, f"{platform}_image")
        drafts[platform] = PostDraft(
            platform=platform,
            content=text or f"No content generated for {PLATFORM_CONFIGS[platform].short_name}",
            character_count=len(text),
            suggested_image=image or fallback_image,
        )
    return drafts


class PostGenerator:
    """Drafts X, LinkedIn, BlueSky and Mastodon posts for a scraped page."""

    def __init__(self, settings: Settings) -> None:
        self._model = f"{settings.llm_provider}:{settings.llm_model}"
        self._content_chars = settings.content_prompt_chars

    async def generate(
        self, page: NormalizedPageContent, goal: Goal | None = None
    ) -> dict[Platform, PostDraft]:
        logger.info(
            "generating posts",
            extra={"url": page.url, "goal": goal, "model": self._model},
        )
        prompt = format_posts_prompt(page, content_chars=self._content_chars)
        try:
            agent = Agent(
                self._model,
                output_type=PostDraftsOutput,
                system_prompt=format_system_prompt(goal),
            )
            result = await agent.run(prompt)
        except Exception as exc:
            logger.exception("post generation failed", extra={"url": page.url})
            raise PostGenerationError("Failed to generate social media posts") from exc

        drafts = build_drafts(result.output, page)
        usage = result.usage()
        logger.info(
            "posts generated",
            extra={
                "url": page.url,
                "character_counts": {p: d.character_count for p, d in drafts.items()},
                "input_tokens": usage.input_tokens or 0,
                "output_tokens": usage.output_tokens or 0,
            },
        )
        return drafts
