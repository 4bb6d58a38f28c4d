"""Prompt templates for post drafting and image generation."""

from src.generation.platforms import PLATFORM_CONFIGS, resolve_platform
from src.scrape.models import NormalizedPageContent

SYSTEM_PROMPT = """\
You are a professional social media strategist. You create platform-specific \
social media posts based on webpage content.

You'll receive information about a webpage and you need to create optimized \
posts for X, LinkedIn, BlueSky, and Mastodon. Each platform has different \
character limits and styles that must be respected.

{goal_context}

For each platform, generate content that:
1. Is within the character limit
2. Matches the platform's style and audience expectations
3. Highlights the most relevant information from the article
4. Includes appropriate formatting (line breaks, emojis, hashtags)
5. Always includes the URL to the original content

Always create actual content for each platform. Never return empty or generic \
placeholder content.

Return one field per platform (x, linkedin, bluesky, mastodon) with the post \
text, and optionally x_image, linkedin_image, bluesky_image, mastodon_image \
with the URL of the best available image for that platform.
"""

GOAL_CONTEXT = (
    'The content should focus on the goal of "{goal}" - prioritize content '
    "that helps achieve this goal."
)
BALANCED_CONTEXT = (
    "The content should be balanced for general engagement and information sharing."
)

POSTS_PROMPT = """\
Generate social media posts for this webpage:

URL: {url}
Title: {title}
Description: {description}
Content: {content}
Tags: {tags}

For each platform, create ENGAGING and INFORMATIVE content:

1. X (Twitter):
   - Character limit: {x_max_chars}
   - Style: {x_style}
   - Be concise but impactful
   - Use relevant hashtags (2-3 max)
   - Include emojis where appropriate
   - MUST include the URL: {url}

2. LinkedIn:
   - Character limit: {linkedin_max_chars}
   - Style: {linkedin_style}
   - More detailed and professional
   - Include bullet points for key takeaways
   - Use 1-2 professional hashtags
   - MUST include the URL: {url}

3. BlueSky:
   - Character limit: {bluesky_max_chars}
   - Style: {bluesky_style}
   - Conversational and personal tone
   - Can include creative elements
   - MUST include the URL: {url}

4. Mastodon:
   - Character limit: {mastodon_max_chars}
   - Style: {mastodon_style}
   - Community-focused
   - Use meaningful hashtags
   - Transparent and authentic
   - MUST include the URL: {url}

If there are images available, suggest which one might work best for each platform:
Available images: {images}

Analyze the content thoroughly and extract the most important points for each platform.
"""

IMAGE_PROMPT = "Create a professional social media image for {platform} about: {title}"


def format_system_prompt(goal: str | None) -> str:
    if goal and goal != "none":
        goal_context = GOAL_CONTEXT.format(goal=goal)
    else:
        goal_context = BALANCED_CONTEXT
    return SYSTEM_PROMPT.format(goal_context=goal_context)


def format_posts_prompt(page: NormalizedPageContent, content_chars: int = 2000) -> str:
    limits = {}
    for platform, config in PLATFORM_CONFIGS.items():
        limits[f"{platform}_max_chars"] = config.max_chars
        limits[f"{platform}_style"] = config.style
    return POSTS_PROMPT.format(
        url=page.url,
        title=page.title,
        description=page.description,
        content=page.content[:content_chars],
        tags=", ".join(page.tags),
        images=", ".join(page.images),
        **limits,
    )


def format_image_prompt(title: str, description: str, platform: str) -> str:
    config = PLATFORM_CONFIGS[resolve_platform(platform)]
    prompt = IMAGE_PROMPT.format(platform=platform, title=title)
    if description:
        prompt += f". The content is about: {description[:100]}"
    return f"{prompt}. {config.image_style}. High resolution, no text overlay."
