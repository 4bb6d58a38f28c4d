"""Request/response Pydantic models."""

from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

Platform = Literal["x", "linkedin", "bluesky", "mastodon"]
Goal = Literal["none", "engagement", "awareness", "traffic", "conversion", "authority"]

PLATFORMS: tuple[Platform, ...] = ("x", "linkedin", "bluesky", "mastodon")


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either form on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UrlAnalysisRequest(CamelModel):
    url: str
    goal: Goal = "none"
    generate_images: bool = False

    @field_validator("url")
    @classmethod
    def _require_absolute_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("url must be an absolute http(s) URL")
        return value

    @field_validator("goal", mode="before")
    @classmethod
    def _empty_goal_is_none(cls, value: object) -> object:
        if value is None or value == "":
            return "none"
        return value


class WebpageContent(CamelModel):
    id: int
    url: str
    title: str
    description: str = ""
    domain: str = ""
    content: str = ""
    tags: list[str] = []
    images: list[str] = []


class SocialPost(CamelModel):
    id: int
    webpage_content_id: int
    platform: Platform
    content: str
    character_count: int
    suggested_image: str | None = None
    goal: Goal | None = None


class PlatformPosts(CamelModel):
    x: SocialPost
    linkedin: SocialPost
    bluesky: SocialPost
    mastodon: SocialPost


class ContentGenerationResponse(CamelModel):
    source_content: WebpageContent
    posts: PlatformPosts


class GenerateImageRequest(CamelModel):
    title: str
    description: str = ""
    platform: str = "x"


class GenerateImageResponse(CamelModel):
    image_url: str
