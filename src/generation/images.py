"""Image generation via Replicate or OpenAI, with results held in the blob cache."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import httpx
from openai import AsyncOpenAI

from src.cache.redis import ImageCache
from src.config import Settings
from src.generation.platforms import PLATFORM_CONFIGS, resolve_platform
from src.generation.prompts import format_image_prompt

logger = logging.getLogger(__name__)

REPLICATE_API_URL = "https://api.replicate.com/v1"
_TERMINAL_STATUSES = {"succeeded", "failed", "canceled"}


class ImageGenerator(Protocol):
    """Protocol for image generation providers. Returns an image URL or ``None``."""

    async def generate(self, prompt: str, platform: str) -> str | None: ...


def _first_output_url(output: Any) -> str | None:
    """Replicate output is either a single URL or a list of URLs."""
    if isinstance(output, list) and output and isinstance(output[0], str):
        return output[0]
    if isinstance(output, str) and output:
        return output
    return None


class ReplicateImageGenerator:
    """Generates images with a Replicate model version, polling until done."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_token: str,
        model_version: str,
        *,
        poll_interval: float = 1.0,
        max_polls: int = 120,
        api_url: str = REPLICATE_API_URL,
    ) -> None:
        self._client = client
        self._api_token = api_token
        self._model_version = model_version
        self._poll_interval = poll_interval
        self._max_polls = max_polls
        self._api_url = api_url.rstrip("/")

    async def generate(self, prompt: str, platform: str) -> str | None:
        if not self._api_token:
            logger.error("replicate api token is not configured")
            return None

        platform = resolve_platform(platform)
        config = PLATFORM_CONFIGS[platform]
        headers = {"Authorization": f"Bearer {self._api_token}"}
        logger.info("generating image", extra={"provider": "replicate", "platform": platform})

        try:
            resp = await self._client.post(
                f"{self._api_url}/predictions",
                headers=headers,
                json={
                    "version": self._model_version,
                    "input": {
                        "prompt": prompt,
                        "width": config.image_width,
                        "height": config.image_height,
                        "output_format": "webp",
                        "output_quality": 80,
                        "safety_tolerance": 2,
                        "prompt_upsampling": True,
                        "aspect_ratio": "custom",
                    },
                },
            )
            resp.raise_for_status()
            prediction = resp.json()

            polls = 0
            while prediction.get("status") not in _TERMINAL_STATUSES:
                if polls >= self._max_polls:
                    logger.warning(
                        "image generation did not finish in time",
                        extra={"platform": platform, "prediction_id": prediction.get("id"), "polls": polls},
                    )
                    return None
                logger.debug(
                    "waiting for image generation",
                    extra={"platform": platform, "status": prediction.get("status")},
                )
                await asyncio.sleep(self._poll_interval)
                resp = await self._client.get(
                    f"{self._api_url}/predictions/{prediction['id']}",
                    headers=headers,
                )
                resp.raise_for_status()
                prediction = resp.json()
                polls += 1
        except Exception:
            logger.warning("replicate image generation failed", extra={"platform": platform}, exc_info=True)
            return None

        url = _first_output_url(prediction.get("output")) if prediction.get("status") == "succeeded" else None
        if url is None:
            logger.warning(
                "image generation did not succeed",
                extra={"platform": platform, "status": prediction.get("status")},
            )
            return None

        logger.info("image generated", extra={"platform": platform, "image_url": url})
        return url


class OpenAIImageGenerator:
    """Generates square images with the OpenAI Images API."""

    def __init__(self, api_key: str, model: str = "dall-e-3") -> None:
        self._api_key = api_key
        self._model = model

    async def generate(self, prompt: str, platform: str) -> str | None:
        if not self._api_key:
            logger.error("openai api key is not configured")
            return None

        logger.info("generating image", extra={"provider": "openai", "platform": platform})
        try:
            client = AsyncOpenAI(api_key=self._api_key)
            response = await client.images.generate(
                model=self._model,
                prompt=prompt,
                n=1,
                size="1024x1024",
                quality="standard",
            )
            return response.data[0].url
        except Exception:
            logger.warning("openai image generation failed", extra={"platform": platform}, exc_info=True)
            return None


class ImageService:
    """Generates a platform image and serves it from the blob cache when possible."""

    def __init__(
        self,
        generator: ImageGenerator,
        cache: ImageCache,
        client: httpx.AsyncClient,
        *,
        served_path: str = "/api/images",
    ) -> None:
        self._generator = generator
        self._cache = cache
        self._client = client
        self._served_path = served_path.rstrip("/")

    async def create(self, title: str, description: str, platform: str) -> str | None:
        """Generate an image for *platform*; return its served URL, or ``None``."""
        prompt = format_image_prompt(title, description, platform)
        upstream_url = await self._generator.generate(prompt, platform)
        if upstream_url is None:
            return None

        image_id = await self._store(upstream_url)
        if image_id is None:
            return upstream_url
        return f"{self._served_path}/{image_id}"

    async def _store(self, upstream_url: str) -> str | None:
        try:
            resp = await self._client.get(upstream_url, follow_redirects=True)
            resp.raise_for_status()
        except httpx.HTTPError:
            logger.warning("generated image download failed", extra={"image_url": upstream_url}, exc_info=True)
            return None
        content_type = resp.headers.get("content-type", "application/octet-stream")
        return await self._cache.put(resp.content, content_type)


def build_image_generator(settings: Settings, client: httpx.AsyncClient) -> ImageGenerator:
    """Build the image generator selected by ``settings.image_provider``."""
    if settings.image_provider == "openai":
        return OpenAIImageGenerator(settings.openai_api_key, model=settings.openai_image_model)
    return ReplicateImageGenerator(
        client,
        settings.replicate_api_token,
        settings.replicate_model_version,
        poll_interval=settings.image_poll_interval,
        max_polls=settings.image_max_polls,
    )
