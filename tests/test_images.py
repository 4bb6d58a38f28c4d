"""Image generation and image service tests."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from src.cache.redis import ImageCache
from src.config import Settings
from src.generation.images import (
    ImageService,
    OpenAIImageGenerator,
    ReplicateImageGenerator,
    build_image_generator,
)
from src.generation.prompts import format_image_prompt

API = "https://replicate.test/v1"


def _replicate(handler, **kwargs) -> tuple[ReplicateImageGenerator, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    generator = ReplicateImageGenerator(
        client,
        kwargs.pop("api_token", "r8-token"),
        "model-version",
        poll_interval=0,
        api_url=API,
        **kwargs,
    )
    return generator, client


# --- prompts (sync) ---


def test_image_prompt_with_description():
    prompt = format_image_prompt("Quantum", "d" * 150, "linkedin")
    assert prompt.startswith("Create a professional social media image for linkedin about: Quantum")
    assert ". The content is about: " + "d" * 100 + "." in prompt
    assert "corporate and professional style" in prompt
    assert prompt.endswith("High resolution, no text overlay.")


def test_image_prompt_unknown_platform_uses_x_style():
    prompt = format_image_prompt("Quantum", "", "myspace")
    assert "about: Quantum. modern and engaging style" in prompt
    assert "The content is about" not in prompt


def test_build_image_generator_selects_provider():
    client = MagicMock()
    assert isinstance(
        build_image_generator(Settings(image_provider="openai"), client), OpenAIImageGenerator
    )
    assert isinstance(
        build_image_generator(Settings(image_provider="replicate"), client), ReplicateImageGenerator
    )


# --- Replicate (async) ---


@pytest.mark.asyncio
async def test_replicate_polls_until_succeeded():
    requests: list[httpx.Request] = []
    statuses = iter(["processing", "succeeded"])

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "POST":
            return httpx.Response(201, json={"id": "p1", "status": "starting"})
        status = next(statuses)
        output = ["https://replicate.test/out.webp"] if status == "succeeded" else None
        return httpx.Response(200, json={"id": "p1", "status": status, "output": output})

    generator, client = _replicate(handler)
    async with client:
        url = await generator.generate("a prompt", "linkedin")

    assert url == "https://replicate.test/out.webp"
    create = requests[0]
    assert create.url == f"{API}/predictions"
    assert create.headers["Authorization"] == "Bearer r8-token"
    payload = json.loads(create.content)
    assert payload["version"] == "model-version"
    assert payload["input"]["prompt"] == "a prompt"
    assert (payload["input"]["width"], payload["input"]["height"]) == (1200, 627)
    assert [r.url for r in requests[1:]] == [f"{API}/predictions/p1"] * 2


@pytest.mark.asyncio
async def test_replicate_string_output():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            201, json={"id": "p1", "status": "succeeded", "output": "https://replicate.test/o.webp"}
        )

    generator, client = _replicate(handler)
    async with client:
        assert await generator.generate("a prompt", "x") == "https://replicate.test/o.webp"


@pytest.mark.asyncio
async def test_replicate_unknown_platform_uses_x_dimensions():
    payloads: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        payloads.append(json.loads(request.content))
        return httpx.Response(201, json={"id": "p1", "status": "failed"})

    generator, client = _replicate(handler)
    async with client:
        assert await generator.generate("a prompt", "myspace") is None
    assert (payloads[0]["input"]["width"], payloads[0]["input"]["height"]) == (1200, 675)


@pytest.mark.asyncio
async def test_replicate_gives_up_after_max_polls():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "p1", "status": "processing"})

    generator, client = _replicate(handler, max_polls=3)
    async with client:
        assert await generator.generate("a prompt", "x") is None


@pytest.mark.asyncio
async def test_replicate_http_error_returns_none():
    generator, client = _replicate(lambda request: httpx.Response(401, json={"detail": "no"}))
    async with client:
        assert await generator.generate("a prompt", "x") is None


@pytest.mark.asyncio
async def test_replicate_without_token_makes_no_request():
    handler = MagicMock()
    generator, client = _replicate(handler, api_token="")
    async with client:
        assert await generator.generate("a prompt", "x") is None
    handler.assert_not_called()


# --- OpenAI (async) ---


@pytest.mark.asyncio
async def test_openai_without_key_returns_none():
    assert await OpenAIImageGenerator("").generate("a prompt", "x") is None


@pytest.mark.asyncio
@patch("src.generation.images.AsyncOpenAI")
async def test_openai_returns_first_url(mock_openai_cls):
    image = MagicMock()
    image.url = "https://openai.test/img.png"
    client = MagicMock()
    client.images.generate = AsyncMock(return_value=MagicMock(data=[image]))
    mock_openai_cls.return_value = client

    url = await OpenAIImageGenerator("sk-test").generate("a prompt", "x")

    assert url == "https://openai.test/img.png"
    kwargs = client.images.generate.call_args.kwargs
    assert kwargs["model"] == "dall-e-3"
    assert kwargs["size"] == "1024x1024"


@pytest.mark.asyncio
@patch("src.generation.images.AsyncOpenAI")
async def test_openai_failure_returns_none(mock_openai_cls):
    client = MagicMock()
    client.images.generate = AsyncMock(side_effect=RuntimeError("content policy"))
    mock_openai_cls.return_value = client
    assert await OpenAIImageGenerator("sk-test").generate("a prompt", "x") is None


# --- ImageService (async) ---


def _download_client(status: int = 200) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, content=b"WEBPDATA", headers={"content-type": "image/webp"})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_image_service_caches_generated_image(image_cache: ImageCache):
    generator = MagicMock()
    generator.generate = AsyncMock(return_value="https://replicate.test/out.webp")

    async with _download_client() as client:
        service = ImageService(generator, image_cache, client)
        url = await service.create("Quantum", "About qubits", "mastodon")

    assert url.startswith("/api/images/")
    cached = await image_cache.get(url.rsplit("/", 1)[-1])
    assert cached.data == b"WEBPDATA"
    assert cached.content_type == "image/webp"
    prompt, platform = generator.generate.call_args.args
    assert platform == "mastodon"
    assert "about: Quantum" in prompt


@pytest.mark.asyncio
async def test_image_service_generation_failure(image_cache: ImageCache):
    generator = MagicMock()
    generator.generate = AsyncMock(return_value=None)
    async with _download_client() as client:
        service = ImageService(generator, image_cache, client)
        assert await service.create("Quantum", "", "x") is None


@pytest.mark.asyncio
async def test_image_service_download_failure_returns_upstream_url(image_cache: ImageCache):
    generator = MagicMock()
    generator.generate = AsyncMock(return_value="https://replicate.test/out.webp")
    async with _download_client(status=500) as client:
        service = ImageService(generator, image_cache, client)
        assert await service.create("Quantum", "", "x") == "https://replicate.test/out.webp"
