"""/api endpoint handlers: analyze a URL, fetch results, generate and serve images."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from src.api.schemas import (
    ContentGenerationResponse,
    GenerateImageRequest,
    GenerateImageResponse,
    UrlAnalysisRequest,
)
from src.api.service import analyze_url
from src.cache.redis import ImageCache
from src.errors import FetchError, PostGenerationError
from src.generation.images import ImageService
from src.generation.posts import PostGenerator
from src.scrape import WebpageScraper
from src.storage.memory import MemStorage

router = APIRouter(prefix="/api")


def _get_scraper(request: Request) -> WebpageScraper:
    return request.app.state.scraper


def _get_storage(request: Request) -> MemStorage:
    return request.app.state.storage


def _get_post_generator(request: Request) -> PostGenerator:
    return request.app.state.post_generator


def _get_image_service(request: Request) -> ImageService:
    return request.app.state.image_service


def _get_image_cache(request: Request) -> ImageCache:
    return request.app.state.image_cache


@router.post("/analyze-url", response_model=ContentGenerationResponse)
async def analyze(
    body: UrlAnalysisRequest,
    scraper: WebpageScraper = Depends(_get_scraper),
    storage: MemStorage = Depends(_get_storage),
    post_generator: PostGenerator = Depends(_get_post_generator),
    image_service: ImageService = Depends(_get_image_service),
):
    # Upstream failures map to 502 rather than 500; invalid bodies get FastAPI's 422
    try:
        results = await analyze_url(body, scraper, storage, post_generator, image_service)
    except FetchError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to scrape webpage: {exc.message}")
    except PostGenerationError as exc:
        raise HTTPException(status_code=502, detail=exc.message)

    if results is None:
        raise HTTPException(status_code=500, detail="Failed to retrieve generated content")
    return results


@router.get("/results/{webpage_id}", response_model=ContentGenerationResponse)
async def get_results(
    webpage_id: int,
    storage: MemStorage = Depends(_get_storage),
):
    results = await storage.get_generation_results(webpage_id)
    if results is None:
        raise HTTPException(status_code=404, detail="Results not found")
    return results


@router.post("/generate-image", response_model=GenerateImageResponse)
async def generate_image(
    body: GenerateImageRequest,
    image_service: ImageService = Depends(_get_image_service),
):
    image_url = await image_service.create(body.title, body.description, body.platform)
    if image_url is None:
        raise HTTPException(status_code=502, detail="Image generation failed")
    return GenerateImageResponse(image_url=image_url)


@router.get("/images/{image_id}")
async def get_image(
    image_id: str,
    cache: ImageCache = Depends(_get_image_cache),
):
    image = await cache.get(image_id)
    if image is None:
        raise HTTPException(status_code=404, detail="Image not found or expired")
    return Response(content=image.data, media_type=image.content_type)


@router.get("/health")
async def health():
    return {"status": "ok"}
