"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.routes import router
from src.cache.redis import ImageCache, create_redis_client
from src.config import get_settings
from src.generation.images import ImageService, build_image_generator
from src.generation.posts import PostGenerator
from src.logging_config import setup_logging
from src.scrape import build_default_scraper, create_http_client
from src.storage.memory import MemStorage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Initialize logging FIRST so all subsequent operations produce JSON logs
    setup_logging(settings.log_level)
    logger.info("starting social post service")

    http_client = create_http_client(settings.scrape_timeout_seconds, settings.scrape_user_agent)
    redis_client = await create_redis_client(settings.redis_url)
    image_cache = ImageCache(redis_client, default_ttl=settings.image_ttl_seconds)

    app.state.settings = settings
    app.state.storage = MemStorage()
    app.state.scraper = build_default_scraper(http_client)
    app.state.post_generator = PostGenerator(settings)
    app.state.image_cache = image_cache
    app.state.image_service = ImageService(
        build_image_generator(settings, http_client),
        image_cache,
        http_client,
    )

    logger.info(
        "social post service ready",
        extra={
            "llm_provider": settings.llm_provider,
            "llm_model": settings.llm_model,
            "image_provider": settings.image_provider,
        },
    )

    yield

    logger.info("shutting down social post service")
    await http_client.aclose()
    await redis_client.aclose()


app = FastAPI(title="Social Post Drafts", lifespan=lifespan)
app.include_router(router)
