"""Pydantic Settings — loads configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    openai_api_key: str = ""
    replicate_api_token: str = ""

    redis_url: str = "redis://localhost:6379"
    image_ttl_seconds: int = 3600

    llm_provider: str = "openai"
    llm_model: str = "gpt-4o"
    content_prompt_chars: int = 2000

    image_provider: str = "replicate"
    replicate_model_version: str = "471dee8e6c1bda0de704e854a9bee7a6b6bc172cc496ccad0d54be1b2bb114ac"
    image_poll_interval: float = 1.0
    image_max_polls: int = 120
    openai_image_model: str = "dall-e-3"

    scrape_timeout_seconds: float = 30.0
    scrape_user_agent: str = "Mozilla/5.0 (compatible; social-post-drafts/0.1.0)"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
