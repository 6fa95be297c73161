"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_BUCKET = "fridge_images"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_key: str
    environment: str = _ENVIRONMENT
    recommendation_count: int = 20
    recipe_pool_limit: int = 100
    search_page_size: int = 20
    expiry_soon_days: int = 7
    storage_default_bucket: str = DEFAULT_BUCKET
    storage_buckets: str = "fridge_images,avatars,fridge_tips"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_bucket_list(
    raw: str | None, default_bucket: str = DEFAULT_BUCKET
) -> frozenset[str]:
    """Parse the comma-separated storage bucket allow-list."""
    buckets = {default_bucket}
    if raw is None:
        return frozenset(buckets)
    for chunk in raw.split(","):
        value = chunk.strip()
        if value:
            buckets.add(value)
    return frozenset(buckets)
