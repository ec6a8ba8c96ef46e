"""
Centralised settings loader.

Every value can be overridden through the environment or a local `.env`.
Clients are built from these settings in `main.create_app()`; nothing
here opens a connection.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class Settings(BaseSettings):
    # ─── runtime / DB ───────────────────────────────────────────────
    env_name: str = "local"
    log_level: str = "INFO"
    database_url: str = "sqlite+aiosqlite:///./calorie_tracker.db"

    # ─── object storage (Supabase) ──────────────────────────────────
    supabase_url: str | None = None
    supabase_key: str | None = None
    storage_bucket: str = "food_images"

    # ─── vision model (Gemini) ──────────────────────────────────────
    gemini_api_key: str | None = None
    vision_model: str = "gemini-2.0-flash"
    vision_temperature: float = 0.2
    vision_max_output_tokens: int = 500

    # ─── upload limits ──────────────────────────────────────────────
    max_image_bytes: int = Field(10 * 1024 * 1024, gt=0)

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )


# ------------------------------------------------------------------ #
#  Cached accessor
# ------------------------------------------------------------------ #
@lru_cache
def get_settings() -> Settings:  # pragma: no cover
    return Settings()
