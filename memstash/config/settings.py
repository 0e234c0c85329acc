"""Library settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Values are read from TWO sources (in priority order):
#
#   1. **Environment variables** - e.g., REDIS_URL=redis://cache:6379/1
#   2. **.env file** - key=value lines in the working directory's .env
#
# Field `redis_url` maps to env var `REDIS_URL` (case-insensitive).
# Defaults below apply when neither source sets a value.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """memstash settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === External key/value service ===
    redis_url: str = "redis://localhost:6379/0"

    # === Store definitions ===
    stores_config_path: str = "config/stores.yaml"

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"
