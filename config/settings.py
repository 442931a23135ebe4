"""
Centralized process configuration using pydantic-settings.

How it works:
- Reads environment variables automatically (e.g., REDIS_HOST env var → Settings.REDIS_HOST)
- Falls back to defaults defined here if env vars are not set
- Can also read from a .env file in the project root

These are deployment-level settings. The user-editable compression
configuration (levels, whitelist, queue length...) lives in the
settings store and is persisted in Redis, not here.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── PostgreSQL (active job queue) ───────────────────────────
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "compression"
    POSTGRES_PASSWORD: str = "compression"
    POSTGRES_DB: str = "compression"

    # ── Redis (configuration + archive) ─────────────────────────
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_CONFIG_KEY: str = "compression:config"
    REDIS_ARCHIVE_KEY: str = "compression:archive"

    # ── Worker ──────────────────────────────────────────────────
    WORKER_POLL_INTERVAL: float = 2.0  # seconds between polls of an idle queue
    MEDIA_FILE_ROOT: str = "/var/www/Private"

    # ── Archive ─────────────────────────────────────────────────
    ARCHIVE_DISPLAY_LENGTH: int = 250  # max entries returned by GET /archive/jobs

    # ── App ─────────────────────────────────────────────────────
    API_HOST: str = "0.0.0.0"
    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        """Sync connection string for the queue repository (psycopg2 driver)."""
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def redis_url(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton, import this everywhere
settings = Settings()
