"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings."""

    app_name: str = "es-alert"
    log_level: str = "INFO"

    max_field_length: int = 1024
    require_hits: bool = True
    template_autoescape: bool = True

    rules_path: str | None = None

    es_timeout_seconds: float = 10.0
    alert_receiver_url: str | None = None
    alert_receiver_timeout_seconds: float = 5.0

    redis_url: str = "redis://redis:6379/0"
    celery_task_always_eager: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Cached settings accessor."""

    return Settings()