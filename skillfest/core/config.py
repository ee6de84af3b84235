from functools import lru_cache
from typing import Any

from pydantic import RedisDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "SkillFest Leaderboard"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Redis
    redis_url: RedisDsn = "redis://localhost:6379/0"

    # GitHub API
    github_token: str
    github_api_base_url: str = "https://api.github.com"
    github_org: str = "nst-sdc"
    github_rate_limit_buffer: int = 100  # Keep this many requests in reserve

    # Admin console
    admin_password: str = "change-me"

    # Points per pull request
    org_pr_points: int = 10
    org_merged_pr_points: int = 15
    general_pr_points: int = 5
    general_merged_pr_points: int = 7

    # Level thresholds (minimum points)
    level_beginner_min_points: int = 50
    level_intermediate_min_points: int = 150
    level_advanced_min_points: int = 300
    level_expert_min_points: int = 500

    # Client-side behaviour
    issue_cache_ttl_seconds: int = 300
    issue_poll_interval_seconds: float = 30.0
    points_debounce_seconds: float = 1.0

    # Job processing
    celery_broker_url: str | None = None
    celery_result_backend: str | None = None
    job_default_timeout: int = 3600  # 1 hour

    @field_validator("celery_broker_url", "celery_result_backend", mode="before")
    @classmethod
    def set_celery_urls(cls, v: str | None, info: Any) -> str | None:
        if v is None and "redis_url" in info.data:
            return str(info.data["redis_url"])
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
