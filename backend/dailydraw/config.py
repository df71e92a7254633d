from __future__ import annotations
import os
from pydantic import BaseModel


def _csv(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "dailydraw-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "Daily Draw Challenge")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Key-value store: "redis" in deployments, "memory" for local runs
    store_backend: str = os.getenv("STORE_BACKEND", "redis")
    redis_url: str = os.getenv("REDIS_URL", "redis://redis:6379/0")
    rq_queue: str = os.getenv("RQ_QUEUE", "default")

    # Identity
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    moderators: list[str] = _csv(os.getenv("MODERATORS", ""))
    scheduler_token: str = os.getenv("SCHEDULER_TOKEN", "")

    # Anti-spam ceilings
    max_votes_per_user_per_day: int = int(os.getenv("MAX_VOTES_PER_USER_PER_DAY", "50"))
    max_prompt_votes_per_user_per_day: int = int(os.getenv("MAX_PROMPT_VOTES_PER_USER_PER_DAY", "30"))
    max_image_base64_length: int = int(os.getenv("MAX_IMAGE_BASE64_LENGTH", "680000"))  # ~500KB decoded

    # Announcement posts/comments; empty url keeps them in-process
    announcer_url: str = os.getenv("ANNOUNCER_URL", "")
    announcer_token: str = os.getenv("ANNOUNCER_TOKEN", "")
    announcer_timeout_seconds: float = float(os.getenv("ANNOUNCER_TIMEOUT_SECONDS", "10"))


settings = Settings()
