"""
IdeaBox – Application configuration.
Reads environment variables from a .env file via pydantic-settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ──
    APP_NAME: str = "IdeaBox"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./ideabox.db"

    # ── JWT ──
    SECRET_KEY: str = "change-me-to-a-random-secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # ── Notifications / feeds ──
    NOTIFICATION_LIST_LIMIT: int = 50
    ACTIVITY_FEED_LIMIT: int = 20

    # ── Attachments (metadata only, blobs live in the external store) ──
    MAX_ATTACHMENT_BYTES: int = 10 * 1024 * 1024

    # ── Workflow policy ──
    # False keeps the permissive lifecycle: any existing idea may be marked
    # under review or (re-)evaluated regardless of its current status.
    STRICT_STATUS_TRANSITIONS: bool = False
    # False rejects an admin evaluating an idea they submitted themselves.
    ALLOW_SELF_EVALUATION: bool = True


settings = Settings()
