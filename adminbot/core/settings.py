"""Application settings management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global settings loaded from environment variables."""

    app_name: str = "Admin Bot"
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    database_url: str = Field(default="sqlite:///./adminbot.db", alias="DATABASE_URL")

    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    use_in_memory_state: bool = Field(default=False, alias="USE_IN_MEMORY_STATE")
    state_key_prefix: str = Field(default="telegram:state:", alias="STATE_KEY_PREFIX")
    state_ttl_seconds: int = Field(default=30 * 60, alias="STATE_TTL_SECONDS")
    confirmation_ttl_seconds: int = Field(default=10 * 60, alias="CONFIRMATION_TTL_SECONDS")

    account_service_url: str = Field(default="http://localhost:8080/api/v1", alias="ACCOUNT_SERVICE_URL")
    account_service_timeout_seconds: float = Field(default=5.0, alias="ACCOUNT_SERVICE_TIMEOUT_SECONDS")

    bot_username: str = Field(default="admin_bot", alias="BOT_USERNAME")
    search_page_size: int = Field(default=5, alias="SEARCH_PAGE_SIZE")
    invite_ttl_hours: int = Field(default=24, alias="INVITE_TTL_HOURS")
    invite_token_bytes: int = Field(default=32, alias="INVITE_TOKEN_BYTES")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid",
    )


settings = Settings()
