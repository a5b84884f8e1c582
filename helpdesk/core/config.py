# helpdesk/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./helpdesk.db")
    APP_NAME: str = "Helpdesk API"
    APP_DESC: str = "Customer support tickets: create, browse and close"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # comma separated, "*" when unset
    CORS_ORIGINS: str | None = None

    # Local user reference records
    LOCAL_EMAIL_DOMAIN: str = "local.app"
    DEFAULT_USER_ROLE: str = "customer"

    # List view
    DESCRIPTION_PREVIEW_LENGTH: int = Field(default=160, ge=1)

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        if not self.CORS_ORIGINS:
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
