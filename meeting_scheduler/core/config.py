from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application-wide configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    app_env: Literal["development", "production", "test"] = Field(default="development", validation_alias="APP_ENV")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    client_id: str | None = Field(default=None, validation_alias="CLIENT_ID")
    client_secret: str | None = Field(default=None, validation_alias="CLIENT_SECRET")
    tenant_id: str | None = Field(default=None, validation_alias="TENANT_ID")
    user_id: str | None = Field(default=None, validation_alias="USER_ID")

    graph_base_url: str = Field(default="https://graph.microsoft.com/v1.0", validation_alias="GRAPH_BASE_URL")
    login_base_url: str = Field(default="https://login.microsoftonline.com", validation_alias="LOGIN_BASE_URL")
    graph_scope: str = Field(default="https://graph.microsoft.com/.default", validation_alias="GRAPH_SCOPE")
    graph_timeout_seconds: float = Field(default=30.0, gt=0, validation_alias="GRAPH_TIMEOUT_SECONDS")

    api_key_auth: bool = Field(default=False, validation_alias="API_KEY_AUTH")
    valid_api_keys: str | None = Field(default=None, validation_alias="VALID_API_KEYS")

    @property
    def api_keys(self) -> list[str]:
        if not self.valid_api_keys:
            return []
        return [key.strip() for key in self.valid_api_keys.split(",") if key.strip()]


@lru_cache(1)
def get_settings() -> Settings:
    """Return cached settings instance to avoid reparsing env variables."""

    return Settings()
