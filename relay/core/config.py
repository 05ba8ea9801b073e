from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    service_name: str = Field(default="bridgewater-chatbot", validation_alias="SERVICE_NAME")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3001, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    openai_api_key: SecretStr = Field(validation_alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", validation_alias="OPENAI_MODEL")
    openai_base_url: str | None = Field(default=None, validation_alias="OPENAI_BASE_URL")
    openai_temperature: float = Field(default=0.7, validation_alias="OPENAI_TEMPERATURE")
    max_output_tokens: int = Field(default=800, validation_alias="MAX_OUTPUT_TOKENS")
    max_output_tokens_with_images: int = Field(
        default=1200,
        validation_alias="MAX_OUTPUT_TOKENS_WITH_IMAGES",
    )
    upstream_timeout_seconds: float = Field(default=30.0, validation_alias="UPSTREAM_TIMEOUT_SECONDS")

    allowed_origin: str = Field(default="*", validation_alias="ALLOWED_ORIGIN")
    rate_limit_requests: int = Field(default=20, validation_alias="RATE_LIMIT_REQUESTS")
    rate_limit_window_seconds: int = Field(default=60, validation_alias="RATE_LIMIT_WINDOW_SECONDS")
    max_body_bytes: int = Field(default=15 * 1024 * 1024, validation_alias="MAX_BODY_BYTES")
    trust_proxy_headers: bool = Field(default=False, validation_alias="TRUST_PROXY_HEADERS")

    @computed_field
    @property
    def allowed_origin_list(self) -> list[str]:
        origins = [item.strip() for item in self.allowed_origin.split(",") if item.strip()]
        return origins or ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
