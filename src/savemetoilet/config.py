from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from savemetoilet.core.models import MAX_PAGE_SIZE


class SeoulApiSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SEOUL_API_", env_file=".env", extra="ignore")

    base_url: str = "http://openapi.seoul.go.kr:8088"
    key: SecretStr = SecretStr("")
    toilet_service: str = "SearchPublicToiletPOIService"
    connect_timeout_seconds: float = Field(default=5.0, gt=0)
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_response_bytes: int = Field(default=5 * 1024 * 1024, ge=1)
    probe_timeout_seconds: float = Field(default=10.0, gt=0)
    max_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=2.0, ge=0)
    page_size: int = Field(default=MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    pacing_seconds: float = Field(default=0.1, ge=0)
    retry_malformed: bool = True


def load_settings() -> SeoulApiSettings:
    return SeoulApiSettings()
