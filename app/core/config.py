from functools import lru_cache
from typing import List

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "SuperMind Search"
    app_env: str = "development"
    debug: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Local Cache (오프라인 검색용 로컬 DB)
    database_url: str = "sqlite+aiosqlite:///./supermind_cache.db"
    database_echo: bool = False
    auto_migrate: bool = True  # 서버 시작 시 자동 마이그레이션 여부

    # Internal API Key (클라이언트 통신용)
    internal_api_key: str = "your-internal-api-key-here"

    # CORS
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    # Remote Store (PostgREST 호환 API)
    remote_url: str = ""
    remote_api_key: str = ""
    remote_timeout: float = 30.0

    # Search
    search_page_size: int = 200
    search_similarity_threshold: float = 0.1
    search_debounce_ms: int = 500
    search_timezone: str = "UTC"

    # Background Sync
    sync_interval_seconds: int = 300
    sync_fetch_limit: int = 1000
    cache_max_items: int = 50000
    cache_trim_batch: int = 1000

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            import json

            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("search_timezone")
    @classmethod
    def validate_search_timezone(cls, v: str) -> str:
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown SEARCH_TIMEZONE: {v}")
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """프로덕션 환경에서 보안 설정 검증"""
        if not self.is_production:
            return self

        # Internal API Key 검증
        if self.internal_api_key == "your-internal-api-key-here":
            raise ValueError(
                "Production requires valid INTERNAL_API_KEY. "
                "Set it via environment variable."
            )

        if len(self.internal_api_key) < 32:
            raise ValueError(
                "INTERNAL_API_KEY must be at least 32 characters long "
                "for security."
            )

        # 원격 저장소 설정 검증
        if not self.remote_url:
            raise ValueError(
                "Production requires REMOTE_URL. "
                "Set it via environment variable."
            )

        return self

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """설정 인스턴스를 반환 (캐싱됨)"""
    return Settings()


settings = get_settings()
