"""SuperMind Search 애플리케이션 진입점"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import api_router as api_v1_router
from app.core.config import settings
from app.core.database import close_db
from app.core.exceptions import (
    BaseAPIException,
    base_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.logging import get_logger, setup_logging
from app.core.middlewares import LoggingMiddleware
from app.core.migration import run_migrations_on_startup
from app.core.schemas import APIResponse
from app.domains.bookmarks.remote import get_remote_store
from app.domains.bookmarks.sync import get_sync_service

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리

    시작 시 로컬 캐시 스키마를 최신으로 맞추고, 종료 시 주기 동기화와
    원격/로컬 연결을 정리합니다.
    """
    logger.info(f"🚀 Starting {settings.app_name} ({settings.app_env})")
    run_migrations_on_startup(auto_migrate=settings.auto_migrate)
    if not settings.remote_url:
        logger.warning(
            "⚠️ REMOTE_URL is not set; only local cache searches will work"
        )

    yield

    logger.info(f"👋 Shutting down {settings.app_name}...")
    await get_sync_service().stop()
    await get_remote_store().aclose()
    await close_db()


def create_app() -> FastAPI:
    """FastAPI 애플리케이션 팩토리"""
    docs_enabled = settings.is_development
    app = FastAPI(
        title=settings.app_name,
        description="고급 검색어 기반 북마크 검색 API (로컬 캐시 + 원격 저장소)",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    # 미들웨어는 나중에 추가한 것이 바깥쪽에서 실행됨
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(BaseAPIException, base_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get(
        "/health", tags=["Health"], response_model=APIResponse[dict[str, Any]]
    )
    async def health_check():
        """헬스 체크 엔드포인트"""
        return APIResponse(
            success=True,
            message="OK",
            data={
                "status": "healthy",
                "app_name": settings.app_name,
                "environment": settings.app_env,
                "remote_configured": bool(settings.remote_url),
            },
        )

    return app


app = create_app()
