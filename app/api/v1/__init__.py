"""API v1 라우터"""

from typing import Any

from fastapi import APIRouter

from app.core.schemas import APIResponse
from app.domains.bookmarks.router import router as bookmarks_router
from app.domains.search.router import router as search_router

api_router = APIRouter()

# 도메인 라우터 등록
api_router.include_router(search_router, prefix="/search", tags=["Search"])
api_router.include_router(
    bookmarks_router, prefix="/bookmarks", tags=["Bookmarks"]
)


@api_router.get("/", response_model=APIResponse[dict[str, Any]])
async def api_v1_root():
    """API v1 루트 엔드포인트"""
    return APIResponse(
        success=True,
        message="SuperMind Search API v1",
        data={
            "version": "1.0.0",
            "docs": "/docs",
        },
    )
