"""Bookmarks 도메인 라우터

로컬 캐시 동기화/복구/삭제 API 엔드포인트입니다.
"""

from fastapi import APIRouter, Body, Depends, Query

from app.core.dependencies import verify_internal_api_key
from app.core.schemas import APIResponse, create_response
from app.domains.bookmarks.exceptions import SyncFailedException
from app.domains.bookmarks.schemas import (
    CacheClearResponse,
    RecoverResponse,
    SyncResultResponse,
    SyncStatusResponse,
)
from app.domains.bookmarks.sync import SyncService, get_sync_service

router = APIRouter()


@router.post(
    "/sync",
    response_model=APIResponse[SyncResultResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def sync_bookmarks(
    user_id: str = Query(..., min_length=1, description="사용자 ID"),
    service: SyncService = Depends(get_sync_service),
):
    """원격 저장소의 새 레코드를 즉시 동기화"""
    result = await service.force_sync(user_id)
    if result is None:
        raise SyncFailedException(user_id, "증분 동기화에 실패했습니다.")

    return create_response(
        data=SyncResultResponse(
            user_id=result.user_id,
            fetched_count=result.fetched_count,
            trimmed_count=result.trimmed_count,
        ),
        message="동기화가 완료되었습니다.",
    )


@router.post(
    "/sync/start",
    response_model=APIResponse[SyncStatusResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def start_periodic_sync(
    user_id: str = Query(..., min_length=1, description="사용자 ID"),
    service: SyncService = Depends(get_sync_service),
):
    """주기 동기화 시작"""
    started = service.start(user_id)
    status = await service.get_status()
    return create_response(
        data=SyncStatusResponse(**vars(status)),
        message=(
            "주기 동기화를 시작했습니다."
            if started
            else "주기 동기화가 이미 실행 중입니다."
        ),
    )


@router.post(
    "/sync/stop",
    response_model=APIResponse[SyncStatusResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def stop_periodic_sync(
    service: SyncService = Depends(get_sync_service),
):
    """주기 동기화 중지"""
    await service.stop()
    status = await service.get_status()
    return create_response(
        data=SyncStatusResponse(**vars(status)),
        message="주기 동기화를 중지했습니다.",
    )


@router.get(
    "/sync/status",
    response_model=APIResponse[SyncStatusResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def get_sync_status(
    service: SyncService = Depends(get_sync_service),
):
    """동기화 상태 조회"""
    status = await service.get_status()
    return create_response(
        data=SyncStatusResponse(**vars(status)),
        message="동기화 상태를 조회했습니다.",
    )


@router.post(
    "/recover",
    response_model=APIResponse[RecoverResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def recover_bookmarks(
    user_id: str = Body(..., embed=True, min_length=1, description="사용자 ID"),
    service: SyncService = Depends(get_sync_service),
):
    """로컬 캐시를 원격 저장소 데이터로 복구"""
    recovered = await service.recover_all_data(user_id)
    restored_count = (
        await service.cached_count(user_id=user_id) if recovered else 0
    )
    return create_response(
        data=RecoverResponse(
            user_id=user_id,
            recovered=recovered,
            restored_count=restored_count,
        ),
        message=(
            "데이터를 복구했습니다." if recovered else "데이터 복구에 실패했습니다."
        ),
    )


@router.delete(
    "/cache",
    response_model=APIResponse[CacheClearResponse],
    dependencies=[Depends(verify_internal_api_key)],
)
async def clear_cache(
    service: SyncService = Depends(get_sync_service),
):
    """로컬 캐시 전체 삭제"""
    deleted = await service.clear_all_data()
    return create_response(
        data=CacheClearResponse(deleted_count=deleted),
        message="로컬 캐시를 삭제했습니다.",
    )
