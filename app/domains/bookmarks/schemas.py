"""Bookmarks 도메인 스키마 정의

원격 저장소/로컬 캐시가 주고받는 북마크 레코드와 동기화 응답 스키마입니다.
"""

from datetime import datetime
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# 검색 필터가 참조하는 필드 (로컬 캐시 컬럼과 동일)
SEARCHABLE_FIELDS = (
    "title",
    "summary",
    "tags",
    "channel_name",
    "user_notes",
    "original_url",
    "video_type",
    "date_added",
)


class BookmarkRecord(BaseModel):
    """북마크 레코드

    원격 저장소의 ``content`` 행과 같은 형태입니다. 알 수 없는 필드는
    그대로 보존됩니다 (extra="allow").
    """

    model_config = ConfigDict(extra="allow", from_attributes=True)

    id: str
    user_id: Optional[str] = None
    title: Optional[str] = None
    summary: Optional[str] = None
    tags: Optional[str] = None
    channel_name: Optional[str] = None
    user_notes: Optional[str] = None
    original_url: Optional[str] = None
    video_type: Optional[str] = None
    date_added: Optional[str] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("tags", mode="before")
    @classmethod
    def join_tags(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return ",".join(str(tag) for tag in v)
        return v

    @field_validator("date_added", mode="before")
    @classmethod
    def format_date_added(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return v.isoformat()
        return v

    def extra_fields(self) -> dict[str, Any]:
        """스키마에 정의되지 않은 원본 필드"""
        return dict(self.model_extra or {})


RecordPredicate = Callable[[BookmarkRecord], bool]


# Response Schemas


class SyncResultResponse(BaseModel):
    """동기화 실행 결과"""

    user_id: str = Field(..., description="사용자 ID")
    fetched_count: int = Field(..., description="원격에서 가져온 레코드 수")
    trimmed_count: int = Field(0, description="캐시 정리로 삭제된 레코드 수")


class RecoverResponse(BaseModel):
    """데이터 복구 결과"""

    user_id: str = Field(..., description="사용자 ID")
    recovered: bool = Field(..., description="복구 성공 여부")
    restored_count: int = Field(0, description="복구된 레코드 수")


class CacheClearResponse(BaseModel):
    """캐시 삭제 결과"""

    deleted_count: int = Field(..., description="삭제된 레코드 수")


class SyncStatusResponse(BaseModel):
    """백그라운드 동기화 상태"""

    is_running: bool = Field(..., description="주기 동기화 실행 여부")
    last_sync_time: Optional[datetime] = Field(
        None, description="마지막 동기화 완료 시각"
    )
    next_sync_in_ms: int = Field(0, description="다음 동기화까지 남은 시간 (ms)")
    cached_count: int = Field(0, description="로컬 캐시 레코드 수")
