"""Bookmarks 도메인 예외 정의"""

from enum import Enum
from typing import Optional

from app.core.exceptions import BadGatewayException, InternalServerException


class BookmarkErrorCode(str, Enum):
    """북마크 도메인 에러 코드"""

    REMOTE_STORE_ERROR = "REMOTE_STORE_ERROR"
    REMOTE_STORE_NOT_CONFIGURED = "REMOTE_STORE_NOT_CONFIGURED"
    CACHE_OPERATION_FAILED = "CACHE_OPERATION_FAILED"
    SYNC_FAILED = "SYNC_FAILED"


class RemoteStoreException(BadGatewayException):
    """원격 저장소 요청 실패"""

    def __init__(
        self,
        detail_msg: str,
        status_code: Optional[int] = None,
        operation: Optional[str] = None,
    ):
        detail: dict = {"info": detail_msg}
        if status_code is not None:
            detail["status_code"] = status_code
        if operation:
            detail["operation"] = operation
        self.remote_status_code = status_code
        self.operation = operation
        super().__init__(
            message="원격 저장소 요청에 실패했습니다.",
            error_code=BookmarkErrorCode.REMOTE_STORE_ERROR,
            detail=detail,
        )


class RemoteStoreNotConfiguredException(InternalServerException):
    """원격 저장소 URL 미설정"""

    def __init__(self):
        super().__init__(
            message="원격 저장소가 설정되지 않았습니다.",
            error_code=BookmarkErrorCode.REMOTE_STORE_NOT_CONFIGURED,
            detail={"info": "REMOTE_URL 환경 변수를 설정하세요."},
        )


class CacheOperationException(InternalServerException):
    """로컬 캐시 작업 실패"""

    def __init__(self, operation: str, detail_msg: str):
        super().__init__(
            message="로컬 캐시 작업에 실패했습니다.",
            error_code=BookmarkErrorCode.CACHE_OPERATION_FAILED,
            detail={"operation": operation, "info": detail_msg},
        )


class SyncFailedException(BadGatewayException):
    """원격 저장소와의 동기화 실패"""

    def __init__(self, user_id: str, detail_msg: str):
        super().__init__(
            message="원격 저장소와 동기화하지 못했습니다.",
            error_code=BookmarkErrorCode.SYNC_FAILED,
            detail={"user_id": user_id, "info": detail_msg},
        )
