"""전역 예외 및 예외 핸들러

모든 오류 응답은 같은 JSON 형태를 가집니다::

    {
        "success": false,
        "message": "...",
        "error": {"code": "...", "message": "...", "detail": {...}},
        "request_id": "..."
    }
"""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.logging import get_logger
from app.core.middlewares.context import get_request_id

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """전역 에러 코드"""

    # 공통 에러
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    BAD_REQUEST = "BAD_REQUEST"

    # 인증 관련
    INVALID_API_KEY = "INVALID_API_KEY"

    # 외부 연동 관련
    BAD_GATEWAY = "BAD_GATEWAY"


class BaseAPIException(HTTPException):
    """기본 API 예외 클래스"""

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        detail: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message
        self.detail_info = detail or {}
        super().__init__(status_code=status_code, detail=message)


class BadRequestException(BaseAPIException):
    """400 Bad Request"""

    def __init__(
        self,
        message: str = "잘못된 요청입니다.",
        error_code: str = ErrorCode.BAD_REQUEST,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status.HTTP_400_BAD_REQUEST, error_code, message, detail)


class UnauthorizedException(BaseAPIException):
    """401 Unauthorized"""

    def __init__(
        self,
        message: str = "인증이 필요합니다.",
        error_code: str = ErrorCode.UNAUTHORIZED,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED, error_code, message, detail
        )


class InternalServerException(BaseAPIException):
    """500 Internal Server Error"""

    def __init__(
        self,
        message: str = "서버 내부 오류가 발생했습니다.",
        error_code: str = ErrorCode.INTERNAL_ERROR,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status.HTTP_500_INTERNAL_SERVER_ERROR, error_code, message, detail
        )


class BadGatewayException(BaseAPIException):
    """502 Bad Gateway (원격 저장소 오류)"""

    def __init__(
        self,
        message: str = "원격 저장소 요청에 실패했습니다.",
        error_code: str = ErrorCode.BAD_GATEWAY,
        detail: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status.HTTP_502_BAD_GATEWAY, error_code, message, detail)


_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.BAD_REQUEST,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.BAD_REQUEST,
}


def _error_response(
    status_code: int,
    code: str,
    message: str,
    detail: Any = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": {"code": code, "message": message, "detail": detail},
            "request_id": get_request_id(),
        },
    )


async def base_exception_handler(
    request: Request, exc: BaseAPIException
) -> JSONResponse:
    """BaseAPIException 핸들러"""
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: "
            f"{exc.error_code} {exc.detail_info}",
            extra={"error_code": exc.error_code},
        )
    return _error_response(
        exc.status_code, exc.error_code, exc.message, exc.detail_info
    )


async def http_exception_handler(
    request: Request, exc: HTTPException
) -> JSONResponse:
    """HTTPException 핸들러 (라우트 없음, 허용되지 않은 메서드 등)"""
    code = _STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    return _error_response(exc.status_code, code, str(exc.detail))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """요청 파라미터 검증 오류 핸들러 (422)"""
    return _error_response(
        422,
        ErrorCode.VALIDATION_ERROR,
        "요청 값이 올바르지 않습니다.",
        {"errors": jsonable_encoder(exc.errors())},
    )


async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """일반 예외 핸들러"""
    logger.exception(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}"
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_ERROR,
        "서버 내부 오류가 발생했습니다.",
    )
