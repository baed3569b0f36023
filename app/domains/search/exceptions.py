"""검색 도메인 예외 정의"""

from enum import Enum
from typing import Optional

from app.core.exceptions import BadGatewayException, BadRequestException


class SearchErrorCode(str, Enum):
    """검색 도메인 에러 코드"""

    INVALID_FILTER = "INVALID_FILTER"
    INVALID_SEARCH_QUERY = "INVALID_SEARCH_QUERY"
    REMOTE_SEARCH_FAILED = "REMOTE_SEARCH_FAILED"


class InvalidFilterError(ValueError):
    """해석할 수 없는 필터 값

    평가기는 이 예외를 기록하고 모든 레코드를 제외합니다 (fail closed).
    """

    def __init__(self, field: str, value: Optional[str]):
        self.field = field
        self.value = value
        self.error_code = SearchErrorCode.INVALID_FILTER
        super().__init__(f"Invalid {field} filter: {value!r}")


class InvalidSearchQueryException(BadRequestException):
    """검색 요청 파라미터 오류"""

    def __init__(self, detail_msg: str):
        super().__init__(
            message="잘못된 검색 요청입니다.",
            error_code=SearchErrorCode.INVALID_SEARCH_QUERY,
            detail={"info": detail_msg},
        )


class RemoteSearchFailedException(BadGatewayException):
    """원격 검색 및 fallback 검색 모두 실패"""

    def __init__(self, query: str, detail_msg: str):
        super().__init__(
            message="검색에 실패했습니다. 잠시 후 다시 시도해 주세요.",
            error_code=SearchErrorCode.REMOTE_SEARCH_FAILED,
            detail={"query": query, "info": detail_msg},
        )
