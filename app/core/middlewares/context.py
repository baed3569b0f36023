"""요청 ID 컨텍스트 관리"""

import contextvars
import re
import uuid
from typing import Optional

# 요청 ID를 저장하는 컨텍스트 변수
request_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)

# 클라이언트가 보낸 요청 ID 허용 형식
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,128}$")


def get_request_id() -> Optional[str]:
    """현재 요청 ID 반환"""
    return request_id_ctx.get()


def bind_request_id(
    request_id: Optional[str] = None,
) -> tuple[str, contextvars.Token]:
    """요청 ID를 컨텍스트에 바인딩

    헤더 값이 없거나 형식이 맞지 않으면 새 ID를 생성합니다.

    Returns:
        (바인딩된 요청 ID, 복원용 토큰)
    """
    if request_id is None or not _REQUEST_ID_PATTERN.match(request_id):
        request_id = uuid.uuid4().hex
    return request_id, request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    """bind_request_id 이전 상태로 복원"""
    request_id_ctx.reset(token)
