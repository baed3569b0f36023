"""요청/응답 로깅 미들웨어"""

from typing import Callable, cast

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging import get_logger
from app.core.middlewares.context import bind_request_id, reset_request_id
from app.core.utils.time import monotonic_ms

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# 로깅 제외 경로
EXCLUDE_PATHS = {"/health", "/docs", "/redoc", "/openapi.json", "/favicon.ico"}

# 로그에 남기지 않는 쿼리 파라미터 (검색어 원문)
MASKED_PARAMS = {"q"}


def _describe(request: Request) -> str:
    params = [
        f"{key}={'***' if key in MASKED_PARAMS else value}"
        for key, value in request.query_params.multi_items()
    ]
    target = request.url.path
    return f"{target}?{'&'.join(params)}" if params else target


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청 ID 바인딩 및 요청/응답 로깅 미들웨어"""

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        if request.url.path in EXCLUDE_PATHS:
            return cast(Response, await call_next(request))

        request_id, token = bind_request_id(
            request.headers.get(REQUEST_ID_HEADER)
        )
        target = _describe(request)
        logger.info(f"→ {request.method} {target}")

        started = monotonic_ms()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"✗ {request.method} {target} | Error: {e} "
                f"| Time: {monotonic_ms() - started:.2f}ms"
            )
            raise
        finally:
            elapsed = monotonic_ms() - started
            reset_request_id(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.2f}ms"

        log_method = (
            logger.info if response.status_code < 400 else logger.warning
        )
        log_method(
            f"{'✓' if response.status_code < 400 else '✗'} "
            f"{request.method} {target} | Status: {response.status_code} "
            f"| Time: {elapsed:.2f}ms",
            extra={"request_id": request_id},
        )
        return cast(Response, response)
