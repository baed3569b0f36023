"""전역 로깅 설정

모든 로그 레코드에는 현재 요청 ID가 ``request_id`` 로 포함됩니다.
개발 환경은 컬러 텍스트, 그 외 환경은 한 줄 JSON 으로 출력합니다.
"""

import json
import logging
import sys

from app.core.config import settings

# extra 로 전달되면 JSON 로그에 포함하는 필드
CONTEXT_FIELDS = ("request_id", "search_id", "user_id", "error_code")


class ColoredFormatter(logging.Formatter):
    """컬러 로그 포맷터 (개발 환경용)"""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def formatMessage(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        values = dict(record.__dict__)
        values["levelname"] = f"{color}{record.levelname:<8}{self.RESET}"
        return self._style._fmt % values


class JsonFormatter(logging.Formatter):
    """한 줄 JSON 포맷터 (로그 수집 시스템 연동용)"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None and value != "-":
                payload[field] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class RequestIdFilter(logging.Filter):
    """로그 레코드에 현재 요청 ID 주입

    ``extra={"request_id": ...}`` 로 명시한 값이 있으면 그대로 둡니다.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            # 순환 임포트 방지
            from app.core.middlewares.context import get_request_id

            record.request_id = get_request_id() or "-"
        return True


def setup_logging() -> None:
    """애플리케이션 로깅 설정"""
    log_level = logging.DEBUG if settings.debug else logging.INFO

    formatter: logging.Formatter
    if settings.is_development:
        formatter = ColoredFormatter(
            fmt=(
                "%(asctime)s | %(levelname)s | %(request_id)s | "
                "%(name)s:%(lineno)d | %(message)s"
            ),
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = JsonFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level)
    handler.addFilter(RequestIdFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # 외부 라이브러리 로그 레벨 조정
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )
    for noisy in ("aiosqlite", "httpx", "httpcore", "alembic"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """로거 인스턴스 반환

    Args:
        name: 로거 이름 (보통 __name__ 사용)

    Example::

        logger = get_logger(__name__)
        logger.info("Search completed", extra={"search_id": 3})
    """
    return logging.getLogger(name)
