"""날짜/시간 유틸리티"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from app.core.config import settings

UTC = timezone.utc


def get_search_timezone() -> tzinfo:
    """검색 날짜 필터의 기준 시간대 (SEARCH_TIMEZONE)"""
    return ZoneInfo(settings.search_timezone)


def now_utc() -> datetime:
    """현재 UTC 시간 반환"""
    return datetime.now(UTC)


def now_local() -> datetime:
    """검색 기준 시간대의 현재 시간 반환"""
    return datetime.now(get_search_timezone())


def start_of_day(dt: datetime) -> datetime:
    """해당 날짜의 시작 시간 (00:00:00.000000)"""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(dt: datetime) -> datetime:
    """해당 날짜의 종료 시간 (23:59:59.999999)"""
    return dt.replace(hour=23, minute=59, second=59, microsecond=999999)


def days_ago(days: int, now: Optional[datetime] = None) -> datetime:
    """n일 전 시간 반환"""
    if now is None:
        now = now_local()
    return now - timedelta(days=days)


def parse_timestamp(
    value: object, tz: Optional[tzinfo] = None
) -> Optional[datetime]:
    """저장된 타임스탬프 문자열을 aware datetime 으로 파싱

    ISO 8601 형식(``Z`` 접미사 포함)을 지원합니다. 시간대가 없는 값은
    ``tz`` (기본: 검색 기준 시간대) 로 간주합니다.

    Args:
        value: 타임스탬프 문자열 또는 datetime
        tz: naive 값에 적용할 시간대

    Returns:
        aware datetime 또는 파싱 실패 시 None
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz or get_search_timezone())
    return parsed


def format_iso(dt: datetime) -> str:
    """ISO 8601 형식으로 포맷"""
    return dt.isoformat()
