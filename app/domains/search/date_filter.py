"""날짜 필터 해석

``date:`` 필터 토큰을 구체적인 날짜 범위(DateRange)로 변환합니다.
"""

from datetime import datetime, timedelta
from typing import Any, Optional

from app.core.logging import get_logger
from app.core.utils.datetime import (
    days_ago,
    end_of_day,
    get_search_timezone,
    now_local,
    start_of_day,
)
from app.domains.search.types import DateRange

logger = get_logger(__name__)

# 시도 순서대로 (첫 번째로 성공한 형식 사용)
ABSOLUTE_DATE_FORMATS = (
    "%d %B %Y",  # 15 August 2025
    "%d-%m-%Y",  # 15-08-2025
    "%d/%m/%Y",  # 25/09/2024
    "%Y-%m-%d",  # 2025-08-15
)

# 상대 날짜 키워드가 포함하는 일 수 (오늘 포함 N+1일)
LAST_WEEK_DAYS = 7


def _day_range(day: datetime) -> DateRange:
    return DateRange(start_date=start_of_day(day), end_date=end_of_day(day))


def _previous_month_range(now: datetime) -> DateRange:
    last_day = now.replace(day=1) - timedelta(days=1)
    first_day = last_day.replace(day=1)
    return DateRange(
        start_date=start_of_day(first_day),
        end_date=end_of_day(last_day),
    )


def parse_absolute_date(value: str) -> Optional[datetime]:
    """지원하는 절대 날짜 형식으로 파싱 (naive datetime)"""
    for fmt in ABSOLUTE_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def resolve_date_filter(
    token: Any, now: Optional[datetime] = None
) -> Optional[DateRange]:
    """날짜 필터 토큰을 날짜 범위로 변환

    상대 키워드 (대소문자 무시):
        - today: 오늘
        - yesterday: 어제
        - last week: 7일 전 ~ 오늘 (달력 주가 아닌 8일 구간)
        - last month: 지난달 1일 ~ 지난달 말일

    그 외에는 ABSOLUTE_DATE_FORMATS 순서대로 파싱하여 해당 일자 전체를
    범위로 사용합니다.

    Args:
        token: 날짜 필터 토큰
        now: 기준 시각 (기본: 검색 기준 시간대의 현재 시각)

    Returns:
        DateRange 또는 해석할 수 없으면 None
    """
    if not token or not isinstance(token, str):
        logger.error(f"Invalid date string: {token!r}")
        return None

    if now is None:
        now = now_local()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=get_search_timezone())

    keyword = token.strip().lower()

    if keyword == "today":
        return _day_range(now)
    if keyword == "yesterday":
        return _day_range(days_ago(1, now))
    if keyword == "last week":
        return DateRange(
            start_date=start_of_day(days_ago(LAST_WEEK_DAYS, now)),
            end_date=end_of_day(now),
        )
    if keyword == "last month":
        return _previous_month_range(now)

    parsed = parse_absolute_date(token.strip())
    if parsed is None:
        return None

    return _day_range(parsed.replace(tzinfo=now.tzinfo))
