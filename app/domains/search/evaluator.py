"""로컬 필터 평가기

파싱된 필터(ParsedFilters)로 로컬 캐시 레코드의 일치 여부를 판정합니다.
존재하는 필터만 AND 조건으로 평가하며, 필터가 없으면 모든 레코드가
일치합니다.
"""

from datetime import datetime
from typing import Optional

from app.core.logging import get_logger
from app.core.utils.datetime import parse_timestamp
from app.domains.bookmarks.schemas import BookmarkRecord, RecordPredicate
from app.domains.search.date_filter import resolve_date_filter
from app.domains.search.exceptions import InvalidFilterError
from app.domains.search.types import DateRange, ParsedFilters

logger = get_logger(__name__)

# 키워드가 검색되는 필드 (필드 간 OR)
KEYWORD_FIELDS = ("title", "summary", "tags", "channel_name", "user_notes")


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle.lower() in haystack.lower()


def _contains_any_word(haystack: Optional[str], value: str) -> bool:
    return any(_contains(haystack, word) for word in value.split())


def _added_within(record: BookmarkRecord, date_range: DateRange) -> bool:
    added = parse_timestamp(record.date_added, tz=date_range.start_date.tzinfo)
    return added is not None and date_range.contains(added)


def _matches_keyword(record: BookmarkRecord, keyword: str) -> bool:
    return any(
        _contains(getattr(record, field), keyword) for field in KEYWORD_FIELDS
    )


def _reject_all(record: BookmarkRecord) -> bool:
    return False


def _evaluate(
    record: BookmarkRecord,
    filters: ParsedFilters,
    date_range: Optional[DateRange],
) -> bool:
    if filters.text and not _contains(record.user_notes, filters.text):
        return False
    if filters.site and not _contains_any_word(
        record.original_url, filters.site
    ):
        return False
    if filters.name and not _contains_any_word(
        record.channel_name, filters.name
    ):
        return False
    if filters.tag and not _contains(record.tags, filters.tag):
        return False
    if filters.type and (record.video_type or "").lower() != (
        filters.type.lower()
    ):
        return False
    if filters.exact and not _contains(record.title, filters.exact):
        return False
    if date_range is not None and not _added_within(record, date_range):
        return False
    return all(_matches_keyword(record, kw) for kw in filters.keywords)


def build_predicate(
    filters: ParsedFilters, now: Optional[datetime] = None
) -> RecordPredicate:
    """필터로 레코드 판정 함수 생성

    날짜 필터는 한 번만 해석합니다. 날짜 토큰이 있지만 해석할 수 없으면
    경고를 남기고 모든 레코드를 제외하는 판정 함수를 반환합니다.

    Args:
        filters: 파싱된 필터
        now: 상대 날짜 기준 시각 (기본: 현재 시각)

    Returns:
        레코드를 받아 일치 여부를 반환하는 함수
    """
    date_range: Optional[DateRange] = None
    if filters.date:
        date_range = resolve_date_filter(filters.date, now=now)
        if date_range is None:
            error = InvalidFilterError("date", filters.date)
            logger.warning(
                f"{error}; no records can match",
                extra={"error_code": error.error_code},
            )
            return _reject_all

    def predicate(record: BookmarkRecord) -> bool:
        return _evaluate(record, filters, date_range)

    return predicate


def matches_filters(
    record: BookmarkRecord,
    filters: ParsedFilters,
    now: Optional[datetime] = None,
) -> bool:
    """단일 레코드가 필터와 일치하는지 여부"""
    return build_predicate(filters, now=now)(record)
