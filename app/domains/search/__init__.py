"""Search 도메인 모듈

고급 검색어(필터 문법)를 파싱해 로컬 캐시 또는 원격 저장소에서 북마크를
찾는 도메인입니다.

구조:
    - types.py: 파싱 결과, 날짜 범위, 검색 결과 타입
    - query_parser.py: 검색어 정규화/토큰화/필터 파싱
    - date_filter.py: 날짜 필터 토큰 → 날짜 범위 변환
    - evaluator.py: 로컬 레코드 필터 평가
    - service.py: 로컬/원격 검색 오케스트레이션
    - session.py: 검색 요청 순서 관리, 디바운스
    - router.py: API 엔드포인트 (API Key 인증 포함)
    - exceptions.py: 도메인 예외
"""

from app.domains.search.date_filter import resolve_date_filter
from app.domains.search.evaluator import build_predicate, matches_filters
from app.domains.search.exceptions import (
    InvalidFilterError,
    InvalidSearchQueryException,
    RemoteSearchFailedException,
    SearchErrorCode,
)
from app.domains.search.query_parser import has_filters, parse_query
from app.domains.search.router import router
from app.domains.search.service import SearchService
from app.domains.search.session import SearchDebouncer, SearchSession
from app.domains.search.types import (
    DateRange,
    ParsedFilters,
    SearchResult,
    SearchSource,
)

__all__ = [
    "parse_query",
    "has_filters",
    "resolve_date_filter",
    "build_predicate",
    "matches_filters",
    "SearchService",
    "SearchSession",
    "SearchDebouncer",
    "ParsedFilters",
    "DateRange",
    "SearchResult",
    "SearchSource",
    "router",
    "SearchErrorCode",
    "InvalidFilterError",
    "InvalidSearchQueryException",
    "RemoteSearchFailedException",
]
