"""고급 검색어 파서

``site:youtube date:last week tag:music "exact phrase" keyword`` 형태의
검색어를 구조화된 필터(ParsedFilters)로 변환합니다.

처리 단계:
    1. normalize_query: 여러 단어로 된 필터 값을 하나의 토큰으로 묶음
    2. tokenize: 큰따옴표 구간은 하나의 토큰, 나머지는 공백 기준 분리
    3. parse_query: 토큰별 상태 머신 (ContinuationMode) 으로 필터 할당
"""

import re
from typing import Any, Optional

from app.core.logging import get_logger
from app.domains.search.types import ContinuationMode, ParsedFilters

logger = get_logger(__name__)

FILTER_NAMES = ("text", "site", "name", "tag", "type", "date")

MIN_DATE_TOKEN_LENGTH = 3

_FILTER_ALTERNATION = "|".join(FILTER_NAMES)

# "date : yesterday" -> "date:yesterday" (바로 뒤가 다른 필터면 유지)
_PREFIX_SPACING_PATTERN = re.compile(
    rf"\b({_FILTER_ALTERNATION})\s*:\s+(?!\w+\s*:)",
    re.IGNORECASE,
)

# 여러 단어 날짜 값: last week, this month, 15 August 2025 ...
_MULTI_WORD_DATE_PATTERN = re.compile(
    r"(date\s*:\s*)"
    r"(last\s+week|last\s+month|this\s+week|this\s+month"
    r"|\d{1,2}\s+[A-Za-z]+\s+\d{4})"
    r"(\s|\+|$)",
    re.IGNORECASE,
)

# site/name/type 값은 다음 "word:" 필터 전까지 여러 단어를 허용
_MULTI_WORD_VALUE_PATTERN = re.compile(
    r"\b(site\s*:\s*|name\s*:\s*|type\s*:\s*)"
    r'([^"\s]+(?:\s+[^"\s]+)*?)'
    r"(?=\s+\w+:|$)",
    re.IGNORECASE,
)

# 필터 접두사에 붙은 인용 값, 인용 구문, 일반 토큰 순으로 매칭
_TOKEN_PATTERN = re.compile(
    rf'(?:{_FILTER_ALTERNATION}):"[^"]*"|"[^"]*"|[^\s"]+',
    re.IGNORECASE,
)

_FILTER_PATTERN = re.compile(
    rf"({_FILTER_ALTERNATION})\s*:\s*(.*)",
    re.IGNORECASE,
)

_CONTINUATION_BY_FILTER = {
    "site": ContinuationMode.SITE,
    "name": ContinuationMode.NAME,
    "type": ContinuationMode.TYPE,
}


def _is_quoted(token: str) -> bool:
    return len(token) >= 2 and token.startswith('"') and token.endswith('"')


def _strip_quotes(token: str) -> str:
    return token[1:-1] if _is_quoted(token) else token


def _collapse_date_value(match: re.Match) -> str:
    prefix, value, suffix = match.groups()
    return re.sub(r"\s", "", prefix) + re.sub(r"\s+", "_", value) + suffix


def _quote_multi_word_value(match: re.Match) -> str:
    prefix, value = match.groups()
    prefix = re.sub(r"\s", "", prefix)
    value = value.strip()
    if " " in value and not value.startswith('"'):
        return f'{prefix}"{value}"'
    return prefix + value


def normalize_query(query: str) -> str:
    """토큰화 전 여러 단어 필터 값 정규화

    - ``date : last week`` -> ``date:last_week``
    - ``date:15 August 2025`` -> ``date:15_August_2025``
    - ``site: Shradha Khapra`` -> ``site:"Shradha Khapra"``

    Args:
        query: 원본 검색어

    Returns:
        str: 정규화된 검색어
    """
    normalized = _PREFIX_SPACING_PATTERN.sub(r"\1:", query)
    normalized = _MULTI_WORD_DATE_PATTERN.sub(_collapse_date_value, normalized)
    return _MULTI_WORD_VALUE_PATTERN.sub(_quote_multi_word_value, normalized)


def tokenize(normalized_query: str) -> list[str]:
    """정규화된 검색어를 토큰으로 분리

    큰따옴표 구간은 따옴표를 포함한 하나의 토큰이 되며, 짝이 맞지 않는
    따옴표는 버려집니다.
    """
    return _TOKEN_PATTERN.findall(normalized_query)


class _QueryParser:
    """토큰 단위 상태 머신"""

    def __init__(self) -> None:
        self.filters = ParsedFilters()
        self.mode = ContinuationMode.NONE

    def feed(self, token: str) -> None:
        clean_token = _strip_quotes(token)

        filter_match = _FILTER_PATTERN.fullmatch(clean_token)
        if filter_match:
            name = filter_match.group(1).lower()
            value = _strip_quotes(filter_match.group(2).strip())
            self._apply_filter(name, value, token)
        elif _is_quoted(token):
            self.filters.exact = clean_token
            self.mode = ContinuationMode.NONE
        elif self.mode is not ContinuationMode.NONE:
            field = self.mode.value
            current = getattr(self.filters, field) or ""
            setattr(self.filters, field, f"{current} {clean_token}")
        else:
            self.filters.keywords.extend(
                part.strip() for part in clean_token.split("+") if part.strip()
            )

    def _apply_filter(self, name: str, value: str, token: str) -> None:
        if name == "date":
            self._apply_date(value, token)
            self.mode = ContinuationMode.NONE
            return

        setattr(self.filters, name, value)
        self.mode = _CONTINUATION_BY_FILTER.get(name, ContinuationMode.NONE)

    def _apply_date(self, value: str, token: str) -> None:
        date_parts = value.split("+")
        date_value = date_parts[0].strip()

        if len(date_value) < MIN_DATE_TOKEN_LENGTH:
            logger.error(f"Invalid date value in query: {token!r}")
            self.filters.date = None
        else:
            self.filters.date = date_value.replace("_", " ")

        if len(date_parts) > 1 and date_parts[1].strip():
            self.filters.keywords.append(date_parts[1].strip())


def parse_query(query: Any) -> ParsedFilters:
    """검색어를 구조화된 필터로 파싱

    문자열이 아니거나 빈 값이면 예외 없이 빈 필터를 반환합니다.

    Args:
        query: 원본 검색어

    Returns:
        ParsedFilters: 파싱 결과

    Example::

        filters = parse_query("site:youtube.com date:yesterday")
        filters.site  # "youtube.com"
        filters.date  # "yesterday"
    """
    if not query or not isinstance(query, str):
        return ParsedFilters()

    parser = _QueryParser()
    for token in tokenize(normalize_query(query)):
        parser.feed(token)
    return parser.filters


def has_filters(query: Optional[str]) -> bool:
    """검색어에 구조화 필터가 포함되어 있는지 여부 (키워드만 있으면 False)"""
    return parse_query(query).has_structured_filters()
