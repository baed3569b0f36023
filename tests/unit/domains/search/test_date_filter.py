"""날짜 필터 해석 단위 테스트"""

from datetime import date, datetime, timezone

import pytest

from app.domains.search.date_filter import (
    parse_absolute_date,
    resolve_date_filter,
)

NOW = datetime(2025, 8, 20, 15, 30, tzinfo=timezone.utc)


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    return (
        datetime(day.year, day.month, day.day, tzinfo=timezone.utc),
        datetime(
            day.year, day.month, day.day, 23, 59, 59, 999999,
            tzinfo=timezone.utc,
        ),
    )


class TestRelativeKeywords:
    """상대 날짜 키워드 테스트"""

    def test_today(self):
        """today: 오늘 하루"""
        date_range = resolve_date_filter("today", now=NOW)

        assert (date_range.start_date, date_range.end_date) == _day_bounds(
            date(2025, 8, 20)
        )

    def test_yesterday(self):
        """yesterday: 같은 날의 00:00:00.000000 ~ 23:59:59.999999"""
        date_range = resolve_date_filter("yesterday", now=NOW)

        assert date_range.start_date.date() == date(2025, 8, 19)
        assert date_range.end_date.date() == date(2025, 8, 19)
        assert (date_range.start_date, date_range.end_date) == _day_bounds(
            date(2025, 8, 19)
        )

    def test_last_week_is_eight_day_window(self):
        """last week: 7일 전 ~ 오늘 (달력 주가 아닌 8일 구간, 의도된 동작)"""
        date_range = resolve_date_filter("last week", now=NOW)

        assert date_range.start_date == _day_bounds(date(2025, 8, 13))[0]
        assert date_range.end_date == _day_bounds(date(2025, 8, 20))[1]
        span = date_range.end_date.date() - date_range.start_date.date()
        assert span.days == 7

    def test_last_month(self):
        """last month: 지난달 전체"""
        date_range = resolve_date_filter("last month", now=NOW)

        assert date_range.start_date == _day_bounds(date(2025, 7, 1))[0]
        assert date_range.end_date == _day_bounds(date(2025, 7, 31))[1]

    @pytest.mark.parametrize(
        "now, first, last",
        [
            (
                datetime(2025, 1, 15, tzinfo=timezone.utc),
                date(2024, 12, 1),
                date(2024, 12, 31),
            ),
            (
                datetime(2025, 3, 31, tzinfo=timezone.utc),
                date(2025, 2, 1),
                date(2025, 2, 28),
            ),
            (
                datetime(2024, 3, 31, tzinfo=timezone.utc),
                date(2024, 2, 1),
                date(2024, 2, 29),
            ),
        ],
    )
    def test_last_month_boundaries(self, now, first, last):
        """연도 경계, 짧은 달 처리"""
        date_range = resolve_date_filter("last month", now=now)

        assert date_range.start_date.date() == first
        assert date_range.end_date.date() == last

    @pytest.mark.parametrize("token", ["Yesterday", " TODAY ", "LAST WEEK"])
    def test_keywords_are_case_insensitive(self, token):
        """키워드는 대소문자/앞뒤 공백 무시"""
        assert resolve_date_filter(token, now=NOW) is not None

    def test_naive_now_uses_search_timezone(self):
        """naive 기준 시각에는 검색 기준 시간대 적용"""
        date_range = resolve_date_filter("today", now=datetime(2025, 8, 20, 9))

        assert date_range.start_date.tzinfo is not None


class TestAbsoluteDates:
    """절대 날짜 형식 테스트"""

    @pytest.mark.parametrize(
        "token",
        ["15/08/2025", "2025-08-15", "15-08-2025", "15 August 2025"],
    )
    def test_formats_resolve_to_same_day(self, token):
        """지원 형식은 모두 같은 날짜 범위"""
        date_range = resolve_date_filter(token, now=NOW)

        assert (date_range.start_date, date_range.end_date) == _day_bounds(
            date(2025, 8, 15)
        )

    def test_range_uses_reference_timezone(self):
        """절대 날짜는 기준 시각의 시간대를 사용"""
        date_range = resolve_date_filter("2025-08-15", now=NOW)

        assert date_range.start_date.tzinfo == NOW.tzinfo

    @pytest.mark.parametrize(
        "token", ["not-a-date", "31/02/2025", "2025/08/15", "this week"]
    )
    def test_unparseable_returns_none(self, token):
        """해석할 수 없는 값은 None"""
        assert resolve_date_filter(token, now=NOW) is None

    @pytest.mark.parametrize("token", ["", None, 20250815])
    def test_invalid_input_returns_none(self, token):
        """빈 값/문자열이 아닌 값은 None"""
        assert resolve_date_filter(token, now=NOW) is None

    def test_parse_absolute_date_first_matching_format(self):
        """dd-MM-yyyy 가 yyyy-MM-dd 보다 먼저 시도됨"""
        assert parse_absolute_date("01-02-2025") == datetime(2025, 2, 1)
        assert parse_absolute_date("2025-02-01") == datetime(2025, 2, 1)
