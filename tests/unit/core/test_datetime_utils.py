"""날짜/시간 유틸리티 테스트"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.utils.datetime import (
    days_ago,
    end_of_day,
    parse_timestamp,
    start_of_day,
)

KST = timezone(timedelta(hours=9))


class TestDayBoundaries:
    """하루 경계 계산 테스트"""

    def test_start_and_end_of_day(self):
        """00:00:00.000000 ~ 23:59:59.999999"""
        moment = datetime(2025, 8, 15, 13, 45, 12, 345, tzinfo=timezone.utc)

        assert start_of_day(moment) == datetime(
            2025, 8, 15, tzinfo=timezone.utc
        )
        assert end_of_day(moment) == datetime(
            2025, 8, 15, 23, 59, 59, 999999, tzinfo=timezone.utc
        )

    def test_days_ago_keeps_timezone(self):
        """n일 전 계산 시 시간대 유지"""
        now = datetime(2025, 3, 1, 9, tzinfo=KST)

        assert days_ago(1, now) == datetime(2025, 2, 28, 9, tzinfo=KST)


class TestParseTimestamp:
    """타임스탬프 파싱 테스트"""

    @pytest.mark.parametrize(
        "value",
        [
            "2025-08-15T00:00:00Z",
            "2025-08-15T00:00:00+00:00",
            "2025-08-15T09:00:00+09:00",
        ],
    )
    def test_aware_values(self, value):
        """시간대가 있는 ISO 8601 값"""
        parsed = parse_timestamp(value)

        assert parsed == datetime(2025, 8, 15, tzinfo=timezone.utc)

    def test_naive_value_uses_given_timezone(self):
        """시간대가 없으면 지정 시간대 적용"""
        parsed = parse_timestamp("2025-08-15T09:00:00", tz=KST)

        assert parsed == datetime(2025, 8, 15, tzinfo=timezone.utc)

    def test_datetime_passthrough(self):
        """datetime 은 그대로 (naive 면 시간대 부여)"""
        parsed = parse_timestamp(datetime(2025, 8, 15), tz=timezone.utc)

        assert parsed == datetime(2025, 8, 15, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday", 12345])
    def test_invalid_values(self, value):
        """해석할 수 없으면 None"""
        assert parse_timestamp(value) is None
