"""시간 측정 유틸리티"""

import time
from contextlib import contextmanager
from typing import Generator


def monotonic_ms() -> float:
    """단조 증가 시계의 현재 값 (밀리초)"""
    return time.monotonic() * 1000


@contextmanager
def measure_time() -> Generator[dict[str, float], None, None]:
    """처리 시간을 측정하는 컨텍스트 매니저

    Usage:
        with measure_time() as timer:
            results = await repository.scan(predicate)
        logger.info(f"scan took {timer['elapsed_ms']:.2f}ms")

    Yields:
        dict: elapsed_ms 키를 포함하는 딕셔너리 (블록 종료 시 기록)
    """
    timer = {"elapsed_ms": 0.0}
    start = time.perf_counter()
    try:
        yield timer
    finally:
        timer["elapsed_ms"] = (time.perf_counter() - start) * 1000
