"""
core/parallel/governor.py - 리전별 분류 작업 풀

고정된 수의 워커가 "분류할 리소스" 작업 큐에서 하나씩 꺼내 처리합니다.
워커는 리소스 하나의 분류가 끝날 때까지 슬롯을 점유하므로,
동시에 진행 중인 메트릭 조회 수는 풀 크기를 넘지 않습니다.

CloudWatch GetMetricData 쓰로틀링을 피하기 위해 리전마다 별도 풀을 사용하며,
리소스당 쿼리가 많은 v2 경로는 더 작은 풀을 씁니다.

Example:
    pool = ClassificationPool(capacity=20, name="us-east-1/elb")
    states = pool.run(load_balancers, classify)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ClassificationPool:
    """고정 크기 분류 워커 풀

    Attributes:
        capacity: 동시 실행 가능한 분류 작업 수
        name: 로깅용 이름 (예: "us-east-1/elbv2")
    """

    def __init__(self, capacity: int, name: str = ""):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.name = name or "pool"
        self._lock = threading.Lock()
        self._in_flight = 0
        self._peak = 0

    @property
    def in_flight(self) -> int:
        """현재 진행 중인 작업 수"""
        with self._lock:
            return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        """실행 중 관측된 최대 동시 작업 수"""
        with self._lock:
            return self._peak

    def _enter(self) -> None:
        with self._lock:
            self._in_flight += 1
            if self._in_flight > self._peak:
                self._peak = self._in_flight

    def _leave(self) -> None:
        with self._lock:
            self._in_flight -= 1

    def _guarded(self, func: Callable[[T], R], item: T) -> R:
        self._enter()
        try:
            return func(item)
        finally:
            self._leave()

    def run(self, items: Iterable[T], func: Callable[[T], R]) -> list[R]:
        """모든 항목을 큐에 넣고 워커 풀로 처리

        Args:
            items: 분류할 리소스 목록
            func: 리소스 하나를 처리하는 함수

        Returns:
            입력 순서의 결과 목록 (실행 순서는 보장하지 않음)

        Raises:
            첫 번째로 실패한 작업의 예외. 아직 시작하지 않은 작업은 취소되고,
            진행 중인 작업이 끝난 뒤 예외가 다시 발생합니다.
        """
        work = list(items)
        if not work:
            return []

        results: list[R] = []
        with ThreadPoolExecutor(max_workers=self.capacity, thread_name_prefix=f"classify-{self.name}") as executor:
            futures: list[Future[R]] = [executor.submit(self._guarded, func, item) for item in work]
            done, pending = wait(futures, return_when=FIRST_EXCEPTION)

            failed = next((f for f in futures if f in done and f.exception() is not None), None)
            if failed is not None:
                for f in pending:
                    f.cancel()
                logger.debug(f"[{self.name}] 작업 실패로 대기 중인 {len(pending)}개 작업 취소")
                raise failed.exception()  # type: ignore[misc]

            for f in futures:
                results.append(f.result())

        logger.debug(f"[{self.name}] {len(work)}개 분류 완료 (capacity={self.capacity}, peak={self.peak_in_flight})")
        return results
