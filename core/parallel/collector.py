"""
core/parallel/collector.py - 스레드 세이프 결과 수집기

여러 워커 스레드가 동시에 결과를 추가하는 단일 변경 지점입니다.
락은 append 한 번 동안만 유지하며, 반환되는 목록의 순서는 보장하지 않습니다.

Example:
    collector = ThreadSafeCollector[DeletionOutcome]()
    collector.add(outcome)          # 워커 스레드에서
    outcomes = collector.items()    # 모든 작업 완료 후
"""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class ThreadSafeCollector(Generic[T]):
    """락으로 보호되는 결과 목록"""

    def __init__(self) -> None:
        self._items: list[T] = []
        self._lock = threading.Lock()

    def add(self, item: T) -> bool:
        """항목 추가

        Returns:
            추가되었으면 True (하위 클래스에서 필터링 시 False)
        """
        with self._lock:
            self._items.append(item)
        return True

    def items(self) -> list[T]:
        """수집된 항목의 복사본 반환"""
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
