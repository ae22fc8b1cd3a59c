"""
core/parallel/types.py - 병렬 실행 결과 타입

Map-Reduce 패턴의 실행 결과를 표현합니다.
각 (계정, 리전, LB 종류) 작업은 TaskResult 하나를 만들고,
ParallelExecutionResult가 이를 모아 성공 데이터와 에러를 분리해 제공합니다.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorCategory(Enum):
    """에러 카테고리"""

    THROTTLING = "throttling"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    TIMEOUT = "timeout"
    EXPIRED_TOKEN = "expired_token"
    CREDENTIAL = "credential"
    LISTING = "listing"
    UNKNOWN = "unknown"


@dataclass
class TaskError:
    """실패한 작업의 에러 정보

    Attributes:
        identifier: 계정 ID 또는 프로파일명
        region: 대상 리전
        category: 에러 카테고리
        error_code: AWS 에러 코드 또는 예외 클래스명
        message: 에러 메시지
        kind: LB 종류 ("elb" / "elbv2", 계정 단위 실패는 빈 문자열)
        original_exception: 원본 예외
    """

    identifier: str
    region: str
    category: ErrorCategory
    error_code: str
    message: str
    kind: str = ""
    original_exception: Exception | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        scope = f"{self.identifier}/{self.region}"
        if self.kind:
            scope = f"{scope}/{self.kind}"
        return f"[{scope}] {self.error_code}: {self.message}"


@dataclass
class TaskResult(Generic[T]):
    """단일 작업 결과"""

    identifier: str
    region: str
    success: bool
    kind: str = ""
    data: T | None = None
    error: TaskError | None = None
    duration_ms: float = 0.0


@dataclass(frozen=True)
class ParallelExecutionResult(Generic[T]):
    """전체 병렬 실행 결과"""

    results: tuple[TaskResult[T], ...] = ()

    def __iter__(self) -> Iterator[TaskResult[T]]:
        return iter(self.results)

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if not r.success)

    def get_data(self) -> list[T]:
        """성공한 작업의 데이터 목록"""
        return [r.data for r in self.results if r.success and r.data is not None]

    def get_flat_data(self) -> list[Any]:
        """리스트 데이터를 하나로 평탄화"""
        flat: list[Any] = []
        for data in self.get_data():
            if isinstance(data, list):
                flat.extend(data)
            else:
                flat.append(data)
        return flat

    def get_errors(self) -> list[TaskError]:
        return [r.error for r in self.results if r.error is not None]

    def get_error_summary(self) -> str:
        """카테고리별 에러 건수 요약"""
        errors = self.get_errors()
        if not errors:
            return "에러 없음"

        by_category: dict[str, int] = {}
        for e in errors:
            by_category[e.category.value] = by_category.get(e.category.value, 0) + 1

        parts = [f"{k}: {v}건" for k, v in sorted(by_category.items())]
        return f"에러 {len(errors)}건 ({', '.join(parts)})"
