"""
core/parallel/executor.py - 계정 내 리전 병렬 실행기

Map-Reduce 패턴으로 한 계정의 (리전, LB 종류) 작업을 병렬 처리합니다.
ThreadPoolExecutor 기반이며, 재시도 없이 작업마다 TaskResult 하나를 만듭니다.
한 리전의 실패는 다른 리전 작업을 중단시키지 않습니다.

주요 구성 요소:
- ParallelConfig: 병렬 실행 설정 (워커 수)
- ParallelSessionExecutor: (리전, 종류) 작업 병렬 실행기

Example:
    from core.parallel import ParallelSessionExecutor

    def scan(context, region, kind):
        return scan_region(context, region, kind, options)

    executor = ParallelSessionExecutor(context, regions=["us-east-1"], kinds=["elb", "elbv2"])
    result = executor.execute(scan)
    records = result.get_flat_data()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from .errors import to_task_error
from .types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

if TYPE_CHECKING:
    from core.auth.session import AccountContext

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _clear_exception_chain(e: BaseException) -> None:
    """traceback + chained exception 메모리 누수 방지"""
    e.__traceback__ = None
    if e.__context__ is not None:
        e.__context__.__traceback__ = None
    if e.__cause__ is not None:
        e.__cause__.__traceback__ = None


@dataclass
class ParallelConfig:
    """병렬 실행 설정

    Attributes:
        max_workers: 최대 동시 스레드 수 (None이면 작업 수만큼)
    """

    max_workers: int | None = None

    def __post_init__(self) -> None:
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")


@dataclass
class _TaskSpec:
    """내부 작업 명세"""

    region: str
    kind: str


class ParallelSessionExecutor:
    """계정 내 (리전, 종류) 병렬 실행기

    Args:
        context: 자격 증명 컨텍스트 (checkout 블록 안에서만 유효)
        regions: 대상 리전 목록
        kinds: LB 종류 목록 ("elb", "elbv2")
        config: 병렬 실행 설정 (None이면 기본값)
    """

    def __init__(
        self,
        context: AccountContext,
        regions: Sequence[str],
        kinds: Sequence[str],
        config: ParallelConfig | None = None,
    ):
        self.context = context
        self.regions = list(regions)
        self.kinds = [str(k) for k in kinds]
        self.config = config or ParallelConfig()

    def execute(
        self,
        func: Callable[[AccountContext, str, str], T],
    ) -> ParallelExecutionResult[T]:
        """작업 함수를 모든 (리전, 종류) 조합에 병렬 실행

        Args:
            func: (context, region, kind) -> T 함수

        Returns:
            ParallelExecutionResult[T]: 전체 실행 결과
        """
        tasks = [_TaskSpec(region=r, kind=k) for r in self.regions for k in self.kinds]
        if not tasks:
            logger.warning(f"[{self.context.account_id}] 실행할 작업이 없습니다")
            return ParallelExecutionResult()

        max_workers = self.config.max_workers or len(tasks)
        logger.info(f"[{self.context.account_id}] 병렬 실행 시작: {len(tasks)}개 작업, max_workers={max_workers}")

        results: list[TaskResult[T]] = []
        start_time = time.monotonic()

        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="region") as executor:
            futures = {executor.submit(self._execute_single, func, task): task for task in tasks}

            for future in as_completed(futures):
                task = futures[future]
                try:
                    results.append(future.result())
                except Exception as e:
                    # 예상치 못한 executor 에러
                    logger.error(f"작업 실행 중 예외 [{self.context.account_id}/{task.region}/{task.kind}]: {e}")
                    _clear_exception_chain(e)
                    results.append(
                        TaskResult(
                            identifier=self.context.account_id,
                            region=task.region,
                            kind=task.kind,
                            success=False,
                            error=TaskError(
                                identifier=self.context.account_id,
                                region=task.region,
                                kind=task.kind,
                                category=ErrorCategory.UNKNOWN,
                                error_code="ExecutorError",
                                message=str(e),
                                original_exception=e,
                            ),
                        )
                    )

        total_time = (time.monotonic() - start_time) * 1000
        exec_result = ParallelExecutionResult(results=tuple(results))

        logger.info(
            f"[{self.context.account_id}] 병렬 실행 완료: 성공 {exec_result.success_count}, "
            f"실패 {exec_result.error_count}, 총 {total_time:.0f}ms"
        )
        return exec_result

    def _execute_single(
        self,
        func: Callable[[AccountContext, str, str], T],
        task: _TaskSpec,
    ) -> TaskResult[T]:
        """단일 작업 실행 (워커 스레드 내에서 호출)

        Returns:
            TaskResult[T]: 성공 시 데이터, 실패 시 에러 정보 포함
        """
        start_time = time.monotonic()
        try:
            data = func(self.context, task.region, task.kind)
            return TaskResult(
                identifier=self.context.account_id,
                region=task.region,
                kind=task.kind,
                success=True,
                data=data,
                duration_ms=(time.monotonic() - start_time) * 1000,
            )
        except Exception as e:
            logger.error(f"[{self.context.account_id}/{task.region}/{task.kind}] 작업 실패: {e}")
            _clear_exception_chain(e)
            return TaskResult(
                identifier=self.context.account_id,
                region=task.region,
                kind=task.kind,
                success=False,
                error=to_task_error(e, self.context.account_id, task.region, kind=task.kind),
                duration_ms=(time.monotonic() - start_time) * 1000,
            )
