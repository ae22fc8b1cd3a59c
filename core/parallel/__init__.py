"""
core/parallel - 병렬 처리 모듈

계정/리전 단위 작업과 리전 내 분류 작업을 병렬로 안전하게 처리합니다.

주요 구성 요소:
- ParallelSessionExecutor: (리전, LB 종류) Map-Reduce 병렬 실행기
- ClassificationPool: 리전별 고정 크기 분류 워커 풀
- ThreadSafeCollector: 락으로 보호되는 결과 수집기
- get_client: 재시도 없는 boto3 client 생성

Example:
    from core.parallel import ParallelSessionExecutor

    executor = ParallelSessionExecutor(context, regions=["us-east-1"], kinds=["elb"])
    result = executor.execute(scan)

    records = result.get_flat_data()
    print(f"성공: {result.success_count}, 실패: {result.error_count}")

    if result.error_count > 0:
        print(result.get_error_summary())
"""

from .client import get_client
from .collector import ThreadSafeCollector
from .errors import categorize_error, get_error_code, to_task_error
from .executor import ParallelConfig, ParallelSessionExecutor
from .governor import ClassificationPool
from .types import ErrorCategory, ParallelExecutionResult, TaskError, TaskResult

__all__: list[str] = [
    # Executor
    "ParallelSessionExecutor",
    "ParallelConfig",
    # Governor
    "ClassificationPool",
    # Collector
    "ThreadSafeCollector",
    # Client (재시도 없음)
    "get_client",
    # Error handling
    "categorize_error",
    "get_error_code",
    "to_task_error",
    # Types
    "ErrorCategory",
    "TaskError",
    "TaskResult",
    "ParallelExecutionResult",
]
