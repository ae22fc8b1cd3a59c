"""
tests/core/parallel/test_parallel_executor.py - ParallelSessionExecutor 테스트
"""

import threading

import pytest

from core.exceptions import ListingError
from core.parallel.executor import ParallelConfig, ParallelSessionExecutor
from core.parallel.types import ErrorCategory


class TestParallelConfig:
    """ParallelConfig 테스트"""

    def test_default_values(self):
        """기본값은 작업 수만큼 워커"""
        assert ParallelConfig().max_workers is None

    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            ParallelConfig(max_workers=0)


class TestParallelSessionExecutor:
    """ParallelSessionExecutor 테스트"""

    def test_runs_every_region_kind_pair(self, fake_context):
        """리전 × 종류 조합마다 작업 하나"""
        seen = []
        lock = threading.Lock()

        def task(ctx, region, kind):
            with lock:
                seen.append((region, kind))
            return [f"{region}:{kind}"]

        executor = ParallelSessionExecutor(fake_context, ["us-east-1", "eu-west-1"], ["elb", "elbv2"])
        result = executor.execute(task)

        assert sorted(seen) == [
            ("eu-west-1", "elb"),
            ("eu-west-1", "elbv2"),
            ("us-east-1", "elb"),
            ("us-east-1", "elbv2"),
        ]
        assert result.total_count == 4
        assert result.success_count == 4
        assert sorted(result.get_flat_data()) == sorted(f"{r}:{k}" for r, k in seen)

    def test_context_is_passed(self, fake_context):
        executor = ParallelSessionExecutor(fake_context, ["us-east-1"], ["elb"])

        result = executor.execute(lambda ctx, region, kind: ctx.account_id)

        assert result.get_data() == ["111122223333"]

    def test_failure_is_isolated(self, fake_context):
        """한 리전 실패가 다른 리전 결과에 영향 없음"""

        def task(ctx, region, kind):
            if region == "eu-west-1":
                raise ListingError("elb", "DescribeLoadBalancers", region, "AccessDenied", "no")
            return [region]

        executor = ParallelSessionExecutor(fake_context, ["us-east-1", "eu-west-1"], ["elb"])
        result = executor.execute(task)

        assert result.get_flat_data() == ["us-east-1"]
        errors = result.get_errors()
        assert len(errors) == 1
        assert errors[0].region == "eu-west-1"
        assert errors[0].kind == "elb"
        assert errors[0].identifier == "111122223333"
        assert errors[0].error_code == "AccessDenied"
        assert errors[0].category == ErrorCategory.ACCESS_DENIED

    def test_kinds_are_stringified(self, fake_context):
        """enum 종류도 문자열로 전달"""
        from plugins.elb.common import LBKind

        executor = ParallelSessionExecutor(fake_context, ["us-east-1"], [LBKind.V2])
        result = executor.execute(lambda ctx, region, kind: kind)

        assert result.get_data() == ["elbv2"]

    def test_no_tasks(self, fake_context):
        executor = ParallelSessionExecutor(fake_context, [], ["elb"])

        result = executor.execute(lambda ctx, region, kind: [1])

        assert result.total_count == 0
