"""
tests/plugins/elb/test_aggregator.py - ResultAggregator 테스트
"""

import logging
import threading

from plugins.elb.aggregator import ResultAggregator
from plugins.elb.common import ActivityState, LBKind, ResourceRecord


def _record(identifier="lb1", vpc_id="vpc-1", kind=LBKind.CLASSIC):
    return ResourceRecord(identifier, kind, "us-east-1", vpc_id, ActivityState.INACTIVE)


class TestVpcFilter:
    """VPC 필터 테스트"""

    def test_no_filter_accepts_all(self):
        aggregator = ResultAggregator()

        assert aggregator.add(_record(vpc_id="vpc-9")) is True
        assert len(aggregator) == 1

    def test_strict_excludes(self):
        aggregator = ResultAggregator(["vpc-1"])

        assert aggregator.add(_record("lb1", "vpc-1")) is True
        assert aggregator.add(_record("lb2", "vpc-2")) is False
        assert [r.identifier for r in aggregator.items()] == ["lb1"]

    def test_lenient_includes_with_debug_log(self, caplog):
        aggregator = ResultAggregator(["vpc-1"], strict_vpc_filter=False)

        with caplog.at_level(logging.DEBUG, logger="plugins.elb.aggregator"):
            assert aggregator.add(_record("lb2", "vpc-2")) is True

        assert "lb2" in caplog.text
        assert len(aggregator) == 1


class TestDuplicates:
    """중복 레코드 테스트"""

    def test_duplicate_dropped_with_warning(self, caplog):
        aggregator = ResultAggregator()

        with caplog.at_level(logging.WARNING):
            assert aggregator.add(_record("lb1")) is True
            assert aggregator.add(_record("lb1")) is False

        assert len(aggregator) == 1
        assert "중복" in caplog.text

    def test_same_identifier_different_kind(self):
        """종류가 다르면 별개 레코드"""
        aggregator = ResultAggregator()

        aggregator.add(_record("web", kind=LBKind.CLASSIC))
        aggregator.add(_record("web", kind=LBKind.V2))

        assert len(aggregator) == 2

    def test_concurrent_duplicates(self):
        aggregator = ResultAggregator()
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            aggregator.add(_record("lb1"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(aggregator) == 1
