"""
plugins/elb/aggregator.py - 분류 결과 집계

분류 워커들이 동시에 레코드를 추가하는 수집기입니다.
VPC 필터가 지정되면 strict 모드에서는 목록에 없는 VPC의 레코드를 제외하고,
lenient 모드에서는 그대로 포함하되 DEBUG 로그를 남깁니다.
같은 종류의 같은 식별자는 한 번만 기록됩니다.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from core.parallel.collector import ThreadSafeCollector

from .common import LBKind, ResourceRecord

logger = logging.getLogger(__name__)


class ResultAggregator(ThreadSafeCollector[ResourceRecord]):
    """VPC 필터가 적용된 레코드 수집기

    Args:
        vpc_filter: 포함할 VPC ID 목록 (비어 있으면 전체 포함)
        strict_vpc_filter: True면 필터 밖 레코드 제외, False면 포함
    """

    def __init__(self, vpc_filter: Iterable[str] = (), strict_vpc_filter: bool = True):
        super().__init__()
        self.vpc_filter = frozenset(vpc_filter)
        self.strict_vpc_filter = strict_vpc_filter
        self._seen: set[tuple[LBKind, str]] = set()

    def accepts(self, record: ResourceRecord) -> bool:
        """VPC 필터 통과 여부"""
        if not self.vpc_filter or record.vpc_id in self.vpc_filter:
            return True
        if self.strict_vpc_filter:
            return False
        logger.debug(f"VPC 필터 밖 레코드 포함 (lenient): {record.identifier} ({record.vpc_id})")
        return True

    def add(self, item: ResourceRecord) -> bool:
        """레코드 추가

        Returns:
            기록되었으면 True, 필터로 제외되었거나 중복이면 False
        """
        if not self.accepts(item):
            logger.debug(f"VPC 필터로 제외: {item.identifier} ({item.vpc_id})")
            return False

        key = (item.kind, item.identifier)
        with self._lock:
            if key in self._seen:
                logger.warning(f"중복 레코드 무시: {item.kind}/{item.identifier}")
                return False
            self._seen.add(key)
            self._items.append(item)
        return True
