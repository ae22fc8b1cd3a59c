"""
plugins/elb/remediation.py - 비활성 로드밸런서 삭제

비활성으로 판정된 레코드마다 스레드 하나에서 delete_load_balancer를 정확히 한 번 호출합니다.
재시도와 삭제 확인은 하지 않으며, 실패는 DeletionOutcome에 기록되고
다른 레코드의 삭제는 계속 진행됩니다.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

from core.exceptions import DeletionError
from core.parallel.collector import ThreadSafeCollector

from .common import DeletionOutcome, LBKind, ResourceRecord

if TYPE_CHECKING:
    from core.auth.session import AccountContext

logger = logging.getLogger(__name__)


class RemediationExecutor:
    """비활성 LB 삭제 실행기

    Args:
        context: 자격 증명 컨텍스트 (스캔과 같은 checkout 블록 안에서 사용)
    """

    def __init__(self, context: AccountContext):
        self.context = context

    def execute(self, records: Sequence[ResourceRecord]) -> list[DeletionOutcome]:
        """레코드별 삭제 실행

        Args:
            records: 삭제할 레코드 (모두 Inactive여야 함)

        Returns:
            레코드당 DeletionOutcome 하나 (순서 보장 없음)

        Raises:
            ValueError: Active 레코드가 포함된 경우 (삭제 호출 전 검사)
        """
        active = [r.identifier for r in records if not r.is_inactive]
        if active:
            raise ValueError(f"Active 로드밸런서는 삭제할 수 없습니다: {', '.join(active)}")
        if not records:
            return []

        clients: dict[tuple[LBKind, str], Any] = {}
        for record in records:
            key = (record.kind, record.region)
            if key not in clients:
                clients[key] = self.context.client(record.kind.service_name, record.region)

        outcomes: ThreadSafeCollector[DeletionOutcome] = ThreadSafeCollector()
        logger.info(f"[{self.context.account_id}] {len(records)}개 로드밸런서 삭제 시작")

        with ThreadPoolExecutor(max_workers=len(records), thread_name_prefix="delete") as executor:
            for record in records:
                executor.submit(self._delete_one, clients[(record.kind, record.region)], record, outcomes)

        results = outcomes.items()
        failed = sum(1 for o in results if not o.succeeded)
        logger.info(f"[{self.context.account_id}] 삭제 완료: 성공 {len(results) - failed}, 실패 {failed}")
        return results

    def _delete_one(
        self,
        client: Any,
        record: ResourceRecord,
        outcomes: ThreadSafeCollector[DeletionOutcome],
    ) -> None:
        try:
            if record.kind is LBKind.CLASSIC:
                client.delete_load_balancer(LoadBalancerName=record.identifier)
            else:
                client.delete_load_balancer(LoadBalancerArn=record.identifier)
        except Exception as e:
            error = DeletionError(record.identifier, cause=e)
            logger.error(str(error))
            outcomes.add(
                DeletionOutcome(
                    identifier=record.identifier,
                    kind=record.kind,
                    region=record.region,
                    succeeded=False,
                    error_detail=str(error),
                )
            )
            return

        logger.info(f"삭제 완료: {record.kind.display_name} {record.identifier}")
        outcomes.add(DeletionOutcome(identifier=record.identifier, kind=record.kind, region=record.region, succeeded=True))
