"""
plugins/elb/sweep.py - 유휴 로드밸런서 스윕

계정 → 리전 → 로드밸런서 순서로 스캔하고, 삭제 모드에서는
비활성 레코드를 같은 자격 증명 컨텍스트 안에서 삭제합니다.

흐름:
    1. 계정별 worker에서 CredentialBroker.checkout (AssumeRole 1회)
    2. ParallelSessionExecutor로 (리전, 종류) 작업 병렬 실행
       - scan_region: 목록 조회 → ClassificationPool 분류 → ResultAggregator
    3. Inactive 레코드 선별
    4. 삭제 모드: RemediationExecutor (checkout 블록 안에서)

실패 범위:
    - 자격 증명 실패: 해당 계정만 실패
    - 목록 조회 실패: 해당 (리전, 종류)만 실패
    - 메트릭 조회 실패: 해당 리소스를 Inactive로 처리
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from core.auth.session import AccountContext, AccountTarget, CredentialBroker
from core.config import AppConfig, RunOption, settings
from core.exceptions import CredentialError
from core.parallel.errors import to_task_error
from core.parallel.executor import ParallelSessionExecutor
from core.parallel.governor import ClassificationPool
from core.parallel.types import TaskError

from .aggregator import ResultAggregator
from .classifier import classify_load_balancer
from .common import DeletionOutcome, LBKind, ResourceRecord
from .listing import list_load_balancers
from .remediation import RemediationExecutor

logger = logging.getLogger(__name__)

ALL_KINDS: tuple[LBKind, ...] = (LBKind.CLASSIC, LBKind.V2)


# =============================================================================
# 설정
# =============================================================================


@dataclass
class ScanOptions:
    """리전 스캔 옵션

    Attributes:
        days: 메트릭 조회 기간 (일)
        vpc_ids: VPC 필터 (비어 있으면 전체)
        strict_vpc_filter: False면 필터 밖 레코드도 포함
        classic_pool_size: CLB 분류 풀 크기
        v2_pool_size: ALB/NLB 분류 풀 크기
    """

    days: int = settings.DEFAULT_LOOKBACK_DAYS
    vpc_ids: Sequence[str] = ()
    strict_vpc_filter: bool = True
    classic_pool_size: int = settings.CLASSIC_POOL_SIZE
    v2_pool_size: int = settings.V2_POOL_SIZE

    def capacity_for(self, kind: LBKind) -> int:
        return self.classic_pool_size if kind is LBKind.CLASSIC else self.v2_pool_size


@dataclass
class SweepConfig:
    """스윕 실행 설정 (설정 문서 또는 CLI 옵션에서 생성)"""

    run_option: RunOption
    days: int
    targets: list[AccountTarget]
    kinds: tuple[LBKind, ...] = ALL_KINDS
    strict_vpc_filter: bool = True
    classic_pool_size: int = field(default_factory=lambda: settings.CLASSIC_POOL_SIZE)
    v2_pool_size: int = field(default_factory=lambda: settings.V2_POOL_SIZE)

    @classmethod
    def from_app_config(cls, app_config: AppConfig, kinds: tuple[LBKind, ...] = ALL_KINDS) -> SweepConfig:
        """설정 문서에서 생성 (계정마다 역할 위임)"""
        return cls(
            run_option=app_config.run_option,
            days=app_config.days,
            targets=[
                AccountTarget(role_arn=a.iam_role, regions=list(a.regions), vpc_ids=list(a.vpc_ids))
                for a in app_config.accounts
            ],
            kinds=kinds,
            strict_vpc_filter=app_config.strict_vpc_filter,
        )

    def options_for(self, target: AccountTarget) -> ScanOptions:
        return ScanOptions(
            days=self.days,
            vpc_ids=tuple(target.vpc_ids),
            strict_vpc_filter=self.strict_vpc_filter,
            classic_pool_size=self.classic_pool_size,
            v2_pool_size=self.v2_pool_size,
        )


# =============================================================================
# 결과
# =============================================================================


@dataclass
class AccountScanResult:
    """계정 하나의 스캔 결과

    Attributes:
        account_id: 계정 ID (역할 미지정 시 프로파일명)
        records: 분류된 레코드 (Active 포함)
        errors: 실패한 (리전, 종류) 범위
        deletion_outcomes: 삭제 결과 (삭제 모드)
        error: 계정 전체 실패 (자격 증명 등)
    """

    account_id: str
    records: list[ResourceRecord] = field(default_factory=list)
    errors: list[TaskError] = field(default_factory=list)
    deletion_outcomes: list[DeletionOutcome] = field(default_factory=list)
    error: TaskError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def inactive_records(self, kind: LBKind | None = None) -> list[ResourceRecord]:
        return [r for r in self.records if r.is_inactive and (kind is None or r.kind is kind)]


@dataclass
class SweepReport:
    """전체 스윕 결과"""

    run_option: RunOption
    accounts: list[AccountScanResult] = field(default_factory=list)

    @property
    def records(self) -> list[ResourceRecord]:
        return [r for a in self.accounts for r in a.records]

    def inactive_records(self, kind: LBKind | None = None) -> list[ResourceRecord]:
        return [r for a in self.accounts for r in a.inactive_records(kind)]

    @property
    def deletion_outcomes(self) -> list[DeletionOutcome]:
        return [o for a in self.accounts for o in a.deletion_outcomes]

    @property
    def errors(self) -> list[TaskError]:
        """계정 실패 + (리전, 종류) 실패"""
        errors: list[TaskError] = []
        for account in self.accounts:
            if account.error is not None:
                errors.append(account.error)
            errors.extend(account.errors)
        return errors

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


# =============================================================================
# 스캔
# =============================================================================


def scan_region(
    context: AccountContext,
    region: str,
    kind: LBKind | str,
    options: ScanOptions,
) -> list[ResourceRecord]:
    """리전 하나의 특정 종류 로드밸런서 스캔

    Args:
        context: 자격 증명 컨텍스트
        region: 리전
        kind: LB 종류
        options: 스캔 옵션

    Returns:
        VPC 필터를 통과한 레코드 (Active/Inactive 모두, 순서 보장 없음)

    Raises:
        ListingError: 목록 또는 타겟 그룹 조회 실패
        CredentialError: 자격 증명 만료 또는 반납된 컨텍스트
    """
    kind = LBKind.from_string(kind) if isinstance(kind, str) else kind
    lb_client = context.client(kind.service_name, region)
    clients = {kind.service_name: lb_client, "cloudwatch": context.client("cloudwatch", region)}

    descriptions = list_load_balancers(lb_client, kind)
    logger.info(f"[{context.account_id}/{region}/{kind}] {len(descriptions)}개 로드밸런서 분류 시작")

    aggregator = ResultAggregator(options.vpc_ids, strict_vpc_filter=options.strict_vpc_filter)
    pool = ClassificationPool(options.capacity_for(kind), name=f"{region}/{kind}")

    def classify(description: dict) -> bool:
        return aggregator.add(classify_load_balancer(kind, description, clients, options.days, region))

    pool.run(descriptions, classify)
    return aggregator.items()


class SweepOrchestrator:
    """계정 병렬 스윕 실행기

    Args:
        config: 스윕 설정
        broker: 자격 증명 발급자 (None이면 기본 CredentialBroker)
    """

    def __init__(self, config: SweepConfig, broker: CredentialBroker | None = None):
        self.config = config
        self.broker = broker or CredentialBroker()

    def run(self) -> SweepReport:
        """모든 계정을 병렬 스캔

        Returns:
            SweepReport (계정 순서는 설정 순서)
        """
        report = SweepReport(run_option=self.config.run_option)
        targets = self.config.targets
        if not targets:
            logger.warning("스캔할 계정이 없습니다")
            return report

        logger.info(f"스윕 시작: {len(targets)}개 계정, 모드={self.config.run_option}, 기간={self.config.days}일")

        with ThreadPoolExecutor(max_workers=len(targets), thread_name_prefix="account") as executor:
            futures = [executor.submit(self._run_account, target) for target in targets]
            for target, future in zip(targets, futures):
                try:
                    report.accounts.append(future.result())
                except Exception as e:
                    # 예상치 못한 계정 worker 에러
                    label = target.label
                    logger.error(f"계정 스캔 중 예외 [{label}]: {e}")
                    report.accounts.append(AccountScanResult(account_id=label, error=to_task_error(e, label, "-")))

        logger.info(
            f"스윕 완료: 레코드 {len(report.records)}개, 비활성 {len(report.inactive_records())}개, "
            f"에러 {len(report.errors)}건"
        )
        return report

    def _run_account(self, target: AccountTarget) -> AccountScanResult:
        """계정 하나 스캔 (+ 삭제 모드면 삭제)"""
        label = target.label
        options = self.config.options_for(target)

        try:
            with self.broker.checkout(target) as context:
                executor = ParallelSessionExecutor(context, target.regions, [k.value for k in self.config.kinds])
                result = executor.execute(lambda ctx, region, kind: scan_region(ctx, region, kind, options))

                account = AccountScanResult(
                    account_id=context.account_id,
                    records=result.get_flat_data(),
                    errors=result.get_errors(),
                )
                for error in account.errors:
                    logger.error(f"스캔 실패 {error}")
                if account.errors:
                    logger.warning(f"[{context.account_id}] {result.get_error_summary()}")

                inactive = account.inactive_records()
                if self.config.run_option is RunOption.DELETE and inactive:
                    account.deletion_outcomes = RemediationExecutor(context).execute(inactive)
                return account

        except CredentialError as e:
            logger.error(f"계정 자격 증명 실패 [{label}]: {e}")
            return AccountScanResult(account_id=label, error=to_task_error(e, label, "-"))
