"""
plugins/elb/common.py - ELB 공통 데이터 구조

Classic ELB와 ELBv2(ALB/NLB)가 공유하는 레코드 타입입니다.

boto3 클라이언트:
    - ALB/NLB: elbv2 클라이언트 (식별자 = ARN)
    - CLB: elb 클라이언트 (식별자 = 이름)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LBKind(Enum):
    """Load Balancer 종류 (boto3 서비스 이름)"""

    CLASSIC = "elb"
    V2 = "elbv2"

    @classmethod
    def from_string(cls, value: str) -> LBKind:
        """문자열에서 LBKind 변환 ("elb" / "elbv2")"""
        for kind in cls:
            if kind.value == value.strip().lower():
                return kind
        raise ValueError(f"알 수 없는 LB 종류: {value}")

    @property
    def service_name(self) -> str:
        return self.value

    @property
    def id_column(self) -> str:
        """보고서 식별자 컬럼명"""
        return "name" if self is LBKind.CLASSIC else "arn"

    @property
    def display_name(self) -> str:
        return {LBKind.CLASSIC: "CLB", LBKind.V2: "ALB/NLB"}[self]

    def __str__(self) -> str:
        return self.value


class ActivityState(Enum):
    """활동 상태 (HealthyHostCount 합계 기준)"""

    ACTIVE = "Active"
    INACTIVE = "Inactive"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TargetGroupRef:
    """LB에 연결된 타겟 그룹

    Attributes:
        arn: 타겟 그룹 ARN
        short_id: CloudWatch 차원 값 (targetgroup/<name>/<hash>)
    """

    arn: str
    short_id: str


@dataclass(frozen=True)
class ResourceRecord:
    """분류된 로드밸런서 한 건"""

    identifier: str
    kind: LBKind
    region: str
    vpc_id: str
    state: ActivityState

    @property
    def is_inactive(self) -> bool:
        return self.state is ActivityState.INACTIVE

    def to_row(self) -> list[str]:
        """보고서 행 [식별자, 상태, 리전, VPC ID]"""
        return [self.identifier, str(self.state), self.region, self.vpc_id]


@dataclass(frozen=True)
class DeletionOutcome:
    """삭제 요청 결과

    Attributes:
        identifier: 이름(CLB) 또는 ARN(ALB/NLB)
        kind: LB 종류
        region: 리전
        succeeded: 삭제 API 호출 성공 여부
        error_detail: 실패 사유 (성공 시 None)
    """

    identifier: str
    kind: LBKind
    region: str
    succeeded: bool
    error_detail: str | None = None
