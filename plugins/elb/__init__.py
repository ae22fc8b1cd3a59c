"""
plugins/elb - 유휴 로드밸런서 탐지/삭제

Classic ELB(CLB)와 ELBv2(ALB/NLB)를 HealthyHostCount 메트릭으로 분류합니다.

모듈:
    - common: 레코드 타입 (LBKind, ActivityState, ResourceRecord, DeletionOutcome)
    - listing: 로드밸런서/타겟 그룹 목록 조회
    - classifier: 활동 판정
    - aggregator: VPC 필터가 적용된 결과 수집기
    - remediation: 비활성 로드밸런서 삭제
    - sweep: 계정/리전 스윕 오케스트레이션
"""

from .common import ActivityState, DeletionOutcome, LBKind, ResourceRecord, TargetGroupRef
from .sweep import AccountScanResult, ScanOptions, SweepConfig, SweepOrchestrator, SweepReport, scan_region

__all__: list[str] = [
    "ActivityState",
    "DeletionOutcome",
    "LBKind",
    "ResourceRecord",
    "TargetGroupRef",
    "AccountScanResult",
    "ScanOptions",
    "SweepConfig",
    "SweepOrchestrator",
    "SweepReport",
    "scan_region",
]
