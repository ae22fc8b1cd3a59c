"""
plugins/elb/classifier.py - 로드밸런서 활동 판정

조회 기간 동안의 HealthyHostCount(Minimum, 60초) 합계로 활동 여부를 판정합니다.

판정 기준:
    - 합계 > 0: Active
    - 합계 = 0, 결과 없음, 조회 실패: Inactive

CLB:
    AWS/ELB 네임스페이스, LoadBalancerName 차원 하나
ALB/NLB:
    타겟 그룹별로 LoadBalancer + TargetGroup 차원을 조회하고,
    처음으로 합계가 양수인 타겟 그룹에서 Active로 확정 (이후 타겟 그룹은 조회하지 않음)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from core.config import settings
from shared.aws.metrics.stats import MetricQuery, get_metric_stats, sum_values

from .common import ActivityState, LBKind, ResourceRecord
from .listing import lb_short_id, list_target_groups, region_from_arn, region_from_dns_name

logger = logging.getLogger(__name__)

CLASSIC_NAMESPACE = "AWS/ELB"
APPLICATION_NAMESPACE = "AWS/ApplicationELB"
NETWORK_NAMESPACE = "AWS/NetworkELB"


def classify_values(values: Iterable[float] | None) -> ActivityState:
    """값 합계로 활동 상태 판정"""
    if values is None:
        return ActivityState.INACTIVE
    return ActivityState.ACTIVE if sum(values) > 0 else ActivityState.INACTIVE


def classify_classic(name: str, cloudwatch: Any, days: int) -> ActivityState:
    """CLB 활동 판정

    Args:
        name: LB 이름 (ARN 형태여도 마지막 ':' 뒤 값을 사용)
        cloudwatch: CloudWatch client
        days: 조회 기간 (일)
    """
    query = MetricQuery(
        namespace=CLASSIC_NAMESPACE,
        metric_name=settings.METRIC_NAME,
        dimensions={"LoadBalancerName": name.split(":")[-1]},
    )
    result = get_metric_stats(cloudwatch, query, days)
    return classify_values(result.get("Values", []) if result else None)


def namespace_for(lb_arn: str) -> str | None:
    """LB ARN으로 CloudWatch 네임스페이스 결정 (ALB/NLB 외에는 None)"""
    if "loadbalancer/app/" in lb_arn:
        return APPLICATION_NAMESPACE
    if "loadbalancer/net/" in lb_arn:
        return NETWORK_NAMESPACE
    return None


def classify_v2(lb_arn: str, elbv2: Any, cloudwatch: Any, days: int) -> ActivityState:
    """ALB/NLB 활동 판정

    Args:
        lb_arn: 로드밸런서 ARN
        elbv2: ELBv2 client (타겟 그룹 조회용)
        cloudwatch: CloudWatch client
        days: 조회 기간 (일)

    Returns:
        ActivityState (타겟 그룹이 없으면 Inactive)

    Raises:
        ListingError: 타겟 그룹 조회 실패
    """
    target_groups = list_target_groups(elbv2, lb_arn)
    lb_value = lb_short_id(lb_arn) or ""
    namespace = namespace_for(lb_arn)

    for tg in target_groups:
        if namespace is None:
            logger.debug(f"지원하지 않는 LB 유형, 타겟 그룹 건너뜀: {lb_arn} / {tg.short_id}")
            continue

        query = MetricQuery(
            namespace=namespace,
            metric_name=settings.METRIC_NAME,
            dimensions={"LoadBalancer": lb_value, "TargetGroup": tg.short_id},
        )
        if sum_values(get_metric_stats(cloudwatch, query, days)) > 0:
            return ActivityState.ACTIVE

    return ActivityState.INACTIVE


def classify_load_balancer(
    kind: LBKind,
    description: dict[str, Any],
    clients: dict[str, Any],
    days: int,
    region: str,
) -> ResourceRecord:
    """describe_load_balancers 항목 하나를 분류하여 레코드 생성

    Args:
        kind: LB 종류
        description: LoadBalancerDescriptions / LoadBalancers 항목
        clients: {"elb" | "elbv2": client, "cloudwatch": client}
        days: 조회 기간 (일)
        region: 스캔 중인 리전 (식별자에서 리전을 얻지 못할 때 사용)

    Returns:
        ResourceRecord
    """
    if kind is LBKind.CLASSIC:
        identifier = description.get("LoadBalancerName", "")
        logger.info(f"CLB 분류 중: {identifier}")
        state = classify_classic(identifier, clients["cloudwatch"], days)
        record_region = region_from_dns_name(description.get("DNSName", "")) or region
        vpc_id = description.get("VPCId", "")
    else:
        identifier = description.get("LoadBalancerArn", "")
        logger.info(f"ELBv2 분류 중: {identifier}")
        state = classify_v2(identifier, clients["elbv2"], clients["cloudwatch"], days)
        record_region = region_from_arn(identifier) or region
        vpc_id = description.get("VpcId", "")

    return ResourceRecord(
        identifier=identifier,
        kind=kind,
        region=record_region,
        vpc_id=vpc_id or "",
        state=state,
    )
