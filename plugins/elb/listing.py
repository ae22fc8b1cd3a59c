"""
plugins/elb/listing.py - 로드밸런서 목록 조회

리전의 로드밸런서 전체 목록(Marker 페이지네이션)과
ELBv2 로드밸런서에 연결된 타겟 그룹을 조회합니다.

목록 조회 실패는 부분 결과 없이 ListingError로 즉시 실패하며 재시도하지 않습니다.
"""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from core.exceptions import ListingError

from .common import LBKind, TargetGroupRef

logger = logging.getLogger(__name__)

# 종류별 describe_load_balancers 응답의 목록 키
_RESPONSE_KEYS = {
    LBKind.CLASSIC: "LoadBalancerDescriptions",
    LBKind.V2: "LoadBalancers",
}


def _client_region(client: Any) -> str:
    meta = getattr(client, "meta", None)
    return getattr(meta, "region_name", None) or ""


def list_load_balancers(client: Any, kind: LBKind) -> list[dict[str, Any]]:
    """리전의 로드밸런서 전체 목록

    Marker로 다음 페이지를 요청하며, 응답에 NextMarker가 없으면 종료합니다.
    첫 요청에는 Marker를 보내지 않고, 페이지당 정확히 한 번 호출합니다.

    Args:
        client: elb 또는 elbv2 client
        kind: LB 종류

    Returns:
        LoadBalancerDescriptions(CLB) / LoadBalancers(v2) 항목 목록

    Raises:
        ListingError: API 호출 실패
    """
    key = _RESPONSE_KEYS[kind]
    load_balancers: list[dict[str, Any]] = []
    marker: str | None = None
    pages = 0

    while True:
        params = {"Marker": marker} if marker else {}
        try:
            response = client.describe_load_balancers(**params)
        except ClientError as e:
            raise ListingError.from_client_error(kind.service_name, "DescribeLoadBalancers", _client_region(client), e) from e
        except BotoCoreError as e:
            raise ListingError(
                kind.service_name,
                "DescribeLoadBalancers",
                region=_client_region(client),
                error_message=str(e),
                cause=e,
            ) from e

        pages += 1
        load_balancers.extend(response.get(key, []))
        marker = response.get("NextMarker")
        if not marker:
            break

    logger.debug(f"[{_client_region(client)}/{kind}] {len(load_balancers)}개 로드밸런서 ({pages}페이지)")
    return load_balancers


def list_target_groups(elbv2_client: Any, lb_arn: str) -> list[TargetGroupRef]:
    """로드밸런서에 연결된 타겟 그룹 (단일 호출, 응답 순서 유지)

    Raises:
        ListingError: API 호출 실패
    """
    try:
        response = elbv2_client.describe_target_groups(LoadBalancerArn=lb_arn)
    except ClientError as e:
        raise ListingError.from_client_error("elbv2", "DescribeTargetGroups", _client_region(elbv2_client), e) from e
    except BotoCoreError as e:
        raise ListingError(
            "elbv2",
            "DescribeTargetGroups",
            region=_client_region(elbv2_client),
            error_message=str(e),
            cause=e,
        ) from e

    refs: list[TargetGroupRef] = []
    for tg in response.get("TargetGroups", []):
        tg_arn = tg.get("TargetGroupArn", "")
        short_id = target_group_short_id(tg_arn)
        if short_id is None:
            logger.debug(f"타겟 그룹 ARN 형식 오류로 건너뜀: {tg_arn}")
            continue
        refs.append(TargetGroupRef(arn=tg_arn, short_id=short_id))
    return refs


# =============================================================================
# 식별자 헬퍼
# =============================================================================


def lb_short_id(arn: str) -> str | None:
    """LB ARN에서 CloudWatch LoadBalancer 차원 값 추출

    Example:
        "arn:aws:elasticloadbalancing:us-east-1:123456789012:loadbalancer/app/web/50dc6c495c0c9188"
        → "app/web/50dc6c495c0c9188"
    """
    parts = arn.split(":")
    if len(parts) < 6:
        return None
    return "/".join(parts[5].split("/")[1:])


def target_group_short_id(arn: str) -> str | None:
    """타겟 그룹 ARN에서 CloudWatch TargetGroup 차원 값 추출

    Example:
        "arn:aws:elasticloadbalancing:us-east-1:123456789012:targetgroup/web-tg/73e2d6bc24d8a067"
        → "targetgroup/web-tg/73e2d6bc24d8a067"
    """
    parts = arn.split(":")
    if len(parts) < 6:
        return None
    return parts[5]


def region_from_arn(arn: str) -> str | None:
    parts = arn.split(":")
    if len(parts) < 4 or not parts[3]:
        return None
    return parts[3]


def region_from_dns_name(dns_name: str) -> str | None:
    """CLB DNS 이름에서 리전 추출 (<name>.<region>.elb.amazonaws.com)"""
    parts = dns_name.split(".")
    if len(parts) <= 2:
        return None
    return parts[1]
