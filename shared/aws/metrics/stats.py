"""
shared/aws/metrics/stats.py - CloudWatch 단일 메트릭 조회

GetMetricData API로 메트릭 하나의 시계열을 조회합니다.
LB 활동 판정은 조회 실패를 "비활성"으로 간주하므로,
여기서는 API 오류를 예외로 올리지 않고 경고 로그 후 None을 반환합니다.

- 쿼리 ID는 항상 "m1" (요청당 메트릭 1개)
- Period 60초, Stat Minimum (기본값)
- NextToken 페이지네이션과 재시도는 하지 않음 (첫 응답만 사용)

예시:
    query = MetricQuery(
        namespace="AWS/ELB",
        metric_name="HealthyHostCount",
        dimensions={"LoadBalancerName": "my-clb"},
    )
    result = get_metric_stats(cloudwatch, query, days=45)
    total = sum_values(result)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from core.config import settings
from core.exceptions import MetricQueryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricWindow:
    """메트릭 조회 구간

    Attributes:
        start: 조회 시작 시각 (UTC)
        end: 조회 종료 시각 (UTC)
        period: 집계 주기 (초)
        stat: 통계 타입
    """

    start: datetime
    end: datetime
    period: int = settings.METRIC_PERIOD_SECONDS
    stat: str = settings.METRIC_STAT

    @classmethod
    def last_days(cls, days: int, now: datetime | None = None) -> MetricWindow:
        """[now - days, now] 구간 생성"""
        end = now or datetime.now(timezone.utc)
        return cls(start=end - timedelta(days=days), end=end)


@dataclass
class MetricQuery:
    """CloudWatch 메트릭 쿼리 정의

    Attributes:
        namespace: AWS 네임스페이스 (예: "AWS/ApplicationELB")
        metric_name: 메트릭 이름 (예: "HealthyHostCount")
        dimensions: 차원 딕셔너리 (입력 순서 유지)
        id: 쿼리 식별자
    """

    namespace: str
    metric_name: str
    dimensions: dict[str, str] = field(default_factory=dict)
    id: str = "m1"

    def to_request(self, window: MetricWindow) -> dict[str, Any]:
        """MetricDataQueries 항목으로 변환"""
        return {
            "Id": self.id,
            "MetricStat": {
                "Metric": {
                    "Namespace": self.namespace,
                    "MetricName": self.metric_name,
                    "Dimensions": [{"Name": k, "Value": v} for k, v in self.dimensions.items()],
                },
                "Period": window.period,
                "Stat": window.stat,
            },
        }


def get_metric_stats(
    cloudwatch_client: Any,
    query: MetricQuery,
    days: int,
    now: datetime | None = None,
) -> dict[str, Any] | None:
    """메트릭 하나의 최근 days일 시계열 조회

    Args:
        cloudwatch_client: boto3 CloudWatch client
        query: 메트릭 쿼리
        days: 조회 기간 (일)
        now: 기준 시각 (테스트용, 기본 현재 UTC)

    Returns:
        MetricDataResults의 첫 번째 항목. 결과가 없거나 조회에 실패하면 None.

    Note:
        자격 증명 만료(CredentialError)는 메트릭 실패가 아니므로 그대로 전파됩니다.
    """
    window = MetricWindow.last_days(days, now=now)

    try:
        response = cloudwatch_client.get_metric_data(
            MetricDataQueries=[query.to_request(window)],
            StartTime=window.start,
            EndTime=window.end,
        )
    except (ClientError, BotoCoreError) as e:
        error = MetricQueryError(query.namespace, query.metric_name, cause=e)
        logger.warning(f"{error} (dimensions={query.dimensions})")
        return None

    results = response.get("MetricDataResults", [])
    if not results:
        logger.debug(f"메트릭 결과 없음: {query.namespace}/{query.metric_name} {query.dimensions}")
        return None
    first: dict[str, Any] = results[0]
    return first


def sum_values(result: dict[str, Any] | None) -> float:
    """메트릭 결과 Values 합계 (결과가 없으면 0.0)"""
    if not result:
        return 0.0
    return float(sum(result.get("Values", [])))
