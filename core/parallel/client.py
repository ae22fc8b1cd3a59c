"""
core/parallel/client.py - boto3 client 생성 헬퍼

타임아웃과 연결 풀이 설정된 boto3 client를 생성합니다.
스윕은 실패를 재시도하지 않으므로(목록 조회는 즉시 실패, 메트릭 조회는 Inactive 처리)
botocore 재시도도 기본으로 끕니다 (max_attempts=1).

Example:
    from core.parallel.client import get_client

    elb = get_client(session, "elb", region_name="us-east-1")
    page = elb.describe_load_balancers()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, cast

from botocore.config import Config

if TYPE_CHECKING:
    import boto3

RetryMode = Literal["legacy", "standard", "adaptive"]

# 1 = 최초 시도만 (재시도 없음)
DEFAULT_MAX_ATTEMPTS = 1
DEFAULT_RETRY_MODE: RetryMode = "standard"
DEFAULT_CONNECT_TIMEOUT = 10  # 초
DEFAULT_READ_TIMEOUT = 30  # 초
DEFAULT_MAX_POOL_CONNECTIONS = 25  # 분류 풀 크기(20) 이상


def get_client(
    session: boto3.Session,
    service_name: str,
    region_name: str | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_mode: RetryMode = DEFAULT_RETRY_MODE,
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT,
    read_timeout: int = DEFAULT_READ_TIMEOUT,
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS,
    **kwargs: Any,
) -> Any:
    """boto3 client 생성

    Args:
        session: boto3 Session
        service_name: AWS 서비스 이름 (elb, elbv2, cloudwatch, sts)
        region_name: 리전 (None이면 세션 기본값)
        max_attempts: 최대 시도 횟수 (기본: 1, 재시도 없음)
        retry_mode: 재시도 모드
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
        max_pool_connections: HTTP 연결 풀 크기 (리전 분류 풀 크기 이상 권장)
        **kwargs: session.client()에 전달할 추가 인자

    Returns:
        boto3 client
    """
    config = Config(
        retries={"max_attempts": max_attempts, "mode": retry_mode},  # pyright: ignore[reportArgumentType]
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
        max_pool_connections=max_pool_connections,
    )

    if "config" in kwargs:
        existing = kwargs.pop("config")
        config = config.merge(existing)

    # boto3-stubs는 Literal 서비스명을 요구하므로 Any로 캐스팅
    return session.client(  # pyright: ignore[reportCallIssue]
        cast(Any, service_name),
        region_name=region_name,
        config=config,
        **kwargs,
    )
