"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹과 테스트 헬퍼를 제공합니다.

Usage:
    def test_something(fake_context, metric_result):
        # fake_context: client(service, region)가 MagicMock을 돌려주는 AccountContext 대역
        # metric_result: GetMetricData 결과 항목 생성 헬퍼
        pass
"""

import os
import sys
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
from unittest.mock import MagicMock, patch

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment():
    """테스트 환경 설정"""
    # 테스트용 환경 변수 설정
    os.environ.setdefault("AWS_DEFAULT_REGION", "ap-northeast-2")
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

    yield


# =============================================================================
# AWS 모킹 픽스처
# =============================================================================


@pytest.fixture
def mock_boto3_session():
    """boto3.Session 모킹"""
    with patch("boto3.Session") as mock_session_class:
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        # 기본 클라이언트 설정
        mock_session.client.return_value = MagicMock()
        mock_session.region_name = "ap-northeast-2"

        yield mock_session


@pytest.fixture
def mock_sts_client():
    """STS 클라이언트 모킹 (1시간 뒤 만료)"""
    mock_client = MagicMock()

    mock_client.assume_role.return_value = {
        "Credentials": {
            "AccessKeyId": "ASIATEST123",
            "SecretAccessKey": "test-secret",
            "SessionToken": "test-token",
            "Expiration": datetime.now(timezone.utc) + timedelta(hours=1),
        },
        "AssumedRoleUser": {
            "AssumedRoleId": "AROATEST123:lbsweep",
            "Arn": "arn:aws:sts::111122223333:assumed-role/LbSweeper/lbsweep",
        },
    }

    yield mock_client


class FakeContext:
    """테스트용 AccountContext 대역

    client(service, region)는 (서비스, 리전) 또는 서비스 키로 등록된 MagicMock을 반환합니다.
    등록되지 않은 서비스는 새 MagicMock을 만들어 기억합니다.
    """

    def __init__(self, account_id: str = "111122223333", clients: Optional[Dict[Any, Any]] = None):
        self.account_id = account_id
        self.clients: Dict[Any, Any] = dict(clients or {})
        self.requests: List[tuple] = []

    def client(self, service_name: str, region: str) -> Any:
        self.requests.append((service_name, region))
        if (service_name, region) in self.clients:
            return self.clients[(service_name, region)]
        if service_name not in self.clients:
            self.clients[service_name] = MagicMock()
        return self.clients[service_name]


@pytest.fixture
def fake_context():
    """테스트용 AccountContext 대역"""
    return FakeContext()


class FakeBroker:
    """checkout이 미리 준비한 FakeContext를 빌려주는 CredentialBroker 대역

    contexts는 AccountTarget.label을 키로 사용합니다.
    failing에 포함된 역할 ARN은 checkout 시 CredentialError를 발생시킵니다.
    """

    def __init__(self, contexts: Dict[str, Any], failing: Any = ()):
        self.contexts = contexts
        self.failing = set(failing)
        self.checked_out: List[str] = []

    @contextmanager
    def checkout(self, target: Any) -> Iterator[Any]:
        from core.exceptions import CredentialError

        if target.role_arn in self.failing:
            raise CredentialError(target.role_arn, "AssumeRole 실패")
        self.checked_out.append(target.label)
        yield self.contexts[target.label]


@pytest.fixture
def metric_result():
    """GetMetricData 결과 항목 생성 헬퍼"""

    def _make(values: List[float]) -> Dict[str, Any]:
        return {"Id": "m1", "Label": "HealthyHostCount", "Values": list(values), "StatusCode": "Complete"}

    return _make


# =============================================================================
# 유틸리티 함수
# =============================================================================


def metric_response(values: Optional[List[float]]) -> Dict[str, Any]:
    """get_metric_data 응답 생성 헬퍼 (None이면 결과 없음)"""
    if values is None:
        return {"MetricDataResults": []}
    return {"MetricDataResults": [{"Id": "m1", "Values": list(values), "StatusCode": "Complete"}]}


def classic_description(name: str, region: str = "us-east-1", vpc_id: str = "vpc-1") -> Dict[str, Any]:
    """describe_load_balancers(elb) 항목 생성 헬퍼"""
    return {
        "LoadBalancerName": name,
        "DNSName": f"{name}-1234567890.{region}.elb.amazonaws.com",
        "VPCId": vpc_id,
    }


def v2_arn(name: str, lb_type: str = "app", region: str = "us-east-1", suffix: str = "50dc6c495c0c9188") -> str:
    return f"arn:aws:elasticloadbalancing:{region}:111122223333:loadbalancer/{lb_type}/{name}/{suffix}"


def tg_arn(name: str, region: str = "us-east-1", suffix: str = "73e2d6bc24d8a067") -> str:
    return f"arn:aws:elasticloadbalancing:{region}:111122223333:targetgroup/{name}/{suffix}"


def v2_description(name: str, lb_type: str = "app", region: str = "us-east-1", vpc_id: str = "vpc-1") -> Dict[str, Any]:
    """describe_load_balancers(elbv2) 항목 생성 헬퍼"""
    return {
        "LoadBalancerArn": v2_arn(name, lb_type, region),
        "LoadBalancerName": name,
        "VpcId": vpc_id,
        "Type": "application" if lb_type == "app" else "network",
    }


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    operation_name: str = "TestOperation",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    return ClientError(
        {
            "Error": {
                "Code": error_code,
                "Message": error_message,
            }
        },
        operation_name,
    )


# =============================================================================
# moto 통합
# =============================================================================


@pytest.fixture
def aws_credentials(monkeypatch):
    """moto 사용 시 AWS 자격 증명 설정"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def moto_aws(aws_credentials):
    """moto를 사용한 AWS 모킹"""
    from moto import mock_aws

    with mock_aws():
        yield
