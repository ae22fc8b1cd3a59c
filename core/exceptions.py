"""
core/exceptions.py - 통합 예외 계층 구조

스윕 실행 전체에서 사용되는 예외 클래스들을 정의합니다.
복구 가능한 실패(메트릭 조회, 개별 삭제)와 구조적 실패(설정, 자격 증명, 목록 조회)를
타입으로 구분하여 호출자(CLI, 테스트)가 실패 유형을 판단할 수 있게 합니다.

예외 계층 구조:
    SweepError (베이스)
    ├── ConfigError (설정 파일/옵션) - 스캔 시작 전 중단
    ├── CredentialError (역할 위임) - 해당 계정 스캔 중단
    │   └── CredentialExpiredError (만료된 자격 증명 사용)
    ├── ListingError (페이지네이션 목록 조회) - 해당 리전 스캔 중단
    ├── MetricQueryError (CloudWatch 조회) - 로컬 복구, Inactive로 처리
    └── DeletionError (삭제 호출) - DeletionOutcome 실패로 기록

Usage:
    from core.exceptions import ListingError

    try:
        response = elb.describe_load_balancers()
    except ClientError as e:
        raise ListingError.from_client_error("elb", "describe_load_balancers", region, e) from e
"""

from datetime import datetime
from typing import Any, Dict, Optional

# =============================================================================
# 베이스 예외
# =============================================================================


class SweepError(Exception):
    """스윕 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


# =============================================================================
# 설정 관련 예외
# =============================================================================


class ConfigError(SweepError):
    """설정 관련 예외

    설정 파일을 읽을 수 없거나 형식/값이 잘못된 경우 발생합니다.
    """

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


# =============================================================================
# 자격 증명 관련 예외
# =============================================================================


class CredentialError(SweepError):
    """역할 위임(AssumeRole) 및 자격 증명 사용 관련 예외

    해당 계정의 스캔 전체를 중단시킵니다. 재시도하지 않습니다.
    """

    def __init__(
        self,
        role_arn: Optional[str],
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"자격 증명 오류 [{role_arn or 'ambient'}]: {message}"
        super().__init__(full_message, cause)
        self.role_arn = role_arn
        self.details["role_arn"] = role_arn


class CredentialExpiredError(CredentialError):
    """만료 시각이 지난 자격 증명으로 API를 호출하려 한 경우"""

    def __init__(
        self,
        role_arn: Optional[str],
        expired_at: datetime,
        operation: Optional[str] = None,
    ):
        message = f"자격 증명이 만료되었습니다 (expires_at={expired_at.isoformat()})"
        if operation:
            message = f"{message} - {operation} 호출 거부"
        super().__init__(role_arn, message)
        self.expired_at = expired_at
        self.operation = operation
        self.details["expired_at"] = expired_at.isoformat()


# =============================================================================
# AWS API 호출 관련 예외
# =============================================================================


class ListingError(SweepError):
    """페이지네이션 목록 조회 실패

    boto3/botocore 에러를 래핑합니다. 해당 리전 스캔은 부분 결과 없이 실패합니다.
    """

    def __init__(
        self,
        service: str,
        operation: str,
        region: Optional[str] = None,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        message = f"{service}.{operation}"
        if region:
            message = f"{message} [{region}]"
        if error_code:
            message = f"{message} 실패 ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.service = service
        self.operation = operation
        self.region = region
        self.error_code = error_code
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "region": region,
                "error_code": error_code,
            }
        )

    @classmethod
    def from_client_error(
        cls,
        service: str,
        operation: str,
        region: Optional[str],
        client_error: Exception,
    ) -> "ListingError":
        """botocore 예외로부터 생성

        Args:
            service: AWS 서비스 이름
            operation: API 작업 이름
            region: 조회 대상 리전
            client_error: ClientError 또는 BotoCoreError

        Returns:
            ListingError 인스턴스
        """
        error_code = None
        error_message = None

        if hasattr(client_error, "response"):
            error_info = client_error.response.get("Error", {})
            error_code = error_info.get("Code")
            error_message = error_info.get("Message")

        return cls(
            service=service,
            operation=operation,
            region=region,
            error_code=error_code,
            error_message=error_message,
            cause=client_error,
        )


class MetricQueryError(SweepError):
    """CloudWatch 메트릭 조회 실패

    호출자에게 전파되지 않고 로그만 남긴 뒤 Inactive로 처리됩니다.
    """

    def __init__(
        self,
        namespace: str,
        metric_name: str,
        cause: Optional[Exception] = None,
    ):
        super().__init__(f"메트릭 조회 실패 [{namespace}/{metric_name}]", cause)
        self.namespace = namespace
        self.metric_name = metric_name
        self.details.update({"namespace": namespace, "metric_name": metric_name})


class DeletionError(SweepError):
    """로드밸런서 삭제 호출 실패"""

    def __init__(
        self,
        identifier: str,
        cause: Optional[Exception] = None,
    ):
        super().__init__(f"삭제 실패 [{identifier}]", cause)
        self.identifier = identifier
        self.details["identifier"] = identifier


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def _error_code_of(error: Exception) -> str:
    if isinstance(error, ListingError):
        return error.error_code or ""
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return response.get("Error", {}).get("Code", "")
    return ""


def is_access_denied(error: Exception) -> bool:
    """액세스 거부 오류인지 확인"""
    return _error_code_of(error) in (
        "AccessDenied",
        "AccessDeniedException",
        "UnauthorizedAccess",
        "UnauthorizedOperation",
    )


def is_throttling(error: Exception) -> bool:
    """스로틀링 오류인지 확인"""
    return _error_code_of(error) in {
        "Throttling",
        "ThrottlingException",
        "RequestLimitExceeded",
        "TooManyRequestsException",
        "RateExceeded",
    }


def is_not_found(error: Exception) -> bool:
    """리소스를 찾을 수 없는 오류인지 확인"""
    return _error_code_of(error) in {
        "LoadBalancerNotFound",
        "AccessPointNotFound",
        "TargetGroupNotFound",
        "ResourceNotFoundException",
    }


def is_expired_token(error: Exception) -> bool:
    """만료된 토큰 오류인지 확인

    로컬에서 감지한 CredentialExpiredError와 AWS가 반환한 ExpiredToken 모두 포함합니다.
    """
    if isinstance(error, CredentialExpiredError):
        return True
    return _error_code_of(error) in ("ExpiredToken", "ExpiredTokenException", "RequestExpired")


def format_error_for_user(error: Exception) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    if isinstance(error, SweepError):
        return str(error)

    response = getattr(error, "response", None)
    if isinstance(response, dict):
        error_info = response.get("Error", {})
        code = error_info.get("Code", "UnknownError")
        message = error_info.get("Message", str(error))

        friendly_messages = {
            "AccessDenied": "권한이 없습니다. IAM 정책을 확인하세요.",
            "ExpiredToken": "인증 토큰이 만료되었습니다. 다시 실행하세요.",
            "InvalidClientTokenId": "잘못된 자격 증명입니다.",
            "Throttling": "요청이 너무 많습니다. 잠시 후 다시 시도하세요.",
        }

        return friendly_messages.get(code, f"{code}: {message}")

    return str(error)
