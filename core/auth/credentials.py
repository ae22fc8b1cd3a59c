"""
core/auth/credentials.py - 역할 위임 자격 증명

계정의 위임 역할(IAM Role)을 STS AssumeRole로 교환하여
만료 시각이 있는 임시 자격 증명 스냅샷을 발급합니다.

- AccountCredentials: 불변 자격 증명 스냅샷 (갱신 없음)
- assume_account_role: 계정당 1회 AssumeRole 호출
- account_id_from_role_arn: 역할 ARN에서 계정 ID 추출

실패는 재시도하지 않고 CredentialError로 즉시 전파되어 해당 계정 스캔을 중단합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.config import settings
from core.exceptions import CredentialError
from core.parallel.client import get_client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountCredentials:
    """임시 자격 증명 스냅샷

    Attributes:
        access_key_id: 액세스 키 ID
        secret_access_key: 시크릿 키
        session_token: 세션 토큰
        expires_at: 만료 시각 (UTC)
    """

    access_key_id: str
    secret_access_key: str = field(repr=False)
    session_token: str = field(repr=False)
    expires_at: datetime

    def is_expired(self, buffer_seconds: int = 0, now: datetime | None = None) -> bool:
        """만료 여부 확인

        Args:
            buffer_seconds: 만료 전 버퍼 시간 (초)
            now: 기준 시각 (테스트용, 기본 현재 UTC)
        """
        current = now or datetime.now(timezone.utc)
        return current >= self.expires_at - timedelta(seconds=buffer_seconds)

    def remaining_seconds(self) -> int:
        """만료까지 남은 초 (만료되었으면 0)"""
        remaining = self.expires_at - datetime.now(timezone.utc)
        return max(0, int(remaining.total_seconds()))

    @classmethod
    def from_sts_response(cls, response: dict[str, Any]) -> AccountCredentials:
        """sts.assume_role 응답의 Credentials 블록으로 생성"""
        creds = response["Credentials"]
        return cls(
            access_key_id=creds["AccessKeyId"],
            secret_access_key=creds["SecretAccessKey"],
            session_token=creds["SessionToken"],
            expires_at=_as_utc(creds["Expiration"]),
        )


def _as_utc(value: datetime | str) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def account_id_from_role_arn(role_arn: str) -> str:
    """역할 ARN에서 12자리 계정 ID 추출

    Example:
        account_id_from_role_arn("arn:aws:iam::111122223333:role/LbSweeper")  # "111122223333"

    Raises:
        CredentialError: ARN 형식이 아닌 경우
    """
    parts = role_arn.split(":")
    if len(parts) < 6 or parts[0] != "arn" or parts[2] != "iam" or not parts[4].isdigit():
        raise CredentialError(role_arn, "역할 ARN 형식이 아닙니다")
    return parts[4]


def assume_account_role(
    role_arn: str,
    base_session: boto3.Session | None = None,
    session_name: str | None = None,
    duration_seconds: int | None = None,
) -> AccountCredentials:
    """역할을 위임받아 임시 자격 증명 발급

    Args:
        role_arn: 위임할 역할 ARN
        base_session: STS 호출에 사용할 원본 세션 (None이면 기본 자격 증명 체인)
        session_name: RoleSessionName (기본: settings.ROLE_SESSION_NAME)
        duration_seconds: 세션 유효 시간 (기본: settings.SESSION_DURATION_SECONDS)

    Returns:
        AccountCredentials

    Raises:
        CredentialError: AssumeRole 호출 실패 또는 응답 형식 오류
    """
    try:
        sts = get_client(base_session or boto3.Session(), "sts")
        response = sts.assume_role(
            RoleArn=role_arn,
            RoleSessionName=session_name or settings.ROLE_SESSION_NAME,
            DurationSeconds=duration_seconds or settings.SESSION_DURATION_SECONDS,
        )
    except (ClientError, BotoCoreError) as e:
        raise CredentialError(role_arn, "AssumeRole 실패", cause=e) from e

    try:
        credentials = AccountCredentials.from_sts_response(response)
    except (KeyError, TypeError, ValueError) as e:
        raise CredentialError(role_arn, "AssumeRole 응답 형식 오류", cause=e) from e

    logger.info(f"역할 위임 완료: {role_arn} (만료까지 {credentials.remaining_seconds()}초)")
    return credentials
