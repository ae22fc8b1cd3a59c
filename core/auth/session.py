"""
core/auth/session.py - 계정 스캔 자격 증명 컨텍스트

CredentialBroker가 계정 하나의 스캔 동안만 유효한 AccountContext를 빌려줍니다.

- checkout 블록 밖에서는 컨텍스트로 만든 client가 요청을 보내지 못합니다.
- 모든 client에 before-call 훅이 설치되어, 스냅샷이 만료된 뒤의 API 호출은
  네트워크로 나가기 전에 CredentialExpiredError로 실패합니다.
- 자격 증명은 갱신하지 않습니다 (만료 = 해당 작업 실패).

Example:
    broker = CredentialBroker()
    with broker.checkout(AccountTarget(role_arn="arn:aws:iam::111122223333:role/LbSweeper")) as ctx:
        elb = ctx.client("elb", "us-east-1")
        elb.describe_load_balancers()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import boto3

from core.exceptions import CredentialError, CredentialExpiredError
from core.parallel.client import get_client

from .credentials import AccountCredentials, account_id_from_role_arn, assume_account_role

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT_ID = "default"


@dataclass
class AccountTarget:
    """스캔 대상 계정

    Attributes:
        role_arn: 위임할 역할 ARN (None이면 현재 프로파일 자격 증명 사용)
        regions: 스캔할 리전 목록
        vpc_ids: 포함할 VPC ID 목록 (빈 목록 = 전체)
        profile_name: 원본 자격 증명 프로파일 (None이면 기본 체인)
    """

    role_arn: str | None = None
    regions: list[str] = field(default_factory=list)
    vpc_ids: list[str] = field(default_factory=list)
    profile_name: str | None = None

    @property
    def label(self) -> str:
        """로깅/보고용 계정 표시명"""
        if self.role_arn:
            parts = self.role_arn.split(":")
            return parts[4] if len(parts) > 4 and parts[4] else self.role_arn
        return self.profile_name or DEFAULT_ACCOUNT_ID


class AccountContext:
    """계정 하나의 스캔 동안 유효한 자격 증명 컨텍스트

    client()는 호출마다 새 boto3 Session을 만들어 스레드 간 Session 공유를 피합니다.
    생성된 client 자체는 스레드 세이프하므로 리전 분류 풀에서 공유할 수 있습니다.

    Attributes:
        account_id: 계정 ID (역할 미지정 시 프로파일명 또는 "default")
        role_arn: 위임 역할 ARN
        credentials: 임시 자격 증명 스냅샷 (역할 미지정 시 None)
        profile_name: 역할 미지정 시 사용할 프로파일
    """

    def __init__(
        self,
        account_id: str,
        role_arn: str | None = None,
        credentials: AccountCredentials | None = None,
        profile_name: str | None = None,
    ):
        self.account_id = account_id
        self.role_arn = role_arn
        self.credentials = credentials
        self.profile_name = profile_name
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def close(self) -> None:
        """컨텍스트 반납. 이후 이 컨텍스트의 client는 요청을 보낼 수 없습니다."""
        with self._lock:
            self._closed = True

    def session(self, region: str | None = None) -> boto3.Session:
        """새 boto3 Session 생성

        Raises:
            CredentialError: 이미 반납된 컨텍스트
        """
        self._ensure_open()
        if self.credentials is None:
            return boto3.Session(profile_name=self.profile_name, region_name=region)
        return boto3.Session(
            aws_access_key_id=self.credentials.access_key_id,
            aws_secret_access_key=self.credentials.secret_access_key,
            aws_session_token=self.credentials.session_token,
            region_name=region,
        )

    def client(self, service_name: str, region: str) -> Any:
        """만료 검사 훅이 설치된 boto3 client 생성

        Args:
            service_name: elb, elbv2, cloudwatch
            region: 리전

        Returns:
            boto3 client (재시도 없음)
        """
        client = get_client(self.session(region), service_name, region_name=region)
        client.meta.events.register("before-call", self._make_guard())
        return client

    def _ensure_open(self) -> None:
        if self.closed:
            raise CredentialError(self.role_arn or self.account_id, "반납된 자격 증명 컨텍스트입니다")

    def _make_guard(self) -> Callable[..., None]:
        def _guard(model: Any = None, **kwargs: Any) -> None:
            self._ensure_open()
            if self.credentials is not None and self.credentials.is_expired():
                raise CredentialExpiredError(
                    self.role_arn or self.account_id,
                    self.credentials.expires_at,
                    operation=getattr(model, "name", None),
                )

        return _guard

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"AccountContext(account_id={self.account_id!r}, {state})"


class CredentialBroker:
    """계정별 자격 증명 컨텍스트 발급자

    Args:
        profile_name: AssumeRole 호출에 사용할 원본 프로파일 (None이면 기본 체인)
        session_factory: 원본 Session 생성 함수 (테스트용)
    """

    def __init__(
        self,
        profile_name: str | None = None,
        session_factory: Callable[[], boto3.Session] | None = None,
    ):
        self.profile_name = profile_name
        self._session_factory = session_factory or (lambda: boto3.Session(profile_name=self.profile_name))

    @contextmanager
    def checkout(self, target: AccountTarget) -> Iterator[AccountContext]:
        """계정 스캔용 컨텍스트 대여

        역할이 지정되면 AssumeRole을 한 번 호출해 스냅샷을 만들고,
        없으면 현재 프로파일 자격 증명을 그대로 사용합니다.
        블록을 벗어나면 컨텍스트는 반납(close)됩니다.

        Raises:
            CredentialError: 역할 ARN 형식 오류 또는 AssumeRole 실패
        """
        profile_name = target.profile_name or self.profile_name
        if target.role_arn:
            account_id = account_id_from_role_arn(target.role_arn)
            credentials = assume_account_role(target.role_arn, self._session_factory())
            context = AccountContext(account_id, role_arn=target.role_arn, credentials=credentials)
        else:
            account_id = profile_name or DEFAULT_ACCOUNT_ID
            context = AccountContext(account_id, profile_name=profile_name)

        logger.debug(f"자격 증명 컨텍스트 대여: {account_id}")
        try:
            yield context
        finally:
            context.close()
            logger.debug(f"자격 증명 컨텍스트 반납: {account_id}")
