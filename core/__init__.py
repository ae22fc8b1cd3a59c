# core/__init__.py
"""
core - lbsweep 인프라

계정 자격 증명, 병렬 처리, 설정, 예외 계층을 포함하는 최상위 패키지입니다.
LB 종류별 스캔 로직은 plugins/elb, 출력은 shared/io, CLI는 cli/ 에 있습니다.

아키텍처:
    core/
    ├── auth/           # 역할 위임 자격 증명 컨텍스트
    ├── parallel/       # 병렬 처리 (executor, governor, collector)
    ├── config.py       # 중앙 설정 및 설정 문서 로더
    └── exceptions.py   # 통합 예외 계층

Usage:
    # 설정 사용
    from core.config import settings, load_app_config
    days = settings.DEFAULT_LOOKBACK_DAYS  # 45

    # 예외 처리
    from core.exceptions import ListingError, is_access_denied
    try:
        page = elb.describe_load_balancers()
    except ClientError as e:
        if is_access_denied(e):
            print("권한이 없습니다")

    # 자격 증명
    from core.auth import AccountTarget, CredentialBroker
    with CredentialBroker().checkout(AccountTarget(role_arn=role_arn)) as ctx:
        elb = ctx.client("elb", "us-east-1")
"""

from core import config, exceptions, parallel, auth  # noqa: I001

__all__: list[str] = [
    # 서브패키지
    "auth",
    "parallel",
    # 모듈
    "config",
    "exceptions",
]
