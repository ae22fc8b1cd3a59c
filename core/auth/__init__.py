"""
core/auth - 계정 자격 증명 관리

계정마다 위임 역할을 한 번 AssumeRole하여 만료 시각이 있는 스냅샷을 만들고,
해당 계정 스캔 동안만 유효한 컨텍스트로 빌려줍니다.

사용 예시:
    from core.auth import AccountTarget, CredentialBroker

    broker = CredentialBroker()
    target = AccountTarget(role_arn="arn:aws:iam::111122223333:role/LbSweeper", regions=["us-east-1"])
    with broker.checkout(target) as ctx:
        elb = ctx.client("elb", "us-east-1")
"""

from .credentials import AccountCredentials, account_id_from_role_arn, assume_account_role
from .session import AccountContext, AccountTarget, CredentialBroker

__all__: list[str] = [
    "AccountCredentials",
    "AccountContext",
    "AccountTarget",
    "CredentialBroker",
    "account_id_from_role_arn",
    "assume_account_role",
]
