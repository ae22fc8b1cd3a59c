"""
tests/core/auth/test_auth_credentials.py - 역할 위임과 자격 증명 스냅샷 테스트
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from conftest import create_mock_client_error
from core.auth.credentials import AccountCredentials, account_id_from_role_arn, assume_account_role
from core.exceptions import CredentialError

ROLE_ARN = "arn:aws:iam::111122223333:role/LbSweeper"


def _credentials(expires_at):
    return AccountCredentials(
        access_key_id="ASIATEST",
        secret_access_key="secret",
        session_token="token",
        expires_at=expires_at,
    )


class TestAccountCredentials:
    """AccountCredentials 테스트"""

    def test_not_expired(self):
        creds = _credentials(datetime.now(timezone.utc) + timedelta(hours=1))

        assert creds.is_expired() is False
        assert 3500 < creds.remaining_seconds() <= 3600

    def test_expired(self):
        creds = _credentials(datetime.now(timezone.utc) - timedelta(seconds=1))

        assert creds.is_expired() is True
        assert creds.remaining_seconds() == 0

    def test_expired_with_buffer(self):
        """버퍼 안으로 들어오면 만료로 간주"""
        now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        creds = _credentials(now + timedelta(minutes=3))

        assert creds.is_expired(now=now) is False
        assert creds.is_expired(buffer_seconds=300, now=now) is True

    def test_secrets_not_in_repr(self):
        creds = _credentials(datetime.now(timezone.utc))

        assert "secret" not in repr(creds)
        assert "token" not in repr(creds)

    def test_from_sts_response_datetime(self, mock_sts_client):
        response = mock_sts_client.assume_role.return_value

        creds = AccountCredentials.from_sts_response(response)

        assert creds.access_key_id == "ASIATEST123"
        assert creds.expires_at.tzinfo is not None

    def test_from_sts_response_iso_string(self):
        response = {
            "Credentials": {
                "AccessKeyId": "ASIA",
                "SecretAccessKey": "s",
                "SessionToken": "t",
                "Expiration": "2024-06-01T12:00:00Z",
            }
        }

        creds = AccountCredentials.from_sts_response(response)

        assert creds.expires_at == datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def test_naive_expiration_is_utc(self):
        response = {
            "Credentials": {
                "AccessKeyId": "ASIA",
                "SecretAccessKey": "s",
                "SessionToken": "t",
                "Expiration": datetime(2024, 6, 1, 12, 0),
            }
        }

        creds = AccountCredentials.from_sts_response(response)

        assert creds.expires_at.tzinfo == timezone.utc


class TestAccountIdFromRoleArn:
    """역할 ARN 파싱 테스트"""

    def test_valid(self):
        assert account_id_from_role_arn(ROLE_ARN) == "111122223333"

    @pytest.mark.parametrize(
        "role_arn",
        [
            "LbSweeper",
            "arn:aws:iam::role/LbSweeper",
            "arn:aws:s3:::bucket",
            "arn:aws:iam::not-a-number:role/R",
        ],
    )
    def test_invalid(self, role_arn):
        with pytest.raises(CredentialError):
            account_id_from_role_arn(role_arn)


class TestAssumeAccountRole:
    """assume_account_role 테스트"""

    def _session(self, sts_client):
        session = MagicMock()
        session.client.return_value = sts_client
        return session

    def test_success(self, mock_sts_client):
        session = self._session(mock_sts_client)

        creds = assume_account_role(ROLE_ARN, session)

        assert creds.session_token == "test-token"
        kwargs = mock_sts_client.assume_role.call_args.kwargs
        assert kwargs["RoleArn"] == ROLE_ARN
        assert kwargs["RoleSessionName"] == "lbsweep"
        assert kwargs["DurationSeconds"] == 3600
        assert session.client.call_args.args[0] == "sts"

    def test_custom_session_name(self, mock_sts_client):
        assume_account_role(ROLE_ARN, self._session(mock_sts_client), session_name="nightly", duration_seconds=900)

        kwargs = mock_sts_client.assume_role.call_args.kwargs
        assert kwargs["RoleSessionName"] == "nightly"
        assert kwargs["DurationSeconds"] == 900

    def test_client_error(self, mock_sts_client):
        """AssumeRole 실패는 CredentialError"""
        mock_sts_client.assume_role.side_effect = create_mock_client_error("AccessDenied", "not authorized", "AssumeRole")

        with pytest.raises(CredentialError) as exc_info:
            assume_account_role(ROLE_ARN, self._session(mock_sts_client))

        assert exc_info.value.role_arn == ROLE_ARN
        assert "AccessDenied" in str(exc_info.value)

    def test_malformed_response(self, mock_sts_client):
        mock_sts_client.assume_role.return_value = {"Credentials": {"AccessKeyId": "x"}}

        with pytest.raises(CredentialError, match="응답 형식 오류"):
            assume_account_role(ROLE_ARN, self._session(mock_sts_client))
