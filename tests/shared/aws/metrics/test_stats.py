"""
tests/shared/aws/metrics/test_stats.py - CloudWatch 단일 메트릭 조회 테스트
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import EndpointConnectionError

from conftest import create_mock_client_error, metric_response
from core.exceptions import CredentialExpiredError
from shared.aws.metrics.stats import MetricQuery, MetricWindow, get_metric_stats, sum_values

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def classic_query():
    return MetricQuery(
        namespace="AWS/ELB",
        metric_name="HealthyHostCount",
        dimensions={"LoadBalancerName": "legacy-web"},
    )


class TestMetricWindow:
    """MetricWindow 테스트"""

    def test_last_days(self):
        window = MetricWindow.last_days(45, now=NOW)

        assert window.end == NOW
        assert window.start == NOW - timedelta(days=45)
        assert window.period == 60
        assert window.stat == "Minimum"


class TestMetricQuery:
    """MetricQuery 테스트"""

    def test_to_request_keeps_dimension_order(self):
        query = MetricQuery(
            namespace="AWS/ApplicationELB",
            metric_name="HealthyHostCount",
            dimensions={"LoadBalancer": "app/web/abc", "TargetGroup": "targetgroup/tg/def"},
        )

        request = query.to_request(MetricWindow.last_days(1, now=NOW))

        assert request["Id"] == "m1"
        assert request["MetricStat"]["Period"] == 60
        assert request["MetricStat"]["Stat"] == "Minimum"
        assert request["MetricStat"]["Metric"]["Dimensions"] == [
            {"Name": "LoadBalancer", "Value": "app/web/abc"},
            {"Name": "TargetGroup", "Value": "targetgroup/tg/def"},
        ]


class TestGetMetricStats:
    """get_metric_stats 테스트"""

    def test_returns_first_result(self, classic_query):
        cloudwatch = MagicMock()
        cloudwatch.get_metric_data.return_value = metric_response([1.0, 2.0])

        result = get_metric_stats(cloudwatch, classic_query, days=45, now=NOW)

        assert result["Values"] == [1.0, 2.0]
        kwargs = cloudwatch.get_metric_data.call_args.kwargs
        assert kwargs["StartTime"] == NOW - timedelta(days=45)
        assert kwargs["EndTime"] == NOW
        assert len(kwargs["MetricDataQueries"]) == 1

    def test_empty_results(self, classic_query):
        cloudwatch = MagicMock()
        cloudwatch.get_metric_data.return_value = metric_response(None)

        assert get_metric_stats(cloudwatch, classic_query, days=45) is None

    def test_client_error_returns_none(self, classic_query, caplog):
        """API 오류는 경고 로그 후 None"""
        cloudwatch = MagicMock()
        cloudwatch.get_metric_data.side_effect = create_mock_client_error("Throttling", "Rate exceeded")

        with caplog.at_level("WARNING"):
            assert get_metric_stats(cloudwatch, classic_query, days=45) is None

        assert "AWS/ELB/HealthyHostCount" in caplog.text

    def test_connection_error_returns_none(self, classic_query):
        cloudwatch = MagicMock()
        cloudwatch.get_metric_data.side_effect = EndpointConnectionError(endpoint_url="https://monitoring")

        assert get_metric_stats(cloudwatch, classic_query, days=45) is None

    def test_credential_expiry_propagates(self, classic_query):
        """자격 증명 만료는 메트릭 실패로 삼키지 않음"""
        cloudwatch = MagicMock()
        cloudwatch.get_metric_data.side_effect = CredentialExpiredError("arn:aws:iam::1:role/R", NOW)

        with pytest.raises(CredentialExpiredError):
            get_metric_stats(cloudwatch, classic_query, days=45)


class TestSumValues:
    def test_sum(self):
        assert sum_values({"Values": [0.0, 1.5, 2.5]}) == 4.0

    def test_none_and_empty(self):
        assert sum_values(None) == 0.0
        assert sum_values({"Values": []}) == 0.0
