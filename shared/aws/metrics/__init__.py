"""CloudWatch 메트릭 조회."""

from .stats import MetricQuery, MetricWindow, get_metric_stats, sum_values

__all__ = ["MetricQuery", "MetricWindow", "get_metric_stats", "sum_values"]
