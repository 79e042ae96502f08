"""
Aggregator Module
Concurrent fan-out and progress reporting
"""
from .fan_out import FanOutExecutor
from .metrics import DataGroupType, MetricCallbacks, RichProgressMetrics

__all__ = [
    "FanOutExecutor",
    "DataGroupType",
    "MetricCallbacks",
    "RichProgressMetrics",
]
