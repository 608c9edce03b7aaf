from suiteflow.core.metrics.base import BaseMetrics
from suiteflow.core.metrics.execution import ExecutionMetrics

__all__ = [
    "BaseMetrics",
    "ExecutionMetrics",
]
