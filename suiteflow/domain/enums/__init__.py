from suiteflow.domain.enums.execution import (
    EXECUTION_ACTIVE,
    EXECUTION_TERMINAL,
    HISTORY_INDEX_PRIORITY,
    STATUS_TRANSITIONS,
    ExecutionResult,
    ExecutionStatus,
    FanOutOutcome,
    HistoryIndex,
    StepStatus,
    allowed_predecessors,
)

__all__ = [
    "EXECUTION_ACTIVE",
    "EXECUTION_TERMINAL",
    "HISTORY_INDEX_PRIORITY",
    "STATUS_TRANSITIONS",
    "ExecutionResult",
    "ExecutionStatus",
    "FanOutOutcome",
    "HistoryIndex",
    "StepStatus",
    "allowed_predecessors",
]
