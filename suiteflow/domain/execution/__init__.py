from .cursor import HistoryCursor
from .exceptions import (
    ExecutionAlreadyExistsError,
    ExecutionNotFoundError,
    ExecutionStoreError,
    InvalidStatusTransitionError,
    SuiteExecutionNotFoundError,
    SuiteFanOutError,
    WorkQueuePublishError,
)
from .models import (
    DomainExecution,
    ExecutionMetadata,
    ExecutionPage,
    ExecutionResults,
    ExecutionStatusView,
    HistoryQuery,
    MemberOutcome,
    StepResult,
    SuiteExecutionAggregate,
    SuiteStats,
    SuiteTiming,
    SuiteTriggerResult,
    TriggerResult,
    new_execution_id,
    utc_now,
)

__all__ = [
    "DomainExecution",
    "ExecutionAlreadyExistsError",
    "ExecutionMetadata",
    "ExecutionNotFoundError",
    "ExecutionPage",
    "ExecutionResults",
    "ExecutionStatusView",
    "ExecutionStoreError",
    "HistoryCursor",
    "HistoryQuery",
    "InvalidStatusTransitionError",
    "MemberOutcome",
    "StepResult",
    "SuiteExecutionAggregate",
    "SuiteExecutionNotFoundError",
    "SuiteFanOutError",
    "SuiteStats",
    "SuiteTiming",
    "SuiteTriggerResult",
    "TriggerResult",
    "WorkQueuePublishError",
    "new_execution_id",
    "utc_now",
]
