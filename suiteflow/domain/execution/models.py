from __future__ import annotations

from dataclasses import field
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from pydantic.dataclasses import dataclass

from suiteflow.domain.enums.execution import (
    ExecutionResult,
    ExecutionStatus,
    FanOutOutcome,
    StepStatus,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_execution_id() -> str:
    return str(uuid4())


@dataclass
class StepResult:
    """Outcome of one executed test step, as reported by a worker."""

    step_index: int
    action: str
    status: StepStatus
    duration: int = 0
    error_message: Optional[str] = None
    screenshot: Optional[str] = None
    details: Optional[dict[str, Any]] = None


@dataclass
class ExecutionMetadata:
    triggered_by: str
    environment: Optional[str] = None
    browser_version: Optional[str] = None


@dataclass
class DomainExecution:
    """One attempt to run one test case."""

    project_id: str
    test_case_id: str
    metadata: ExecutionMetadata
    execution_id: str = field(default_factory=new_execution_id)
    test_suite_id: Optional[str] = None
    suite_execution_id: Optional[str] = None
    status: ExecutionStatus = ExecutionStatus.QUEUED
    result: Optional[ExecutionResult] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    steps: list[StepResult] = field(default_factory=list)
    screenshots: list[str] = field(default_factory=list)
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if self.result is not None and not self.status.is_terminal:
            raise ValueError(f"result '{self.result}' requires a terminal status, got '{self.status}'")


@dataclass
class ExecutionStatusView:
    """Progress snapshot computed at read time; never persisted."""

    execution_id: str
    status: ExecutionStatus
    total_steps: int
    result: Optional[ExecutionResult] = None
    current_step: Optional[int] = None
    start_time: Optional[datetime] = None
    duration: Optional[int] = None


@dataclass
class ExecutionResults:
    execution: DomainExecution
    screenshot_urls: list[str] = field(default_factory=list)


@dataclass
class TriggerResult:
    execution_id: str
    status: ExecutionStatus = ExecutionStatus.QUEUED


@dataclass
class MemberOutcome:
    """Tagged fan-out result for a single suite member."""

    test_case_id: str
    outcome: FanOutOutcome
    execution_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class SuiteTriggerResult:
    suite_execution_id: str
    test_case_execution_ids: list[str]
    outcomes: list[MemberOutcome] = field(default_factory=list)
    status: ExecutionStatus = ExecutionStatus.QUEUED


@dataclass
class SuiteStats:
    total: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    duration: int = 0


@dataclass
class SuiteTiming:
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[int] = None


@dataclass
class SuiteExecutionAggregate:
    """Fan-in view over all children sharing one suite_execution_id."""

    suite_execution_id: str
    status: ExecutionStatus
    stats: SuiteStats
    test_suite_id: Optional[str] = None
    result: Optional[ExecutionResult] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    executions: list[DomainExecution] = field(default_factory=list)


@dataclass
class HistoryQuery:
    project_id: Optional[str] = None
    test_case_id: Optional[str] = None
    test_suite_id: Optional[str] = None
    suite_execution_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: Optional[int] = None
    cursor: Optional[str] = None


@dataclass
class ExecutionPage:
    executions: list[DomainExecution]
    next_cursor: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.executions)
