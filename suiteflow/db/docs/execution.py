from datetime import datetime, timezone
from typing import Any

from beanie import Document, Indexed
from pydantic import BaseModel, ConfigDict, Field
from pymongo import DESCENDING, IndexModel

from suiteflow.domain.enums.execution import ExecutionResult, ExecutionStatus, StepStatus


class StepResultModel(BaseModel):
    """Step outcome (embedded document)."""

    step_index: int
    action: str
    status: StepStatus
    duration: int = 0
    error_message: str | None = None
    screenshot: str | None = None
    details: dict[str, Any] | None = None

    model_config = ConfigDict(from_attributes=True)


class ExecutionMetadataModel(BaseModel):
    triggered_by: str
    environment: str | None = None
    browser_version: str | None = None

    model_config = ConfigDict(from_attributes=True)


def _history_index(field: str) -> IndexModel:
    # Newest-first paging walks (created_at, execution_id) descending within one key.
    return IndexModel(
        [(field, 1), ("created_at", DESCENDING), ("execution_id", DESCENDING)],
        name=f"{field}_history",
        partialFilterExpression={field: {"$type": "string"}},
    )


class ExecutionDocument(Document):
    """Execution document as stored in database."""

    execution_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    project_id: str
    test_case_id: str
    test_suite_id: str | None = None
    suite_execution_id: str | None = None
    status: ExecutionStatus = ExecutionStatus.QUEUED
    result: ExecutionResult | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration: int | None = None
    steps: list[StepResultModel] = Field(default_factory=list)
    screenshots: list[str] = Field(default_factory=list)
    error_message: str | None = None
    metadata: ExecutionMetadataModel
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    class Settings:
        name = "executions"
        use_state_management = True
        indexes = [
            IndexModel([("status", 1)]),
            _history_index("project_id"),
            _history_index("test_case_id"),
            _history_index("test_suite_id"),
            _history_index("suite_execution_id"),
        ]


class SuiteStatsModel(BaseModel):
    total: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    duration: int = 0

    model_config = ConfigDict(from_attributes=True)


class SuiteExecutionDocument(Document):
    """Cached suite aggregate, rewritten after child completions.

    Never read back by the aggregation path; children are the source of truth.
    """

    suite_execution_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    test_suite_id: str | None = None
    status: ExecutionStatus
    result: ExecutionResult | None = None
    stats: SuiteStatsModel = Field(default_factory=SuiteStatsModel)
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration: int | None = None
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True)

    class Settings:
        name = "suite_executions"
        use_state_management = True
