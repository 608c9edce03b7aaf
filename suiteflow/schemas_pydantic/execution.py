from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from suiteflow.domain.enums import ExecutionResult, ExecutionStatus, FanOutOutcome, StepStatus


class CamelModel(BaseModel):
    """API models are camelCase on the wire and accept snake_case internally."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TriggerRequest(CamelModel):
    """Trigger one test case or one suite; exactly one id is accepted."""

    test_case_id: str | None = None
    test_suite_id: str | None = None
    environment: str | None = None
    browser_version: str | None = None


class MemberOutcomeSchema(CamelModel):
    test_case_id: str
    outcome: FanOutOutcome
    execution_id: str | None = None
    error: str | None = None


class TriggerResponse(CamelModel):
    status: ExecutionStatus = ExecutionStatus.QUEUED
    execution_id: str | None = None
    suite_execution_id: str | None = None
    test_case_execution_ids: list[str] | None = None
    outcomes: list[MemberOutcomeSchema] | None = None


class StepResultSchema(CamelModel):
    step_index: int = Field(..., ge=0)
    action: str
    status: StepStatus
    duration: int = Field(default=0, ge=0, description="Step duration in milliseconds")
    error_message: str | None = None
    screenshot: str | None = Field(default=None, description="Artifact key of the step screenshot")
    details: dict[str, Any] | None = None


class ExecutionMetadataSchema(CamelModel):
    triggered_by: str
    environment: str | None = None
    browser_version: str | None = None


class ExecutionResponse(CamelModel):
    execution_id: str
    project_id: str
    test_case_id: str
    test_suite_id: str | None = None
    suite_execution_id: str | None = None
    status: ExecutionStatus
    result: ExecutionResult | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration: int | None = None
    steps: list[StepResultSchema] = Field(default_factory=list)
    screenshots: list[str] = Field(default_factory=list)
    error_message: str | None = None
    metadata: ExecutionMetadataSchema
    created_at: datetime
    updated_at: datetime


class ExecutionStatusResponse(CamelModel):
    execution_id: str
    status: ExecutionStatus
    result: ExecutionResult | None = None
    current_step: int | None = None
    total_steps: int
    start_time: datetime | None = None
    duration: int | None = None


class ExecutionResultsResponse(CamelModel):
    execution: ExecutionResponse
    screenshot_urls: list[str] = Field(default_factory=list)


class SuiteStatsSchema(CamelModel):
    total: int
    passed: int
    failed: int
    errors: int
    duration: int


class SuiteExecutionResultsResponse(CamelModel):
    suite_execution_id: str
    suite_id: str | None = Field(default=None, validation_alias="test_suite_id", serialization_alias="suiteId")
    status: ExecutionStatus
    result: ExecutionResult | None = None
    stats: SuiteStatsSchema
    start_time: datetime | None = None
    end_time: datetime | None = None
    duration: int | None = None
    test_case_executions: list[ExecutionResponse] = Field(
        default_factory=list, validation_alias="executions", serialization_alias="testCaseExecutions"
    )


class ExecutionHistoryResponse(CamelModel):
    executions: list[ExecutionResponse]
    next_cursor: str | None = None
    count: int


class CompleteExecutionRequest(CamelModel):
    status: ExecutionStatus
    result: ExecutionResult | None = None
    error_message: str | None = None
    end_time: datetime | None = None
