from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class TestCasePayload(BaseModel):
    """Full test case definition shipped to the worker."""

    model_config = ConfigDict(from_attributes=True)

    test_case_id: str
    project_id: str
    name: str
    type: str = "ui"
    description: str | None = None
    test_suite_id: str | None = None
    steps: list[dict[str, Any]] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class ExecutionMessageMetadata(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    triggered_by: str
    environment: str | None = None
    browser_version: str | None = None


class ExecutionMessage(BaseModel):
    """Work item consumed by the external test runner.

    One message per execution record; keyed on ``execution_id`` so redeliveries
    of the same item land on the same partition.
    """

    model_config = ConfigDict(from_attributes=True)

    message_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    execution_id: str
    test_case_id: str
    project_id: str
    test_suite_id: str | None = None
    suite_execution_id: str | None = None
    test_case: TestCasePayload
    metadata: ExecutionMessageMetadata
