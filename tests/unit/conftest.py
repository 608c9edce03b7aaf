from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import structlog

from suiteflow.core.metrics import ExecutionMetrics
from suiteflow.domain.catalog import TestCaseDefinition, TestSuiteDefinition
from suiteflow.domain.enums import ExecutionResult, ExecutionStatus
from suiteflow.domain.execution import DomainExecution, ExecutionMetadata
from suiteflow.services.execution_service import ExecutionService
from suiteflow.services.history_service import ExecutionHistoryService
from suiteflow.services.suite_aggregation import SuiteAggregationService
from suiteflow.settings import Settings

from tests.helpers.fakes import (
    FakeArtifactResolver,
    FakeCatalogRepository,
    FakeExecutionQueue,
    FakeExecutionRepository,
)

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


def make_domain_execution(
    *,
    execution_id: str = "exec-1",
    status: ExecutionStatus = ExecutionStatus.QUEUED,
    result: ExecutionResult | None = None,
    project_id: str = "proj-1",
    test_case_id: str = "tc-1",
    test_suite_id: str | None = None,
    suite_execution_id: str | None = None,
    start_time: datetime | None = T0,
    end_time: datetime | None = None,
    duration: int | None = None,
    created_at: datetime = T0,
    **kwargs: Any,
) -> DomainExecution:
    return DomainExecution(
        execution_id=execution_id,
        project_id=project_id,
        test_case_id=test_case_id,
        test_suite_id=test_suite_id,
        suite_execution_id=suite_execution_id,
        status=status,
        result=result,
        start_time=start_time,
        end_time=end_time,
        duration=duration,
        metadata=ExecutionMetadata(triggered_by="user-1"),
        created_at=created_at,
        updated_at=created_at,
        **kwargs,
    )


def make_test_case(
    test_case_id: str = "tc-1", project_id: str = "proj-1", test_suite_id: str | None = None
) -> TestCaseDefinition:
    return TestCaseDefinition(
        test_case_id=test_case_id,
        project_id=project_id,
        name=f"Test {test_case_id}",
        test_suite_id=test_suite_id,
        steps=[{"action": "navigate", "target": "https://example.test"}],
    )


def make_test_suite(test_suite_id: str = "suite-1", project_id: str = "proj-1") -> TestSuiteDefinition:
    return TestSuiteDefinition(test_suite_id=test_suite_id, project_id=project_id, name=f"Suite {test_suite_id}")


@pytest.fixture
def execution_metrics(test_settings: Settings) -> ExecutionMetrics:
    return ExecutionMetrics(test_settings)


@pytest.fixture
def execution_repo() -> FakeExecutionRepository:
    return FakeExecutionRepository()


@pytest.fixture
def catalog_repo() -> FakeCatalogRepository:
    return FakeCatalogRepository()


@pytest.fixture
def queue() -> FakeExecutionQueue:
    return FakeExecutionQueue()


@pytest.fixture
def resolver() -> FakeArtifactResolver:
    return FakeArtifactResolver()


@pytest.fixture
def aggregation_service(execution_repo: FakeExecutionRepository) -> SuiteAggregationService:
    return SuiteAggregationService(execution_repo, structlog.get_logger("test"))  # type: ignore[arg-type]


@pytest.fixture
def history_service(execution_repo: FakeExecutionRepository, test_settings: Settings) -> ExecutionHistoryService:
    return ExecutionHistoryService(execution_repo, test_settings, structlog.get_logger("test"))  # type: ignore[arg-type]


@pytest.fixture
def execution_service(
    execution_repo: FakeExecutionRepository,
    catalog_repo: FakeCatalogRepository,
    queue: FakeExecutionQueue,
    resolver: FakeArtifactResolver,
    aggregation_service: SuiteAggregationService,
    execution_metrics: ExecutionMetrics,
    test_settings: Settings,
) -> ExecutionService:
    return ExecutionService(
        execution_repo=execution_repo,  # type: ignore[arg-type]
        catalog_repo=catalog_repo,  # type: ignore[arg-type]
        queue=queue,
        artifact_resolver=resolver,
        suite_aggregation=aggregation_service,
        metrics=execution_metrics,
        settings=test_settings,
        logger=structlog.get_logger("test"),
    )
