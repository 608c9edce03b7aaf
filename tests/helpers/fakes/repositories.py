"""In-memory stand-ins for the MongoDB repositories.

They follow the same contracts as the real repositories: conditional
creates, conditional status moves, newest-first paging.
"""

import copy
import dataclasses
from datetime import datetime, timezone
from typing import Any

from suiteflow.domain.catalog import TestCaseDefinition, TestSuiteDefinition
from suiteflow.domain.enums import EXECUTION_ACTIVE, ExecutionStatus, HistoryIndex, allowed_predecessors
from suiteflow.domain.execution import (
    DomainExecution,
    ExecutionAlreadyExistsError,
    ExecutionStoreError,
    HistoryCursor,
    StepResult,
    SuiteExecutionAggregate,
)


class FakeExecutionRepository:
    def __init__(self) -> None:
        self.executions: dict[str, DomainExecution] = {}
        self.suite_aggregates: dict[str, SuiteExecutionAggregate] = {}
        self.create_calls = 0
        # Raise ExecutionStoreError on the n-th create (1-based)
        self.fail_create_at: int | None = None
        self.fail_reads = False
        self.fail_upsert = False

    async def create_execution(self, execution: DomainExecution) -> DomainExecution:
        self.create_calls += 1
        if self.fail_create_at is not None and self.create_calls == self.fail_create_at:
            raise ExecutionStoreError("create", "simulated outage")
        if execution.execution_id in self.executions:
            raise ExecutionAlreadyExistsError(execution.execution_id)
        self.executions[execution.execution_id] = copy.deepcopy(execution)
        return copy.deepcopy(execution)

    async def get_execution(self, execution_id: str) -> DomainExecution | None:
        if self.fail_reads:
            raise ExecutionStoreError("get", "simulated outage")
        execution = self.executions.get(execution_id)
        return copy.deepcopy(execution) if execution else None

    async def query_by_index(
        self,
        index: HistoryIndex,
        key: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int = 50,
        after: HistoryCursor | None = None,
    ) -> tuple[list[DomainExecution], HistoryCursor | None]:
        matches = [e for e in self.executions.values() if getattr(e, str(index)) == key]
        if start_date:
            matches = [e for e in matches if e.created_at >= start_date]
        if end_date:
            matches = [e for e in matches if e.created_at <= end_date]
        matches.sort(key=lambda e: (e.created_at, e.execution_id), reverse=True)
        if after:
            matches = [e for e in matches if (e.created_at, e.execution_id) < (after.created_at, after.execution_id)]

        page = matches[:limit]
        next_cursor = None
        if len(matches) > limit:
            last = page[-1]
            next_cursor = HistoryCursor(created_at=last.created_at, execution_id=last.execution_id)
        return [copy.deepcopy(e) for e in page], next_cursor

    async def get_suite_children(self, suite_execution_id: str) -> list[DomainExecution]:
        if self.fail_reads:
            raise ExecutionStoreError("query", "simulated outage")
        children = [e for e in self.executions.values() if e.suite_execution_id == suite_execution_id]
        children.sort(key=lambda e: (e.created_at, e.execution_id))
        return [copy.deepcopy(e) for e in children]

    async def transition_status(
        self,
        execution_id: str,
        target: ExecutionStatus,
        fields: dict[str, Any] | None = None,
    ) -> DomainExecution | None:
        current = self.executions.get(execution_id)
        if current is None or current.status not in allowed_predecessors(target):
            return None
        updated = dataclasses.replace(
            current, status=target, updated_at=datetime.now(timezone.utc), **(fields or {})
        )
        self.executions[execution_id] = updated
        return copy.deepcopy(updated)

    async def append_step(self, execution_id: str, step: StepResult) -> DomainExecution | None:
        current = self.executions.get(execution_id)
        if current is None or current.status not in EXECUTION_ACTIVE:
            return None
        current.steps.append(copy.deepcopy(step))
        if step.screenshot:
            current.screenshots.append(step.screenshot)
        current.updated_at = datetime.now(timezone.utc)
        return copy.deepcopy(current)

    async def upsert_suite_aggregate(self, aggregate: SuiteExecutionAggregate) -> None:
        if self.fail_upsert:
            raise ExecutionStoreError("upsert", "simulated outage")
        self.suite_aggregates[aggregate.suite_execution_id] = copy.deepcopy(aggregate)


class FakeCatalogRepository:
    def __init__(self) -> None:
        self.test_cases: dict[str, TestCaseDefinition] = {}
        self.test_suites: dict[str, TestSuiteDefinition] = {}

    def add_test_case(self, test_case: TestCaseDefinition) -> TestCaseDefinition:
        self.test_cases[test_case.test_case_id] = test_case
        return test_case

    def add_test_suite(self, suite: TestSuiteDefinition) -> TestSuiteDefinition:
        self.test_suites[suite.test_suite_id] = suite
        return suite

    async def get_test_case(self, test_case_id: str) -> TestCaseDefinition | None:
        return self.test_cases.get(test_case_id)

    async def get_test_suite(self, test_suite_id: str) -> TestSuiteDefinition | None:
        return self.test_suites.get(test_suite_id)

    async def get_suite_members(self, test_suite_id: str) -> list[TestCaseDefinition]:
        # Insertion order stands in for created_at ordering.
        return [tc for tc in self.test_cases.values() if tc.test_suite_id == test_suite_id]
