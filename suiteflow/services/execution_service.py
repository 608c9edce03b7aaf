from datetime import datetime, timezone
from typing import Any, NoReturn
from uuid import uuid4

import structlog

from suiteflow.core.metrics import ExecutionMetrics
from suiteflow.core.utils import as_utc
from suiteflow.db.repositories import CatalogRepository, ExecutionRepository
from suiteflow.domain.catalog import (
    EmptySuiteError,
    TestCaseDefinition,
    TestCaseNotFoundError,
    TestSuiteNotFoundError,
)
from suiteflow.domain.enums import ExecutionResult, ExecutionStatus, FanOutOutcome
from suiteflow.domain.exceptions import DomainError, InvalidStateError, ValidationError
from suiteflow.domain.execution import (
    DomainExecution,
    ExecutionMetadata,
    ExecutionNotFoundError,
    ExecutionResults,
    ExecutionStatusView,
    InvalidStatusTransitionError,
    MemberOutcome,
    StepResult,
    SuiteFanOutError,
    SuiteTriggerResult,
    TriggerResult,
    WorkQueuePublishError,
)
from suiteflow.events import ExecutionMessage, ExecutionMessageMetadata, ExecutionQueue, TestCasePayload
from suiteflow.services.artifacts import ArtifactResolver
from suiteflow.services.suite_aggregation import SuiteAggregationService
from suiteflow.settings import Settings


def _elapsed_ms(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() * 1000)


class ExecutionService:
    """
    Execution lifecycle: triggering, worker callbacks and read views.

    Records are written before their work item is published; a publish that
    fails afterwards leaves the record queued and surfaces the error.
    """

    def __init__(
        self,
        execution_repo: ExecutionRepository,
        catalog_repo: CatalogRepository,
        queue: ExecutionQueue,
        artifact_resolver: ArtifactResolver,
        suite_aggregation: SuiteAggregationService,
        metrics: ExecutionMetrics,
        settings: Settings,
        logger: structlog.stdlib.BoundLogger,
    ) -> None:
        self.execution_repo = execution_repo
        self.catalog_repo = catalog_repo
        self.queue = queue
        self.artifact_resolver = artifact_resolver
        self.suite_aggregation = suite_aggregation
        self.metrics = metrics
        self.settings = settings
        self.logger = logger

    async def trigger(
        self,
        triggered_by: str,
        test_case_id: str | None = None,
        test_suite_id: str | None = None,
        environment: str | None = None,
        browser_version: str | None = None,
    ) -> TriggerResult | SuiteTriggerResult:
        """Trigger either one test case or one suite; exactly one id must be given."""
        if bool(test_case_id) == bool(test_suite_id):
            raise ValidationError("Exactly one of testCaseId or testSuiteId is required")
        if test_suite_id:
            return await self.trigger_test_suite(test_suite_id, triggered_by, environment, browser_version)
        return await self.trigger_test_case(str(test_case_id), triggered_by, environment, browser_version)

    async def trigger_test_case(
        self,
        test_case_id: str,
        triggered_by: str,
        environment: str | None = None,
        browser_version: str | None = None,
    ) -> TriggerResult:
        test_case = await self.catalog_repo.get_test_case(test_case_id)
        if not test_case:
            raise TestCaseNotFoundError(test_case_id)

        metadata = ExecutionMetadata(
            triggered_by=triggered_by, environment=environment, browser_version=browser_version
        )
        execution = await self._create_execution(test_case, metadata)
        await self._enqueue(execution, test_case)

        self.metrics.record_execution_triggered()
        self.logger.info(
            "Test case execution queued",
            execution_id=execution.execution_id,
            test_case_id=test_case_id,
            triggered_by=triggered_by,
        )
        return TriggerResult(execution_id=execution.execution_id, status=execution.status)

    async def trigger_test_suite(
        self,
        test_suite_id: str,
        triggered_by: str,
        environment: str | None = None,
        browser_version: str | None = None,
    ) -> SuiteTriggerResult:
        suite = await self.catalog_repo.get_test_suite(test_suite_id)
        if not suite:
            raise TestSuiteNotFoundError(test_suite_id)

        members = await self.catalog_repo.get_suite_members(test_suite_id)
        if not members:
            raise EmptySuiteError(test_suite_id)
        if len(members) > self.settings.SUITE_MAX_MEMBERS:
            raise ValidationError(
                f"Suite '{test_suite_id}' has {len(members)} test cases; "
                f"at most {self.settings.SUITE_MAX_MEMBERS} can be triggered at once"
            )

        suite_execution_id = str(uuid4())
        metadata = ExecutionMetadata(
            triggered_by=triggered_by, environment=environment, browser_version=browser_version
        )
        outcomes: list[MemberOutcome] = []

        self.logger.info(
            "Fanning out suite execution",
            suite_execution_id=suite_execution_id,
            test_suite_id=test_suite_id,
            members=len(members),
        )

        for test_case in members:
            execution: DomainExecution | None = None
            try:
                execution = await self._create_execution(
                    test_case, metadata, test_suite_id=test_suite_id, suite_execution_id=suite_execution_id
                )
                await self._enqueue(execution, test_case)
            except DomainError as e:
                outcomes.append(
                    MemberOutcome(
                        test_case_id=test_case.test_case_id,
                        outcome=FanOutOutcome.FAILED,
                        execution_id=execution.execution_id if execution else None,
                        error=e.message,
                    )
                )
                error = SuiteFanOutError(suite_execution_id, outcomes, intended=len(members), reason=e.message)
                self.metrics.record_fan_out_failure(error.created, error.intended)
                self.logger.error(
                    "Suite fan-out aborted",
                    suite_execution_id=suite_execution_id,
                    test_case_id=test_case.test_case_id,
                    created=error.created,
                    intended=error.intended,
                    error=e.message,
                )
                raise error from e

            outcomes.append(
                MemberOutcome(
                    test_case_id=test_case.test_case_id,
                    outcome=FanOutOutcome.CREATED,
                    execution_id=execution.execution_id,
                )
            )

        self.metrics.record_suite_triggered(len(members))
        self.logger.info(
            "Suite execution queued", suite_execution_id=suite_execution_id, executions=len(outcomes)
        )
        return SuiteTriggerResult(
            suite_execution_id=suite_execution_id,
            test_case_execution_ids=[o.execution_id for o in outcomes if o.execution_id],
            outcomes=outcomes,
            status=ExecutionStatus.QUEUED,
        )

    async def get_status(self, execution_id: str) -> ExecutionStatusView:
        execution = await self._require_execution(execution_id)

        current_step = None
        if execution.status == ExecutionStatus.RUNNING:
            # Every recorded step carries a final per-step status.
            current_step = len(execution.steps)

        duration = None
        if execution.end_time is not None:
            duration = execution.duration
        elif execution.start_time is not None:
            duration = _elapsed_ms(execution.start_time, datetime.now(timezone.utc))

        return ExecutionStatusView(
            execution_id=execution.execution_id,
            status=execution.status,
            result=execution.result,
            current_step=current_step,
            total_steps=len(execution.steps),
            start_time=execution.start_time,
            duration=duration,
        )

    async def get_results(self, execution_id: str) -> ExecutionResults:
        execution = await self._require_execution(execution_id)

        screenshot_urls: list[str] = []
        for key in execution.screenshots:
            try:
                screenshot_urls.append(await self.artifact_resolver.resolve(key))
            except Exception as e:
                self.metrics.record_artifact_resolution_failure()
                self.logger.warning(
                    "Failed to resolve screenshot", execution_id=execution_id, key=key, error=str(e), exc_info=True
                )

        return ExecutionResults(execution=execution, screenshot_urls=screenshot_urls)

    async def start_execution(self, execution_id: str) -> DomainExecution:
        """Worker picked the item up: queued -> running."""
        updated = await self.execution_repo.transition_status(execution_id, ExecutionStatus.RUNNING)
        if updated is None:
            await self._raise_rejected_transition(execution_id, ExecutionStatus.RUNNING)
        return updated

    async def record_step(self, execution_id: str, step: StepResult) -> DomainExecution:
        updated = await self.execution_repo.append_step(execution_id, step)
        if updated is None:
            current = await self._require_execution(execution_id)
            raise InvalidStateError(
                f"Cannot record steps for execution '{execution_id}' in status {current.status}"
            )
        self.logger.debug(
            "Recorded step", execution_id=execution_id, step_index=step.step_index, status=step.status
        )
        return updated

    async def complete_execution(
        self,
        execution_id: str,
        status: ExecutionStatus,
        result: ExecutionResult | None = None,
        error_message: str | None = None,
        end_time: datetime | None = None,
    ) -> DomainExecution:
        """Terminal write from the worker, then a best-effort suite aggregate refresh."""
        if not status.is_terminal:
            raise ValidationError(f"Completion status must be terminal, got {status}")
        if result is None:
            if status != ExecutionStatus.ERROR:
                raise ValidationError("result is required when completing an execution")
            result = ExecutionResult.ERROR

        current = await self._require_execution(execution_id)
        end_time = as_utc(end_time) if end_time else datetime.now(timezone.utc)
        duration = None
        if current.start_time:
            start_time = as_utc(current.start_time)
            if end_time < start_time:
                raise ValidationError(
                    f"endTime {end_time.isoformat()} is before startTime {start_time.isoformat()}"
                )
            duration = _elapsed_ms(start_time, end_time)

        fields: dict[str, Any] = {
            "result": result,
            "end_time": end_time,
            "duration": duration,
        }
        if error_message is not None:
            fields["error_message"] = error_message

        updated = await self.execution_repo.transition_status(execution_id, status, fields)
        if updated is None:
            await self._raise_rejected_transition(execution_id, status)

        self.metrics.record_execution_completed(status, result, duration)
        self.logger.info(
            "Execution finished", execution_id=execution_id, status=status, result=result, duration=duration
        )

        if updated.suite_execution_id:
            await self.suite_aggregation.refresh_suite_aggregate(updated.suite_execution_id)
        return updated

    async def _create_execution(
        self,
        test_case: TestCaseDefinition,
        metadata: ExecutionMetadata,
        test_suite_id: str | None = None,
        suite_execution_id: str | None = None,
    ) -> DomainExecution:
        execution = DomainExecution(
            project_id=test_case.project_id,
            test_case_id=test_case.test_case_id,
            test_suite_id=test_suite_id,
            suite_execution_id=suite_execution_id,
            metadata=metadata,
            status=ExecutionStatus.QUEUED,
            start_time=datetime.now(timezone.utc),
        )
        return await self.execution_repo.create_execution(execution)

    async def _enqueue(self, execution: DomainExecution, test_case: TestCaseDefinition) -> None:
        message = ExecutionMessage(
            execution_id=execution.execution_id,
            test_case_id=execution.test_case_id,
            project_id=execution.project_id,
            test_suite_id=execution.test_suite_id,
            suite_execution_id=execution.suite_execution_id,
            test_case=TestCasePayload.model_validate(test_case),
            metadata=ExecutionMessageMetadata.model_validate(execution.metadata),
        )
        try:
            await self.queue.publish(message)
        except WorkQueuePublishError:
            self.metrics.record_queue_publish_failure()
            raise

    async def _require_execution(self, execution_id: str) -> DomainExecution:
        execution = await self.execution_repo.get_execution(execution_id)
        if not execution:
            raise ExecutionNotFoundError(execution_id)
        return execution

    async def _raise_rejected_transition(self, execution_id: str, target: ExecutionStatus) -> NoReturn:
        current = await self._require_execution(execution_id)
        self.logger.warning(
            "Rejected status change", execution_id=execution_id, current=current.status, target=target
        )
        raise InvalidStatusTransitionError(execution_id, current.status, target)
