from collections.abc import Sequence

import structlog

from suiteflow.db.repositories import ExecutionRepository
from suiteflow.domain.enums import ExecutionResult, ExecutionStatus
from suiteflow.domain.execution import (
    DomainExecution,
    ExecutionStoreError,
    SuiteExecutionAggregate,
    SuiteExecutionNotFoundError,
    SuiteStats,
    SuiteTiming,
)


def calculate_suite_stats(executions: Sequence[DomainExecution]) -> SuiteStats:
    """Bucket each child once, checked in the order pass, fail, error."""
    stats = SuiteStats(total=len(executions))
    for execution in executions:
        if execution.result == ExecutionResult.PASS:
            stats.passed += 1
        elif execution.result == ExecutionResult.FAIL:
            stats.failed += 1
        elif execution.result == ExecutionResult.ERROR or execution.status == ExecutionStatus.ERROR:
            stats.errors += 1
        stats.duration += execution.duration or 0
    return stats


def determine_suite_status(executions: Sequence[DomainExecution]) -> ExecutionStatus:
    """Any unfinished child keeps the suite running; once all are terminal, one error makes it an error."""
    if any(not e.status.is_terminal for e in executions):
        return ExecutionStatus.RUNNING
    if any(e.status == ExecutionStatus.ERROR for e in executions):
        return ExecutionStatus.ERROR
    return ExecutionStatus.COMPLETED


def determine_suite_result(status: ExecutionStatus, stats: SuiteStats) -> ExecutionResult | None:
    if status == ExecutionStatus.COMPLETED:
        if stats.failed > 0 or stats.errors > 0:
            return ExecutionResult.FAIL
        return ExecutionResult.PASS
    if status == ExecutionStatus.ERROR:
        return ExecutionResult.ERROR
    return None


def calculate_suite_timing(executions: Sequence[DomainExecution]) -> SuiteTiming:
    if not executions:
        return SuiteTiming()

    starts = [e.start_time for e in executions if e.start_time is not None]
    ends = [e.end_time for e in executions if e.end_time is not None]

    start_time = min(starts) if starts else executions[0].start_time
    end_time = max(ends) if ends else None

    duration = None
    if start_time is not None and end_time is not None:
        duration = int((end_time - start_time).total_seconds() * 1000)
    return SuiteTiming(start_time=start_time, end_time=end_time, duration=duration)


def aggregate_suite(suite_execution_id: str, executions: Sequence[DomainExecution]) -> SuiteExecutionAggregate:
    """Pure fan-in over a suite's children; the same input always yields the same aggregate."""
    stats = calculate_suite_stats(executions)
    status = determine_suite_status(executions)
    timing = calculate_suite_timing(executions)
    return SuiteExecutionAggregate(
        suite_execution_id=suite_execution_id,
        test_suite_id=executions[0].test_suite_id if executions else None,
        status=status,
        result=determine_suite_result(status, stats),
        stats=stats,
        start_time=timing.start_time,
        end_time=timing.end_time,
        duration=timing.duration,
        executions=list(executions),
    )


class SuiteAggregationService:
    def __init__(self, execution_repo: ExecutionRepository, logger: structlog.stdlib.BoundLogger) -> None:
        self.execution_repo = execution_repo
        self.logger = logger

    async def get_suite_results(self, suite_execution_id: str) -> SuiteExecutionAggregate:
        children = await self.execution_repo.get_suite_children(suite_execution_id)
        if not children:
            raise SuiteExecutionNotFoundError(suite_execution_id)

        aggregate = aggregate_suite(suite_execution_id, children)
        self.logger.debug(
            "Computed suite aggregate",
            suite_execution_id=suite_execution_id,
            status=aggregate.status,
            total=aggregate.stats.total,
        )
        return aggregate

    async def refresh_suite_aggregate(self, suite_execution_id: str) -> SuiteExecutionAggregate | None:
        """Recompute and store the cached aggregate.

        Store failures are logged and dropped; children stay the source of truth.
        """
        try:
            children = await self.execution_repo.get_suite_children(suite_execution_id)
        except ExecutionStoreError as e:
            self.logger.warning("Suite aggregate refresh skipped", suite_execution_id=suite_execution_id, error=str(e))
            return None
        if not children:
            return None

        aggregate = aggregate_suite(suite_execution_id, children)
        try:
            await self.execution_repo.upsert_suite_aggregate(aggregate)
        except ExecutionStoreError as e:
            self.logger.warning(
                "Failed to store suite aggregate", suite_execution_id=suite_execution_id, error=str(e)
            )
        return aggregate
