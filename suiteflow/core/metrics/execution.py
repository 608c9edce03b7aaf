from suiteflow.core.metrics.base import BaseMetrics
from suiteflow.domain.enums import ExecutionResult, ExecutionStatus


class ExecutionMetrics(BaseMetrics):
    """Metrics for execution triggering, completion and suite fan-out."""

    def _create_instruments(self) -> None:
        self.executions_triggered = self._meter.create_counter(
            name="executions.triggered.total", description="Total number of single test case triggers", unit="1"
        )

        self.suites_triggered = self._meter.create_counter(
            name="suites.triggered.total", description="Total number of suite triggers", unit="1"
        )

        self.suite_size = self._meter.create_histogram(
            name="suite.members", description="Number of test cases fanned out per suite trigger", unit="1"
        )

        self.fan_out_failures = self._meter.create_counter(
            name="suite.fanout.failures.total", description="Suite triggers aborted mid fan-out", unit="1"
        )

        self.queue_publish_failures = self._meter.create_counter(
            name="execution.queue.publish.failures.total",
            description="Failed attempts to enqueue a work item",
            unit="1",
        )

        self.executions_completed = self._meter.create_counter(
            name="executions.completed.total", description="Executions reaching a terminal status", unit="1"
        )

        self.execution_duration = self._meter.create_histogram(
            name="execution.duration", description="Reported execution duration in milliseconds", unit="ms"
        )

        self.artifact_resolution_failures = self._meter.create_counter(
            name="artifact.resolution.failures.total",
            description="Screenshot keys that could not be turned into URLs",
            unit="1",
        )

    def record_execution_triggered(self) -> None:
        self.executions_triggered.add(1)

    def record_suite_triggered(self, member_count: int) -> None:
        self.suites_triggered.add(1)
        self.suite_size.record(member_count, attributes={"outcome": "queued"})

    def record_fan_out_failure(self, created: int, intended: int) -> None:
        self.fan_out_failures.add(1, attributes={"partial": created > 0})
        self.suite_size.record(intended, attributes={"outcome": "aborted"})

    def record_queue_publish_failure(self) -> None:
        self.queue_publish_failures.add(1)

    def record_execution_completed(
        self, status: ExecutionStatus, result: ExecutionResult | None, duration_ms: int | None
    ) -> None:
        self.executions_completed.add(1, attributes={"status": status, "result": result or "none"})
        if duration_ms is not None:
            self.execution_duration.record(duration_ms, attributes={"status": status})

    def record_artifact_resolution_failure(self) -> None:
        self.artifact_resolution_failures.add(1)
