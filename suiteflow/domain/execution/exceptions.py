from suiteflow.domain.enums.execution import ExecutionStatus, FanOutOutcome
from suiteflow.domain.exceptions import (
    ConflictError,
    InfrastructureError,
    InvalidStateError,
    NotFoundError,
)
from suiteflow.domain.execution.models import MemberOutcome


class ExecutionNotFoundError(NotFoundError):
    """Raised when execution is not found."""

    def __init__(self, execution_id: str) -> None:
        super().__init__("Execution", execution_id)


class SuiteExecutionNotFoundError(NotFoundError):
    """Raised when no child executions exist for a suite execution id."""

    def __init__(self, suite_execution_id: str) -> None:
        super().__init__("Suite execution", suite_execution_id)


class ExecutionAlreadyExistsError(ConflictError):
    """Raised when a create hits an existing execution id."""

    def __init__(self, execution_id: str) -> None:
        self.execution_id = execution_id
        super().__init__(f"Execution '{execution_id}' already exists")


class InvalidStatusTransitionError(InvalidStateError):
    def __init__(self, execution_id: str, current: ExecutionStatus, target: ExecutionStatus) -> None:
        self.execution_id = execution_id
        self.current = current
        self.target = target
        super().__init__(f"Execution '{execution_id}' cannot move from {current} to {target}")


class ExecutionStoreError(InfrastructureError):
    """Raised when the execution store call fails."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        super().__init__(f"Execution store {operation} failed: {reason}")


class WorkQueuePublishError(InfrastructureError):
    """Raised when publishing to the work queue fails."""

    def __init__(self, execution_id: str, reason: str) -> None:
        self.execution_id = execution_id
        super().__init__(f"Failed to enqueue execution {execution_id}: {reason}")


class SuiteFanOutError(InfrastructureError):
    """Raised when a suite trigger stops partway through its members.

    Members created before the failure are kept; ``outcomes`` lists every
    member that was attempted.
    """

    def __init__(
        self,
        suite_execution_id: str,
        outcomes: list[MemberOutcome],
        intended: int,
        reason: str,
    ) -> None:
        self.suite_execution_id = suite_execution_id
        self.outcomes = outcomes
        self.intended = intended
        self.created = sum(1 for o in outcomes if o.outcome == FanOutOutcome.CREATED)
        super().__init__(
            f"Suite execution {suite_execution_id} created {self.created} of {intended} executions: {reason}"
        )
