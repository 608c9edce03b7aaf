from suiteflow.core.utils import StringEnum


class ExecutionStatus(StringEnum):
    """Lifecycle status of an execution."""

    _terminal: bool

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = ("completed", True)
    ERROR = ("error", True)

    def __new__(cls, value: str, terminal: bool = False) -> "ExecutionStatus":
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj._terminal = terminal
        return obj

    @property
    def is_terminal(self) -> bool:
        return self._terminal


EXECUTION_TERMINAL = frozenset(s for s in ExecutionStatus if s.is_terminal)
EXECUTION_ACTIVE = frozenset(s for s in ExecutionStatus if not s.is_terminal)

# Allowed predecessor -> successor moves. Terminal states have no successors.
STATUS_TRANSITIONS: dict[ExecutionStatus, frozenset[ExecutionStatus]] = {
    ExecutionStatus.QUEUED: frozenset({ExecutionStatus.RUNNING, ExecutionStatus.ERROR}),
    ExecutionStatus.RUNNING: frozenset({ExecutionStatus.COMPLETED, ExecutionStatus.ERROR}),
    ExecutionStatus.COMPLETED: frozenset(),
    ExecutionStatus.ERROR: frozenset(),
}


def allowed_predecessors(target: ExecutionStatus) -> frozenset[ExecutionStatus]:
    """Statuses from which ``target`` may be reached."""
    return frozenset(src for src, targets in STATUS_TRANSITIONS.items() if target in targets)


class ExecutionResult(StringEnum):
    """Terminal outcome of an execution."""

    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"


class StepStatus(StringEnum):
    """Outcome of a single test step."""

    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"


class HistoryIndex(StringEnum):
    """Secondary access paths over executions, highest priority first."""

    SUITE_EXECUTION = "suite_execution_id"
    TEST_SUITE = "test_suite_id"
    TEST_CASE = "test_case_id"
    PROJECT = "project_id"


HISTORY_INDEX_PRIORITY: tuple[HistoryIndex, ...] = (
    HistoryIndex.SUITE_EXECUTION,
    HistoryIndex.TEST_SUITE,
    HistoryIndex.TEST_CASE,
    HistoryIndex.PROJECT,
)


class FanOutOutcome(StringEnum):
    """Per-member outcome of a suite fan-out."""

    CREATED = "created"
    FAILED = "failed"
