import structlog

from suiteflow.core.utils import as_utc
from suiteflow.db.repositories import ExecutionRepository
from suiteflow.domain.enums import HISTORY_INDEX_PRIORITY, HistoryIndex
from suiteflow.domain.exceptions import ValidationError
from suiteflow.domain.execution import ExecutionPage, HistoryCursor, HistoryQuery
from suiteflow.settings import Settings


def select_index(query: HistoryQuery) -> tuple[HistoryIndex, str]:
    """Pick the most specific access path among the identifiers supplied."""
    for index in HISTORY_INDEX_PRIORITY:
        key = getattr(query, str(index))
        if key:
            return index, key
    raise ValidationError(
        "At least one of projectId, testCaseId, testSuiteId or suiteExecutionId is required"
    )


class ExecutionHistoryService:
    def __init__(
        self,
        execution_repo: ExecutionRepository,
        settings: Settings,
        logger: structlog.stdlib.BoundLogger,
    ) -> None:
        self.execution_repo = execution_repo
        self.settings = settings
        self.logger = logger

    async def query_history(self, query: HistoryQuery) -> ExecutionPage:
        index, key = select_index(query)

        start_date = as_utc(query.start_date) if query.start_date else None
        end_date = as_utc(query.end_date) if query.end_date else None
        if start_date and end_date and start_date > end_date:
            raise ValidationError("startDate must not be after endDate")

        limit = query.limit if query.limit is not None else self.settings.HISTORY_DEFAULT_LIMIT
        if limit < 1:
            raise ValidationError("limit must be at least 1")
        limit = min(limit, self.settings.HISTORY_MAX_LIMIT)

        after = HistoryCursor.decode(query.cursor) if query.cursor else None

        executions, next_key = await self.execution_repo.query_by_index(
            index,
            key,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            after=after,
        )
        self.logger.debug("History query", index=index, key=key, limit=limit, returned=len(executions))
        return ExecutionPage(executions=executions, next_cursor=next_key.encode() if next_key else None)
