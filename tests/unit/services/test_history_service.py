from datetime import timedelta, timezone

import pytest

from suiteflow.domain.enums import HistoryIndex
from suiteflow.domain.exceptions import ValidationError
from suiteflow.domain.execution import HistoryQuery
from suiteflow.services.history_service import ExecutionHistoryService, select_index

from tests.helpers.fakes import FakeExecutionRepository
from tests.unit.conftest import at, make_domain_execution

pytestmark = pytest.mark.unit


async def seed(repo: FakeExecutionRepository, count: int, **fields: str) -> None:
    for i in range(count):
        await repo.create_execution(
            make_domain_execution(execution_id=f"exec-{i:03d}", created_at=at(i), **fields)  # type: ignore[arg-type]
        )


class TestSelectIndex:
    def test_suite_execution_wins(self) -> None:
        query = HistoryQuery(project_id="p", test_case_id="tc", test_suite_id="s", suite_execution_id="se")
        assert select_index(query) == (HistoryIndex.SUITE_EXECUTION, "se")

    def test_priority_order(self) -> None:
        assert select_index(HistoryQuery(project_id="p", test_suite_id="s")) == (HistoryIndex.TEST_SUITE, "s")
        assert select_index(HistoryQuery(project_id="p", test_case_id="tc")) == (HistoryIndex.TEST_CASE, "tc")
        assert select_index(HistoryQuery(project_id="p")) == (HistoryIndex.PROJECT, "p")

    def test_no_identifier(self) -> None:
        with pytest.raises(ValidationError):
            select_index(HistoryQuery())


class TestQueryHistory:
    @pytest.mark.asyncio
    async def test_empty_query_is_rejected(self, history_service: ExecutionHistoryService) -> None:
        with pytest.raises(ValidationError):
            await history_service.query_history(HistoryQuery())

    @pytest.mark.asyncio
    async def test_newest_first(
        self, history_service: ExecutionHistoryService, execution_repo: FakeExecutionRepository
    ) -> None:
        await seed(execution_repo, 3)

        page = await history_service.query_history(HistoryQuery(project_id="proj-1"))

        assert [e.execution_id for e in page.executions] == ["exec-002", "exec-001", "exec-000"]
        assert page.count == 3
        assert page.next_cursor is None

    @pytest.mark.asyncio
    async def test_filters_by_selected_index_only(
        self, history_service: ExecutionHistoryService, execution_repo: FakeExecutionRepository
    ) -> None:
        await execution_repo.create_execution(make_domain_execution(execution_id="a", test_case_id="tc-1"))
        await execution_repo.create_execution(make_domain_execution(execution_id="b", test_case_id="tc-2"))

        page = await history_service.query_history(HistoryQuery(project_id="proj-1", test_case_id="tc-2"))

        assert [e.execution_id for e in page.executions] == ["b"]

    @pytest.mark.asyncio
    async def test_date_range_is_inclusive(
        self, history_service: ExecutionHistoryService, execution_repo: FakeExecutionRepository
    ) -> None:
        await seed(execution_repo, 5)

        page = await history_service.query_history(
            HistoryQuery(project_id="proj-1", start_date=at(1), end_date=at(3))
        )

        assert [e.execution_id for e in page.executions] == ["exec-003", "exec-002", "exec-001"]

    @pytest.mark.asyncio
    async def test_inverted_date_range(self, history_service: ExecutionHistoryService) -> None:
        with pytest.raises(ValidationError):
            await history_service.query_history(HistoryQuery(project_id="p", start_date=at(5), end_date=at(1)))

    @pytest.mark.asyncio
    async def test_mixed_naive_and_zoned_bounds(
        self, history_service: ExecutionHistoryService, execution_repo: FakeExecutionRepository
    ) -> None:
        await seed(execution_repo, 5)
        naive_start = at(1).replace(tzinfo=None)
        zoned_end = at(3).astimezone(timezone(timedelta(hours=2)))

        page = await history_service.query_history(
            HistoryQuery(project_id="proj-1", start_date=naive_start, end_date=zoned_end)
        )

        assert [e.execution_id for e in page.executions] == ["exec-003", "exec-002", "exec-001"]

        with pytest.raises(ValidationError):
            await history_service.query_history(
                HistoryQuery(project_id="proj-1", start_date=at(5).replace(tzinfo=None), end_date=zoned_end)
            )

    @pytest.mark.asyncio
    async def test_non_positive_limit(self, history_service: ExecutionHistoryService) -> None:
        with pytest.raises(ValidationError):
            await history_service.query_history(HistoryQuery(project_id="p", limit=0))

    @pytest.mark.asyncio
    async def test_limit_is_clamped(
        self, history_service: ExecutionHistoryService, execution_repo: FakeExecutionRepository
    ) -> None:
        max_limit = history_service.settings.HISTORY_MAX_LIMIT
        await seed(execution_repo, max_limit + 5)

        page = await history_service.query_history(HistoryQuery(project_id="proj-1", limit=max_limit * 10))

        assert page.count == max_limit
        assert page.next_cursor is not None

    @pytest.mark.asyncio
    async def test_pages_cover_every_record_once(
        self, history_service: ExecutionHistoryService, execution_repo: FakeExecutionRepository
    ) -> None:
        await seed(execution_repo, 7)
        # Two records sharing a timestamp must still page deterministically.
        await execution_repo.create_execution(make_domain_execution(execution_id="exec-tie", created_at=at(3)))

        seen: list[str] = []
        cursor = None
        while True:
            page = await history_service.query_history(HistoryQuery(project_id="proj-1", limit=3, cursor=cursor))
            seen.extend(e.execution_id for e in page.executions)
            if page.next_cursor is None:
                break
            cursor = page.next_cursor

        assert len(seen) == 8
        assert len(set(seen)) == 8
        assert seen[:5] == ["exec-006", "exec-005", "exec-004", "exec-tie", "exec-003"]

    @pytest.mark.asyncio
    async def test_malformed_cursor(self, history_service: ExecutionHistoryService) -> None:
        with pytest.raises(ValidationError):
            await history_service.query_history(HistoryQuery(project_id="p", cursor="%%%not-a-token"))
