from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

import structlog
from beanie import UpdateResponse
from beanie.odm.enums import SortDirection
from pymongo.errors import DuplicateKeyError, PyMongoError

from suiteflow.db.docs import (
    ExecutionDocument,
    StepResultModel,
    SuiteExecutionDocument,
)
from suiteflow.domain.enums import EXECUTION_ACTIVE, ExecutionStatus, HistoryIndex, allowed_predecessors
from suiteflow.domain.execution import (
    DomainExecution,
    ExecutionAlreadyExistsError,
    ExecutionStoreError,
    HistoryCursor,
    StepResult,
    SuiteExecutionAggregate,
)

_NEWEST_FIRST = [("created_at", SortDirection.DESCENDING), ("execution_id", SortDirection.DESCENDING)]


class ExecutionRepository:
    """MongoDB-backed execution store.

    Driver failures surface as ExecutionStoreError with the original
    exception chained; nothing here retries.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self.logger = logger

    async def create_execution(self, execution: DomainExecution) -> DomainExecution:
        doc = ExecutionDocument(**asdict(execution))
        try:
            await doc.insert()
        except DuplicateKeyError as e:
            self.logger.warning("Execution id already exists", execution_id=execution.execution_id)
            raise ExecutionAlreadyExistsError(execution.execution_id) from e
        except PyMongoError as e:
            raise ExecutionStoreError("create", str(e)) from e
        self.logger.info("Inserted execution", execution_id=doc.execution_id, status=doc.status)
        return self._to_domain(doc)

    async def get_execution(self, execution_id: str) -> DomainExecution | None:
        try:
            doc = await ExecutionDocument.find_one({"execution_id": execution_id})
        except PyMongoError as e:
            raise ExecutionStoreError("get", str(e)) from e
        if not doc:
            self.logger.debug("Execution not found", execution_id=execution_id)
            return None
        return self._to_domain(doc)

    async def query_by_index(
        self,
        index: HistoryIndex,
        key: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int = 50,
        after: HistoryCursor | None = None,
    ) -> tuple[list[DomainExecution], HistoryCursor | None]:
        query: dict[str, Any] = {str(index): key}

        if start_date or end_date:
            time_filter: dict[str, datetime] = {}
            if start_date:
                time_filter["$gte"] = start_date
            if end_date:
                time_filter["$lte"] = end_date
            query["created_at"] = time_filter

        if after:
            query = {
                "$and": [
                    query,
                    {
                        "$or": [
                            {"created_at": {"$lt": after.created_at}},
                            {"created_at": after.created_at, "execution_id": {"$lt": after.execution_id}},
                        ]
                    },
                ]
            }

        try:
            # One extra row tells us whether another page exists.
            docs = await ExecutionDocument.find(query).sort(_NEWEST_FIRST).limit(limit + 1).to_list()
        except PyMongoError as e:
            raise ExecutionStoreError("query", str(e)) from e

        next_cursor = None
        if len(docs) > limit:
            docs = docs[:limit]
            last = docs[-1]
            next_cursor = HistoryCursor(created_at=last.created_at, execution_id=last.execution_id)

        return [self._to_domain(d) for d in docs], next_cursor

    async def get_suite_children(self, suite_execution_id: str) -> list[DomainExecution]:
        try:
            docs = (
                await ExecutionDocument.find({"suite_execution_id": suite_execution_id})
                .sort([("created_at", SortDirection.ASCENDING), ("execution_id", SortDirection.ASCENDING)])
                .to_list()
            )
        except PyMongoError as e:
            raise ExecutionStoreError("query", str(e)) from e
        return [self._to_domain(d) for d in docs]

    async def transition_status(
        self,
        execution_id: str,
        target: ExecutionStatus,
        fields: dict[str, Any] | None = None,
    ) -> DomainExecution | None:
        """Move to ``target`` only from an allowed predecessor.

        Returns the updated execution, or None when no record in a
        predecessor status matched (missing, or already past that point).
        """
        update = dict(fields or {})
        update["status"] = target
        update["updated_at"] = datetime.now(timezone.utc)
        predecessors = [str(s) for s in allowed_predecessors(target)]
        try:
            doc = await ExecutionDocument.find_one(
                {"execution_id": execution_id, "status": {"$in": predecessors}}
            ).update({"$set": update}, response_type=UpdateResponse.NEW_DOCUMENT)
        except PyMongoError as e:
            raise ExecutionStoreError("update", str(e)) from e
        if not doc:
            return None
        self.logger.info("Execution status changed", execution_id=execution_id, status=target)
        return self._to_domain(doc)

    async def append_step(self, execution_id: str, step: StepResult) -> DomainExecution | None:
        """Append a step to a non-terminal execution. None when not applicable."""
        push: dict[str, Any] = {"steps": StepResultModel.model_validate(asdict(step)).model_dump()}
        if step.screenshot:
            push["screenshots"] = step.screenshot
        active = [str(s) for s in EXECUTION_ACTIVE]
        try:
            doc = await ExecutionDocument.find_one(
                {"execution_id": execution_id, "status": {"$in": active}}
            ).update(
                {"$push": push, "$set": {"updated_at": datetime.now(timezone.utc)}},
                response_type=UpdateResponse.NEW_DOCUMENT,
            )
        except PyMongoError as e:
            raise ExecutionStoreError("update", str(e)) from e
        return self._to_domain(doc) if doc else None

    async def upsert_suite_aggregate(self, aggregate: SuiteExecutionAggregate) -> None:
        fields: dict[str, Any] = {
            "test_suite_id": aggregate.test_suite_id,
            "status": aggregate.status,
            "result": aggregate.result,
            "stats": asdict(aggregate.stats),
            "start_time": aggregate.start_time,
            "end_time": aggregate.end_time,
            "duration": aggregate.duration,
            "computed_at": datetime.now(timezone.utc),
        }
        query = {"suite_execution_id": aggregate.suite_execution_id}
        try:
            doc = await SuiteExecutionDocument.find_one(query)
            if doc:
                await doc.set(fields)
            else:
                try:
                    await SuiteExecutionDocument(suite_execution_id=aggregate.suite_execution_id, **fields).insert()
                except DuplicateKeyError:
                    # Another completion inserted first; overwrite with this computation.
                    await SuiteExecutionDocument.find_one(query).update({"$set": fields})
        except PyMongoError as e:
            raise ExecutionStoreError("upsert", str(e)) from e
        self.logger.debug(
            "Stored suite aggregate", suite_execution_id=aggregate.suite_execution_id, status=aggregate.status
        )

    @staticmethod
    def _to_domain(doc: ExecutionDocument) -> DomainExecution:
        return DomainExecution(**doc.model_dump(exclude={"id", "revision_id"}))


__all__ = ["ExecutionRepository"]
