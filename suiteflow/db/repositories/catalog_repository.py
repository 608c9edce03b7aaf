import structlog
from beanie.odm.enums import SortDirection
from pymongo.errors import PyMongoError

from suiteflow.db.docs import TestCaseDocument, TestSuiteDocument
from suiteflow.domain.catalog import TestCaseDefinition, TestSuiteDefinition
from suiteflow.domain.execution import ExecutionStoreError


class CatalogRepository:
    """Read-only lookups of test case and suite definitions."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self.logger = logger

    async def get_test_case(self, test_case_id: str) -> TestCaseDefinition | None:
        try:
            doc = await TestCaseDocument.find_one({"test_case_id": test_case_id})
        except PyMongoError as e:
            raise ExecutionStoreError("get_test_case", str(e)) from e
        if not doc:
            return None
        return TestCaseDefinition(**doc.model_dump(exclude={"id", "revision_id", "created_at"}))

    async def get_test_suite(self, test_suite_id: str) -> TestSuiteDefinition | None:
        try:
            doc = await TestSuiteDocument.find_one({"test_suite_id": test_suite_id})
        except PyMongoError as e:
            raise ExecutionStoreError("get_test_suite", str(e)) from e
        if not doc:
            return None
        return TestSuiteDefinition(**doc.model_dump(exclude={"id", "revision_id", "created_at"}))

    async def get_suite_members(self, test_suite_id: str) -> list[TestCaseDefinition]:
        """Member test cases in stable fan-out order (oldest first)."""
        try:
            docs = (
                await TestCaseDocument.find({"test_suite_id": test_suite_id})
                .sort([("created_at", SortDirection.ASCENDING), ("test_case_id", SortDirection.ASCENDING)])
                .to_list()
            )
        except PyMongoError as e:
            raise ExecutionStoreError("get_suite_members", str(e)) from e
        self.logger.debug("Loaded suite members", test_suite_id=test_suite_id, count=len(docs))
        return [TestCaseDefinition(**d.model_dump(exclude={"id", "revision_id", "created_at"})) for d in docs]
