from suiteflow.db.docs.catalog import TestCaseDocument, TestSuiteDocument
from suiteflow.db.docs.execution import (
    ExecutionDocument,
    ExecutionMetadataModel,
    StepResultModel,
    SuiteExecutionDocument,
    SuiteStatsModel,
)

ALL_DOCUMENTS = [
    ExecutionDocument,
    SuiteExecutionDocument,
    TestCaseDocument,
    TestSuiteDocument,
]

__all__ = [
    "ALL_DOCUMENTS",
    "ExecutionDocument",
    "ExecutionMetadataModel",
    "StepResultModel",
    "SuiteExecutionDocument",
    "SuiteStatsModel",
    "TestCaseDocument",
    "TestSuiteDocument",
]
