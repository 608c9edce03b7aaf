from .exceptions import EmptySuiteError, TestCaseNotFoundError, TestSuiteNotFoundError
from .models import TestCaseDefinition, TestSuiteDefinition

__all__ = [
    "EmptySuiteError",
    "TestCaseDefinition",
    "TestCaseNotFoundError",
    "TestSuiteDefinition",
    "TestSuiteNotFoundError",
]
