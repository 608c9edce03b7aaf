from suiteflow.domain.exceptions import NotFoundError, ValidationError


class TestCaseNotFoundError(NotFoundError):
    def __init__(self, test_case_id: str) -> None:
        super().__init__("Test case", test_case_id)


class TestSuiteNotFoundError(NotFoundError):
    def __init__(self, test_suite_id: str) -> None:
        super().__init__("Test suite", test_suite_id)


class EmptySuiteError(ValidationError):
    """Raised when a suite has no member test cases to run."""

    def __init__(self, test_suite_id: str) -> None:
        self.test_suite_id = test_suite_id
        super().__init__(f"No test cases found in suite '{test_suite_id}'")
