import inspect
from pathlib import Path

import pytest
import structlog

from suiteflow.settings import Settings

_ROOT = Path(__file__).parent.parent


def pytest_pycollect_makeitem(collector: pytest.Collector, name: str, obj: object) -> list[pytest.Item] | None:
    # TestCaseDefinition, TestSuiteNotFoundError and friends are domain types imported into test modules.
    if inspect.isclass(obj) and obj.__module__.startswith("suiteflow."):
        return []
    return None


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Settings from config.test.toml (plus secrets.test.toml when present)."""
    return Settings(
        config_path=str(_ROOT / "config.test.toml"),
        secrets_path=str(_ROOT / "secrets.test.toml"),
    )


@pytest.fixture
def logger() -> structlog.stdlib.BoundLogger:
    test_logger: structlog.stdlib.BoundLogger = structlog.get_logger("test")
    return test_logger
