from datetime import datetime, timezone
from typing import Any

from beanie import Document, Indexed
from pydantic import ConfigDict, Field


class TestCaseDocument(Document):
    """Test case definition. Owned by the catalog service; read-only here."""

    test_case_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    project_id: Indexed(str)  # type: ignore[valid-type]
    test_suite_id: Indexed(str) | None = None  # type: ignore[valid-type]
    name: str
    type: str = "ui"
    description: str | None = None
    steps: list[dict[str, Any]] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True)

    class Settings:
        name = "test_cases"


class TestSuiteDocument(Document):
    test_suite_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    project_id: Indexed(str)  # type: ignore[valid-type]
    name: str
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(from_attributes=True)

    class Settings:
        name = "test_suites"
