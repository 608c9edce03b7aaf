from __future__ import annotations

from dataclasses import field
from typing import Any, Optional

from pydantic.dataclasses import dataclass


@dataclass
class TestCaseDefinition:
    """Read-only view of a test case as the worker needs it."""

    test_case_id: str
    project_id: str
    name: str
    type: str = "ui"
    description: Optional[str] = None
    test_suite_id: Optional[str] = None
    steps: list[dict[str, Any]] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass
class TestSuiteDefinition:
    test_suite_id: str
    project_id: str
    name: str
    description: Optional[str] = None
    tags: list[str] = field(default_factory=list)
