"""Fake implementations for external boundary clients used in tests."""

from .artifacts import FakeArtifactResolver
from .providers import FakeBoundaryProvider
from .queue import FakeExecutionQueue, FakeKafkaBroker
from .repositories import FakeCatalogRepository, FakeExecutionRepository

__all__ = [
    "FakeArtifactResolver",
    "FakeBoundaryProvider",
    "FakeCatalogRepository",
    "FakeExecutionQueue",
    "FakeExecutionRepository",
    "FakeKafkaBroker",
]
