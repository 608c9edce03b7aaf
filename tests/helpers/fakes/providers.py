"""Fake providers for DI container testing.

Registered after the real providers so they override the boundary clients.
"""

from dishka import Provider, Scope, provide

from suiteflow.db.repositories import CatalogRepository, ExecutionRepository
from suiteflow.events import ExecutionQueue
from suiteflow.services.artifacts import ArtifactResolver

from tests.helpers.fakes.artifacts import FakeArtifactResolver
from tests.helpers.fakes.queue import FakeExecutionQueue
from tests.helpers.fakes.repositories import FakeCatalogRepository, FakeExecutionRepository


class FakeBoundaryProvider(Provider):
    scope = Scope.APP

    def __init__(
        self,
        execution_repo: FakeExecutionRepository,
        catalog_repo: FakeCatalogRepository,
        queue: FakeExecutionQueue,
        resolver: FakeArtifactResolver,
    ) -> None:
        super().__init__()
        self._execution_repo = execution_repo
        self._catalog_repo = catalog_repo
        self._queue = queue
        self._resolver = resolver

    @provide
    def get_execution_repository(self) -> ExecutionRepository:
        return self._execution_repo  # type: ignore[return-value]

    @provide
    def get_catalog_repository(self) -> CatalogRepository:
        return self._catalog_repo  # type: ignore[return-value]

    @provide
    def get_execution_queue(self) -> ExecutionQueue:
        return self._queue

    @provide
    def get_artifact_resolver(self) -> ArtifactResolver:
        return self._resolver
