from typing import AsyncIterator

import structlog
from dishka import Provider, Scope, from_context, provide
from faststream.kafka import KafkaBroker
from pymongo import AsyncMongoClient

from suiteflow.core.logging import setup_logger
from suiteflow.core.metrics import ExecutionMetrics
from suiteflow.db.repositories import CatalogRepository, ExecutionRepository
from suiteflow.events import ExecutionQueue, KafkaExecutionTransport
from suiteflow.services.artifacts import ArtifactResolver, UrlArtifactResolver
from suiteflow.services.execution_service import ExecutionService
from suiteflow.services.history_service import ExecutionHistoryService
from suiteflow.services.suite_aggregation import SuiteAggregationService
from suiteflow.settings import Settings


class SettingsProvider(Provider):
    """Settings come from the container context so tests can pass their own."""

    scope = Scope.APP

    settings = from_context(provides=Settings, scope=Scope.APP)


class LoggingProvider(Provider):
    scope = Scope.APP

    @provide
    def get_logger(self, settings: Settings) -> structlog.stdlib.BoundLogger:
        return setup_logger(settings.LOG_LEVEL)


class DatabaseProvider(Provider):
    scope = Scope.APP

    @provide
    async def get_mongo_client(
        self, settings: Settings, logger: structlog.stdlib.BoundLogger
    ) -> AsyncIterator[AsyncMongoClient]:
        # tz_aware so MongoDB hands back aware datetimes
        client: AsyncMongoClient = AsyncMongoClient(
            settings.MONGODB_URL, tz_aware=True, serverSelectionTimeoutMS=5000
        )
        logger.info("MongoDB client created", database=settings.DATABASE_NAME)
        yield client
        await client.close()


class MessagingProvider(Provider):
    scope = Scope.APP

    @provide
    def get_broker(self, settings: Settings) -> KafkaBroker:
        return KafkaBroker(settings.KAFKA_BOOTSTRAP_SERVERS)

    @provide
    def get_execution_queue(
        self, broker: KafkaBroker, settings: Settings, logger: structlog.stdlib.BoundLogger
    ) -> ExecutionQueue:
        return KafkaExecutionTransport(broker=broker, topic=settings.execution_topic, logger=logger)


class MetricsProvider(Provider):
    scope = Scope.APP

    @provide
    def get_execution_metrics(self, settings: Settings) -> ExecutionMetrics:
        return ExecutionMetrics(settings)


class RepositoryProvider(Provider):
    scope = Scope.APP

    @provide
    def get_execution_repository(self, logger: structlog.stdlib.BoundLogger) -> ExecutionRepository:
        return ExecutionRepository(logger)

    @provide
    def get_catalog_repository(self, logger: structlog.stdlib.BoundLogger) -> CatalogRepository:
        return CatalogRepository(logger)


class ArtifactProvider(Provider):
    scope = Scope.APP

    @provide
    def get_artifact_resolver(self, settings: Settings) -> ArtifactResolver:
        return UrlArtifactResolver(settings.ARTIFACT_BASE_URL, settings.ARTIFACT_URL_TTL_SECONDS)


class BusinessServicesProvider(Provider):
    scope = Scope.APP

    @provide
    def get_suite_aggregation_service(
        self, execution_repository: ExecutionRepository, logger: structlog.stdlib.BoundLogger
    ) -> SuiteAggregationService:
        return SuiteAggregationService(execution_repository, logger)

    @provide
    def get_history_service(
        self,
        execution_repository: ExecutionRepository,
        settings: Settings,
        logger: structlog.stdlib.BoundLogger,
    ) -> ExecutionHistoryService:
        return ExecutionHistoryService(execution_repository, settings, logger)

    @provide
    def get_execution_service(
        self,
        execution_repository: ExecutionRepository,
        catalog_repository: CatalogRepository,
        queue: ExecutionQueue,
        artifact_resolver: ArtifactResolver,
        suite_aggregation: SuiteAggregationService,
        execution_metrics: ExecutionMetrics,
        settings: Settings,
        logger: structlog.stdlib.BoundLogger,
    ) -> ExecutionService:
        return ExecutionService(
            execution_repo=execution_repository,
            catalog_repo=catalog_repository,
            queue=queue,
            artifact_resolver=artifact_resolver,
            suite_aggregation=suite_aggregation,
            metrics=execution_metrics,
            settings=settings,
            logger=logger,
        )
