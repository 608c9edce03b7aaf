from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from beanie import init_beanie
from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from faststream.kafka import KafkaBroker
from fastapi import FastAPI
from pymongo import AsyncMongoClient

from suiteflow.api.routes import executions
from suiteflow.core.container import create_app_container
from suiteflow.core.correlation import CorrelationMiddleware
from suiteflow.core.exceptions import configure_exception_handlers
from suiteflow.db.docs import ALL_DOCUMENTS
from suiteflow.settings import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Bind beanie to the container's Mongo client and run the Kafka producer for the app's lifetime."""
    container: AsyncContainer = app.state.dishka_container
    settings = await container.get(Settings)
    logger = await container.get(structlog.stdlib.BoundLogger)

    client = await container.get(AsyncMongoClient)
    await init_beanie(
        database=client.get_default_database(default=settings.DATABASE_NAME),
        document_models=ALL_DOCUMENTS,
    )
    logger.info("MongoDB initialized via Beanie", database=settings.DATABASE_NAME)

    broker = await container.get(KafkaBroker)
    await broker.start()
    logger.info("Kafka producer started", topic=settings.execution_topic)

    try:
        yield
    finally:
        await broker.stop()
        await container.close()
        logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None, container: AsyncContainer | None = None) -> FastAPI:
    settings = settings or Settings()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.SERVICE_VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )
    app.add_middleware(CorrelationMiddleware)
    setup_dishka(container or create_app_container(settings), app)
    configure_exception_handlers(app)
    app.include_router(executions.router, prefix=settings.API_V1_STR)
    return app


def main() -> None:
    settings = Settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8000, log_config=None)


if __name__ == "__main__":
    main()
