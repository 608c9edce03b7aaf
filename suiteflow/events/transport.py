from typing import Protocol

import structlog
from faststream.kafka import KafkaBroker

from suiteflow.domain.execution import WorkQueuePublishError
from suiteflow.events.messages import ExecutionMessage


class ExecutionQueue(Protocol):
    async def publish(self, message: ExecutionMessage) -> None: ...


class KafkaExecutionTransport:
    """Publishes execution work items to Kafka.

    Delivery is at-least-once; consumers must tolerate duplicates.
    """

    def __init__(
        self,
        broker: KafkaBroker,
        topic: str,
        logger: structlog.stdlib.BoundLogger,
    ):
        self._broker = broker
        self._topic = topic
        self._logger = logger

    async def publish(self, message: ExecutionMessage) -> None:
        """Publish one work item. Raises WorkQueuePublishError on any broker failure."""
        try:
            await self._broker.publish(
                message=message,
                topic=self._topic,
                key=message.execution_id.encode(),
            )
        except Exception as e:
            self._logger.error(
                "Failed to publish execution message",
                execution_id=message.execution_id,
                topic=self._topic,
                error=str(e),
            )
            raise WorkQueuePublishError(message.execution_id, str(e)) from e
        self._logger.debug("Execution message sent", execution_id=message.execution_id, topic=self._topic)
