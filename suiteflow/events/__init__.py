from suiteflow.events.messages import ExecutionMessage, ExecutionMessageMetadata, TestCasePayload
from suiteflow.events.transport import ExecutionQueue, KafkaExecutionTransport

__all__ = [
    "ExecutionMessage",
    "ExecutionMessageMetadata",
    "ExecutionQueue",
    "KafkaExecutionTransport",
    "TestCasePayload",
]
