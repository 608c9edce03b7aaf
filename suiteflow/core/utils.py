from datetime import datetime, timezone
from enum import StrEnum


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC, matching the tz-aware Mongo client."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class StringEnum(StrEnum):
    """
    A StrEnum subclass that behaves like a plain string in all representations.

    StrEnum.__repr__ returns the member representation
    (e.g., '<ExecutionStatus.QUEUED: 'queued'>'); this returns just the value,
    which keeps structured log lines and JSON payloads readable.

    Usage:
        class MyEnum(StringEnum):
            VALUE1 = "value1"
            VALUE2 = "value2"
    """

    def __repr__(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value

    def __format__(self, format_spec: str) -> str:
        return self.value.__format__(format_spec)
