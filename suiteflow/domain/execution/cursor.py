import base64
import binascii
import json
from datetime import datetime

from pydantic.dataclasses import dataclass

from suiteflow.domain.exceptions import ValidationError


@dataclass(frozen=True)
class HistoryCursor:
    """Sort key of the last item on a history page."""

    created_at: datetime
    execution_id: str

    def encode(self) -> str:
        payload = {"c": self.created_at.isoformat(), "e": self.execution_id}
        raw = json.dumps(payload, separators=(",", ":")).encode()
        return base64.urlsafe_b64encode(raw).decode().rstrip("=")

    @classmethod
    def decode(cls, token: str) -> "HistoryCursor":
        padded = token + "=" * (-len(token) % 4)
        try:
            payload = json.loads(base64.urlsafe_b64decode(padded.encode()))
            return cls(created_at=datetime.fromisoformat(payload["c"]), execution_id=str(payload["e"]))
        except (binascii.Error, ValueError, KeyError, TypeError) as e:
            raise ValidationError("Invalid continuation token") from e
