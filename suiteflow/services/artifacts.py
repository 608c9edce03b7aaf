from datetime import datetime, timedelta, timezone
from typing import Protocol
from urllib.parse import quote, urlencode

from suiteflow.domain.exceptions import InfrastructureError


class ArtifactResolutionError(InfrastructureError):
    """Raised when an artifact key cannot be turned into a retrievable URL."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        super().__init__(f"Cannot resolve artifact '{key}': {reason}")


class ArtifactResolver(Protocol):
    async def resolve(self, key: str) -> str: ...


class UrlArtifactResolver:
    """Builds time-limited artifact URLs under a fixed base URL."""

    def __init__(self, base_url: str, ttl_seconds: int) -> None:
        self._base_url = base_url.rstrip("/")
        self._ttl = timedelta(seconds=ttl_seconds)

    async def resolve(self, key: str) -> str:
        if not key or not key.strip():
            raise ArtifactResolutionError(key, "empty key")
        if key.startswith("/") or "://" in key or ".." in key.split("/"):
            raise ArtifactResolutionError(key, "key must be a relative object path")

        expires = int((datetime.now(timezone.utc) + self._ttl).timestamp())
        return f"{self._base_url}/{quote(key)}?{urlencode({'expires': expires})}"
