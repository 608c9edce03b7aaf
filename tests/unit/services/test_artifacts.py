from urllib.parse import parse_qs, urlparse

import pytest

from suiteflow.services.artifacts import ArtifactResolutionError, UrlArtifactResolver

pytestmark = pytest.mark.unit


@pytest.mark.asyncio
async def test_builds_expiring_url() -> None:
    resolver = UrlArtifactResolver("https://cdn.test/shots/", ttl_seconds=60)

    url = await resolver.resolve("proj-1/exec-1/step 0.png")

    parsed = urlparse(url)
    assert parsed.netloc == "cdn.test"
    assert parsed.path == "/shots/proj-1/exec-1/step%200.png"
    assert int(parse_qs(parsed.query)["expires"][0]) > 0


@pytest.mark.asyncio
@pytest.mark.parametrize("key", ["", "   ", "/etc/passwd", "s3://bucket/key", "a/../b.png"])
async def test_rejects_bad_keys(key: str) -> None:
    resolver = UrlArtifactResolver("https://cdn.test", ttl_seconds=60)
    with pytest.raises(ArtifactResolutionError):
        await resolver.resolve(key)
