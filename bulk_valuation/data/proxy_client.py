import asyncio

import httpx

from ..core.config import settings
from ..core.errors import ConfigurationError

class DatanestProxy:
    """
    Thin pass-through to the upstream API for single-record calls
    (lookup, report, artifact download). Callers translate failures.
    """
    def __init__(self, base_url: str, api_key: str | None, transport: httpx.AsyncBaseTransport | None = None):
        if not api_key:
            raise ConfigurationError("missing_api_key", "DATANEST_API_KEY is not configured.")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.transport = transport

    async def post_json(self, path: str, payload, deadline: float) -> httpx.Response:
        """POST ``payload`` to ``path``; raises TimeoutError past ``deadline``."""
        async def call():
            async with httpx.AsyncClient(timeout=deadline, transport=self.transport) as client:
                return await client.post(
                    f"{self.base_url}{path}",
                    json=payload,
                    headers={"x-api-key": self.api_key, "Cache-Control": "no-store"},
                )
        return await asyncio.wait_for(call(), timeout=deadline)

    def artifact_url(self, url: str) -> str | None:
        """Absolute URL for an artifact reference, or None if it isn't one we fetch."""
        if url.startswith("/v1/"):
            return f"{self.base_url}{url}"
        if url.startswith("http"):
            return url
        return None

    async def get(self, url: str, deadline: float) -> httpx.Response:
        async def call():
            async with httpx.AsyncClient(timeout=deadline, transport=self.transport) as client:
                return await client.get(url, headers={"x-api-key": self.api_key})
        return await asyncio.wait_for(call(), timeout=deadline)

def proxy_client() -> DatanestProxy:
    return DatanestProxy(settings.DATANEST_BASE_URL, settings.DATANEST_API_KEY)
