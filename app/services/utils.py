
import httpx
from contextlib import asynccontextmanager
from typing import Optional
from aiolimiter import AsyncLimiter
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential
from app.core.errors import ProviderTransportError
from app.core.settings import settings

# Global rate limiter shared by every provider call in the process
limiter = AsyncLimiter(settings.flickr_rate_limit, 1)

@asynccontextmanager
async def backoff_client(transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 20.0):
    async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
        yield client

def transport_retry(attempts: int, min_wait: float, max_wait: float):
    """Retry policy for idempotent provider GETs: transport failures only."""
    return retry(
        retry=retry_if_exception_type(ProviderTransportError),
        wait=wait_exponential(multiplier=0.5, min=min_wait, max=max_wait),
        stop=stop_after_attempt(max(attempts, 1)),
        reraise=True,
    )

async def limited_get(client: httpx.AsyncClient, url: str, **kwargs) -> httpx.Response:
    async with limiter:
        return await client.get(url, **kwargs)
