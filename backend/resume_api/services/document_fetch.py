"""
Download a stored document back from its durable URL.

The completion service needs the attachment inlined, so the relayed copy is
fetched again rather than passed by reference.
"""
import logging

import httpx

from ..config import Settings
from ..exceptions import DocumentFetchError, OutboundTimeoutError
from .retry import call_with_retry

logger = logging.getLogger(__name__)


class DocumentFetcher:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport = None):
        self.timeout = settings.fetch_timeout_seconds
        self.retries = settings.outbound_retries
        self.backoff = settings.retry_backoff_seconds
        self._transport = transport

    async def _get(self, url: str) -> bytes:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
            return response.content

    async def fetch(self, url: str) -> bytes:
        try:
            content = await call_with_retry(
                lambda: self._get(url),
                stage="document fetch",
                timeout=self.timeout,
                retries=self.retries,
                backoff=self.backoff,
                transient=(httpx.TransportError,),
            )
        except OutboundTimeoutError:
            raise
        except httpx.TimeoutException as e:
            raise OutboundTimeoutError("document fetch", self.timeout) from e
        except httpx.HTTPStatusError as e:
            raise DocumentFetchError(
                f"Fetching {url} returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise DocumentFetchError(f"Fetching {url} failed: {e}") from e

        logger.info(f"Fetched {len(content)} bytes from blob store")
        return content
