"""PageFetcher — async HTTP GET with rotating user agents and bounded retry.

One ``httpx.AsyncClient`` per fetcher keeps connections alive across calls,
so repeated fetches against the same host skip the TCP/TLS handshake.

Retry policy (per ``fetch_page`` call):
  attempt 0           → Chrome UA
  attempt 1..n        → Safari UA (last UA repeats)
  non-2xx / transport → sleep backoff * (attempt + 1), then retry
  all attempts failed → FetchError chained from the last error

The fetcher has no deadline of its own beyond the per-attempt httpx timeout;
the extractor bounds the whole retry loop with ``asyncio.wait_for``.
"""

from __future__ import annotations

import asyncio

import httpx
import structlog

from articlex.config import settings
from articlex.errors import FetchError
from articlex.models.schemas import RawPage

logger = structlog.get_logger(component="extraction.fetcher")

USER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Safari/605.1.15",
)

_BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Referer": "https://www.google.com/",
}

_POOL_LIMITS = httpx.Limits(max_connections=10, max_keepalive_connections=10)


class _BadStatus(Exception):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"status {status_code}")
        self.status_code = status_code


class PageFetcher:
    """Async page fetcher with keep-alive pooling and retry/backoff.

    Usage::

        async with PageFetcher() as fetcher:
            page = await fetcher.fetch_page("https://www.coindesk.com/…")

    Args:
        timeout:       Per-attempt timeout in seconds.
        backoff:       Backoff unit in seconds between attempts.
        max_retries:   Default number of extra attempts after the first.
        transport:     Optional httpx transport (tests, proxies).
    """

    def __init__(
        self,
        timeout: float | None = None,
        backoff: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.backoff = backoff if backoff is not None else settings.retry_backoff
        self.max_retries = max_retries if max_retries is not None else settings.max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=_POOL_LIMITS,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    @staticmethod
    def _headers_for(attempt: int, extra: dict[str, str] | None) -> dict[str, str]:
        headers = {"User-Agent": USER_AGENTS[min(attempt, len(USER_AGENTS) - 1)], **_BROWSER_HEADERS}
        if extra:
            headers.update(extra)
        return headers

    async def fetch_page(
        self,
        url: str,
        headers: dict[str, str] | None = None,
        max_retries: int | None = None,
    ) -> RawPage:
        """GET *url*, retrying non-2xx responses and transport errors.

        Raises:
            FetchError: after ``1 + max_retries`` failed attempts.
        """
        retries = self.max_retries if max_retries is None else max_retries
        client = await self._get_client()
        last_error: Exception | None = None

        for attempt in range(retries + 1):
            try:
                response = await client.get(url, headers=self._headers_for(attempt, headers))
                if not response.is_success:
                    raise _BadStatus(response.status_code)
                logger.debug(
                    "page_fetched",
                    url=url,
                    status=response.status_code,
                    attempt=attempt,
                    bytes=len(response.content),
                )
                return RawPage(
                    url=url,
                    final_url=str(response.url),
                    status_code=response.status_code,
                    html=response.text,
                )
            except (httpx.HTTPError, _BadStatus) as exc:
                last_error = exc
                logger.debug("fetch_attempt_failed", url=url, attempt=attempt, error=str(exc))
                if attempt < retries:
                    await asyncio.sleep(self.backoff * (attempt + 1))

        status = last_error.status_code if isinstance(last_error, _BadStatus) else None
        logger.warning("fetch_failed", url=url, attempts=retries + 1, status=status, error=str(last_error))
        raise FetchError(
            f"Failed to fetch {url} after {retries + 1} attempts: {last_error}",
            url=url,
            status_code=status,
        ) from last_error

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "PageFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
