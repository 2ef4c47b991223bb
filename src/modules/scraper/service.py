import asyncio
import logging

import httpx

from src.common.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "de-DE,de;q=0.9,en;q=0.8",
}


class HttpFetcher:
    """Fetches HTML pages with a bounded number of retries."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
        user_agent: str | None = None,
    ) -> None:
        self._client = client
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._timeout = timeout
        self._headers = dict(DEFAULT_HEADERS)
        if user_agent:
            self._headers["User-Agent"] = user_agent

    async def fetch(self, url: str) -> str:
        logger.info("Fetching %s", url)
        last_exc: Exception | None = None
        for attempt in range(1, self._max_retries + 1):
            try:
                response = await self._client.get(
                    url,
                    headers=self._headers,
                    timeout=self._timeout,
                    follow_redirects=True,
                )
                response.raise_for_status()
                html = response.text
                logger.info("Fetched %s (%d KB)", url, round(len(html) / 1024))
                return html
            except (httpx.HTTPStatusError, httpx.RequestError) as exc:
                last_exc = exc
                if attempt == self._max_retries:
                    break
                wait = self._retry_delay * 2 ** (attempt - 1)
                logger.warning(
                    "Attempt %d/%d failed for %s: %s, retrying in %.1fs",
                    attempt, self._max_retries, url, exc, wait,
                )
                await asyncio.sleep(wait)

        logger.error("Giving up on %s after %d attempts: %s", url, self._max_retries, last_exc)
        raise FetchError(f"Failed to fetch HTML from {url}", last_exc) from last_exc
