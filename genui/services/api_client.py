"""
Generic async HTTP client
- httpx.AsyncClient based
- retry, timeout, exponential backoff
- honors Retry-After on 429
"""
import asyncio
from typing import Optional

import httpx

from genui.utils.logger import logger


class APIClient:
    """Async HTTP client with retry + exponential backoff"""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        max_retries: int = 3,
        backoff: float = 1.0,
        headers: Optional[dict] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.backoff = backoff
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            headers=headers or {},
        )

    async def close(self):
        await self._client.aclose()

    def _wait_time(self, attempt: int) -> float:
        return self.backoff * (2 ** attempt)

    async def request(
        self,
        method: str,
        url: str,
        **kwargs,
    ) -> httpx.Response:
        """
        HTTP request with automatic retry
        - 429: wait for Retry-After (or backoff) and retry
        - 500+: retry with exponential backoff
        - other 4xx: returned immediately, no retry
        - timeouts / connect errors: retried, re-raised once attempts run out
        """
        last_exception: Optional[Exception] = None
        response: Optional[httpx.Response] = None

        for attempt in range(self.max_retries):
            is_last = attempt == self.max_retries - 1
            try:
                response = await self._client.request(method, url, **kwargs)
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                last_exception = e
                wait_time = self._wait_time(attempt)
                logger.warning(
                    f"Request failed: {e!r}. retrying in {wait_time}s "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                if not is_last:
                    await asyncio.sleep(wait_time)
                continue

            last_exception = None

            if response.status_code < 400:
                return response

            if response.status_code == 429:
                retry_after = response.headers.get("Retry-After")
                try:
                    wait_time = float(retry_after) if retry_after else self._wait_time(attempt)
                except ValueError:
                    wait_time = self._wait_time(attempt)
                # never wait longer than a single attempt may take
                wait_time = min(max(wait_time, 0.0), self.timeout)
                logger.warning(
                    f"Rate limited (429). retrying in {wait_time}s "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                if not is_last:
                    await asyncio.sleep(wait_time)
                continue

            if response.status_code >= 500:
                wait_time = self._wait_time(attempt)
                logger.warning(
                    f"Server error ({response.status_code}). retrying in {wait_time}s "
                    f"(attempt {attempt + 1}/{self.max_retries})"
                )
                if not is_last:
                    await asyncio.sleep(wait_time)
                continue

            # Client error -- retrying won't help
            return response

        if last_exception:
            raise last_exception
        return response  # type: ignore[return-value]

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("POST", url, **kwargs)
