"""
Registry HTTP client for depbreakpoint.

Every registry round trip goes through :class:`HTTPClient`: one pooled
``httpx.AsyncClient`` (HTTP/2) per search, a cap on requests in flight, and
retries for failures that are worth retrying.

Failure mapping:

- timeouts, connection errors, 5xx: retried with exponential backoff
- 429: retried after ``Retry-After``, with its own retry budget
- 404: :class:`~depbreakpoint.exceptions.RegistryError`, no retry
- other 4xx, non-JSON or non-object bodies: :class:`NetworkError`
"""

from __future__ import annotations

import httpx
import random
import asyncio
from typing import Any, Dict, Optional, cast

from depbreakpoint.utils.logger import get_logger
from depbreakpoint.__version__ import __version__
from depbreakpoint.exceptions import NetworkError, RegistryError
from depbreakpoint.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_CONCURRENT_LIMIT,
    MAX_RATE_LIMIT_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")


class HTTPClient:
    """Async JSON client for npm registry metadata.

    Args:
        timeout: Per-request timeout in seconds.
        max_retries: Retries after the first attempt for transient failures.
        max_concurrency: Maximum number of requests in flight at once.

    Example:
        >>> async with HTTPClient(timeout=10) as client:
        ...     doc = await client.get_json("https://registry.npmjs.org/axios")
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        max_concurrency: int = DEFAULT_CONCURRENT_LIMIT,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.max_concurrency = max_concurrency

        self._client: Optional[httpx.AsyncClient] = None
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def __aenter__(self) -> "HTTPClient":
        self._connection()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    def _connection(self) -> httpx.AsyncClient:
        """Return the pooled client, opening it on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT_TEMPLATE.format(version=__version__)},
            )
        return self._client

    async def close(self) -> None:
        """Close the pooled client. Safe to call more than once."""
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def get_json(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        """GET *url* and return its body as a JSON object.

        Keyword arguments (``headers``, ``params``) are passed to httpx.

        Raises:
            RegistryError: The registry answered 404.
            NetworkError: Retries were exhausted, another 4xx came back, or
                the body is not a JSON object.
        """
        response = await self._request_with_retry("GET", url, **kwargs)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {url}, got {type(data).__name__}",
                url=url,
                response_body=response.text,
            )

        return cast(Dict[str, Any], data)

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one logical request, retrying transient failures."""
        client = self._connection()
        last_exc: Optional[Exception] = None
        rate_limited = 0
        attempt = 0

        while attempt <= self.max_retries:
            try:
                async with self._semaphore:
                    response = await client.request(method, url, **kwargs)
            except httpx.TransportError as exc:
                last_exc = exc
                logger.warning(
                    "%s for %s (attempt %d/%d)",
                    type(exc).__name__,
                    url,
                    attempt + 1,
                    self.max_retries + 1,
                )
            else:
                status = response.status_code

                if status == 429:
                    rate_limited += 1
                    if rate_limited > MAX_RATE_LIMIT_RETRIES:
                        raise NetworkError(
                            f"Registry kept rate limiting {url}",
                            url=url,
                            status_code=429,
                        )
                    wait = _parse_retry_after(response.headers.get("Retry-After"))
                    logger.warning("Rate limited by registry, waiting %ds", wait)
                    await asyncio.sleep(wait)
                    continue

                if status < 400:
                    return response

                if status == 404:
                    raise RegistryError(
                        f"Not found in registry: {url}",
                        url=url,
                        status_code=404,
                    )

                if status < 500:
                    raise NetworkError(
                        f"Registry returned HTTP {status} for {url}",
                        url=url,
                        status_code=status,
                        response_body=response.text,
                    )

                last_exc = None
                logger.warning(
                    "Registry returned HTTP %d for %s (attempt %d/%d)",
                    status,
                    url,
                    attempt + 1,
                    self.max_retries + 1,
                )

            if attempt < self.max_retries:
                await asyncio.sleep(_backoff_delay(attempt))
            attempt += 1

        raise NetworkError(
            f"Registry request failed after {self.max_retries + 1} attempts: {url}",
            url=url,
        ) from last_exc


def _backoff_delay(attempt: int) -> float:
    """Seconds to wait before retry number *attempt* + 1 (1s, 2s, 4s, ...)."""
    return 2**attempt + random.uniform(0.0, 0.3)


def _parse_retry_after(value: Optional[str]) -> int:
    """Return the ``Retry-After`` delay in seconds, defaulting to 1.

    Only the delta-seconds form is honoured; HTTP-date values fall back to
    the default.
    """
    if not value:
        return 1
    try:
        return max(int(value), 0)
    except ValueError:
        return 1
