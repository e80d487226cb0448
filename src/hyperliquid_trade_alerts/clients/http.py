# -*- coding: utf-8 -*-
"""Async HTTP client for JSON POST lookups with rate-limit detection."""

from __future__ import annotations

import asyncio
import uuid
import aiohttp
import structlog
from typing import Any, Callable, Dict, Optional
from structlog.contextvars import bound_contextvars

from hyperliquid_trade_alerts.exceptions import EnrichmentLookupError, RateLimitError


class AsyncHttpClient:
    """Async HTTP client for the Hyperliquid APIs.

    Performs a single attempt per call; retry scheduling belongs to
    RetryPolicy. HTTP 429 is raised as RateLimitError, every other failure
    (status, transport, timeout, invalid JSON) as EnrichmentLookupError.

    If no session is provided, one is created and must be closed via
    aclose() or used as an async context manager.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            timeout_seconds: Total timeout applied to each request.
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._timeout_seconds = timeout_seconds
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def post(
        self,
        url: str,
        *,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """POST a JSON body and return the parsed JSON response.

        Args:
            url: Full URL to request.
            json: Optional JSON-serializable body.

        Returns:
            Parsed JSON response (dict or list).

        Raises:
            RateLimitError: If the server answers 429.
            EnrichmentLookupError: On any other HTTP, transport or decode failure.
        """
        payload = json or {}
        request_id = uuid.uuid4().hex[:12]

        with bound_contextvars(http_url=url, http_request_id=request_id):
            try:
                session = await self._get_session()
                async with session.post(url, json=payload) as response:
                    if response.status == 429:
                        retry_after = _parse_retry_after(response.headers.get("Retry-After"))
                        self._logger.debug(
                            "http_post_rate_limited",
                            http_status_code=429,
                            http_retry_after_seconds=retry_after,
                        )
                        raise RateLimitError(url=url, retry_after=retry_after)
                    response.raise_for_status()
                    return await response.json(content_type=None)
            except aiohttp.ClientResponseError as e:
                self._logger.debug(
                    "http_post_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                    http_status_code=e.status,
                )
                raise EnrichmentLookupError(
                    f"POST failed with status {e.status}: {url}",
                    url=url,
                    status_code=e.status,
                    cause=e,
                ) from e
            except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                self._logger.debug(
                    "http_post_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise EnrichmentLookupError(
                    f"POST failed: {url}",
                    url=url,
                    cause=e,
                ) from e


def _parse_retry_after(header: Optional[str]) -> Optional[float]:
    if not header:
        return None
    try:
        return float(header)
    except ValueError:
        return None
