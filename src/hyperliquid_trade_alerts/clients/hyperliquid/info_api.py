# -*- coding: utf-8 -*-
"""Hyperliquid public lookups: transaction details and account state."""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Optional, cast
from structlog.contextvars import bound_contextvars

from hyperliquid_trade_alerts.clients.hyperliquid.schema import (
    ClearinghouseStateSchema,
    TxDetailsSchema,
)
from hyperliquid_trade_alerts.exceptions import EnrichmentLookupError
from hyperliquid_trade_alerts.utils.validation import mask_address

if TYPE_CHECKING:
    from hyperliquid_trade_alerts.clients.http import AsyncHttpClient


class HyperliquidInfoClient:
    """Client for the explorer (txDetails) and info (clearinghouseState) endpoints."""

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        *,
        explorer_url: str = "https://rpc.hyperliquid.xyz/explorer",
        info_url: str = "https://api.hyperliquid.xyz/info",
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client (e.g. AsyncHttpClient).
            explorer_url: Explorer endpoint URL.
            info_url: Info endpoint URL.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._explorer_url = explorer_url
        self._info_url = info_url
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def tx_details(self, tx_hash: str) -> TxDetailsSchema:
        """Fetch the details of a transaction by hash.

        Raises:
            EnrichmentLookupError: If the request fails or the body is not an object.
        """
        with bound_contextvars(info_tx_hash=mask_address(tx_hash)):
            data = await self._http.post(
                self._explorer_url,
                json={"type": "txDetails", "hash": tx_hash},
            )
            if not isinstance(data, dict):
                self._logger.warning(
                    "info_tx_details_non_object",
                    info_response_type=type(data).__name__,
                )
                raise EnrichmentLookupError(
                    "txDetails response is not an object",
                    url=self._explorer_url,
                )
            return cast(TxDetailsSchema, data)

    async def clearinghouse_state(self, user: str) -> ClearinghouseStateSchema:
        """Fetch margin summary and open positions for an account.

        Raises:
            EnrichmentLookupError: If the request fails or the body is not an object.
        """
        with bound_contextvars(info_user_masked=mask_address(user)):
            data = await self._http.post(
                self._info_url,
                json={"type": "clearinghouseState", "user": user},
            )
            if not isinstance(data, dict):
                self._logger.warning(
                    "info_clearinghouse_state_non_object",
                    info_response_type=type(data).__name__,
                )
                raise EnrichmentLookupError(
                    "clearinghouseState response is not an object",
                    url=self._info_url,
                )
            return cast(ClearinghouseStateSchema, data)
