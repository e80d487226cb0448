# -*- coding: utf-8 -*-
"""Persistent websocket connection to the Hyperliquid trade feed.

Lifecycle: DISCONNECTED -> CONNECTING -> SUBSCRIBING -> STREAMING, and back to
DISCONNECTED on any transport error or server close, followed by a reconnect
after base_delay * 1.5 ** (attempt - 1). The attempt counter resets once a
connection reaches STREAMING. Exceeding max_reconnect_attempts is fatal and
surfaces from events() as MaxReconnectAttemptsError.

The websocket handle is owned by the instance; every reconnect creates a new
one and the previous handle is never reused.
"""

from __future__ import annotations

import asyncio
import aiohttp
import structlog
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Any, Optional, Protocol
from structlog.contextvars import bound_contextvars

from hyperliquid_trade_alerts.exceptions import (
    FeedProtocolError,
    FeedTransportError,
    MaxReconnectAttemptsError,
)
from hyperliquid_trade_alerts.feed.protocol import (
    IgnoredFrame,
    PingFrame,
    TradesFrame,
    parse_frame,
    pong_frame,
    subscribe_frame,
)
from hyperliquid_trade_alerts.models.connection_state import ConnectionState
from hyperliquid_trade_alerts.models.trade import RawTradeEvent


class WebSocketLike(Protocol):
    """Subset of aiohttp.ClientWebSocketResponse used by FeedConnection."""

    @property
    def closed(self) -> bool: ...

    async def send_str(self, data: str) -> None: ...

    async def close(self) -> Any: ...

    def __aiter__(self) -> AsyncIterator[Any]: ...


ConnectFactory = Callable[[], Awaitable[WebSocketLike]]


class FeedConnection:
    """Owns one streaming connection and exposes trades as an async iterator.

    Run via start() (returns the lifecycle task) and consume events(); stop
    with close(). Pings are answered in place and never emitted.
    """

    def __init__(
        self,
        *,
        url: str,
        coins: Sequence[str],
        subscribe_delay_seconds: float = 0.05,
        max_reconnect_attempts: int = 10,
        reconnect_base_delay_seconds: float = 1.0,
        connect_timeout_seconds: float = 15.0,
        receive_timeout_seconds: Optional[float] = 90.0,
        heartbeat_seconds: Optional[float] = 30.0,
        buffer_size: int = 10_000,
        connect: Optional[ConnectFactory] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the connection (nothing is opened until start()).

        Args:
            url: Websocket URL.
            coins: Coins to subscribe to, in subscription order.
            subscribe_delay_seconds: Pause between subscribe frames.
            max_reconnect_attempts: Consecutive failed reconnects before giving up.
            reconnect_base_delay_seconds: Base of the 1.5x backoff.
            connect_timeout_seconds: Bound on opening the socket.
            receive_timeout_seconds: Silence after which the socket is treated as dead.
            heartbeat_seconds: Websocket-level ping interval for the default transport.
            buffer_size: Max trades buffered between the receive loop and events().
            connect: Optional socket factory (tests); defaults to aiohttp ws_connect.
            sleep: Sleep function used for subscribe pacing and reconnect backoff.
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._url = url
        self._coins = list(coins)
        self._subscribe_delay = subscribe_delay_seconds
        self._max_reconnect_attempts = max_reconnect_attempts
        self._reconnect_base_delay = reconnect_base_delay_seconds
        self._connect_timeout = connect_timeout_seconds
        self._receive_timeout = receive_timeout_seconds
        self._heartbeat = heartbeat_seconds
        self._connect = connect or self._default_connect
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

        self._state = ConnectionState.DISCONNECTED
        self._ws: Optional[WebSocketLike] = None
        self._session: Optional[aiohttp.ClientSession] = None
        self._queue: asyncio.Queue[RawTradeEvent] = asyncio.Queue(maxsize=buffer_size)
        self._task: Optional[asyncio.Task[None]] = None
        self._fatal: Optional[BaseException] = None
        self._closing = False
        self._attempt = 0
        self._connections_opened = 0

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def reconnect_attempt(self) -> int:
        """Consecutive failed reconnects since the last STREAMING state."""
        return self._attempt

    @property
    def connections_opened(self) -> int:
        return self._connections_opened

    @property
    def coins(self) -> list[str]:
        return list(self._coins)

    async def start(self) -> asyncio.Task[None]:
        """Start the lifecycle in a background task and return it. Idempotent."""
        if self._closing:
            raise RuntimeError("FeedConnection is closed")
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="feed-connection")
            self._task.add_done_callback(self._on_run_done)
        return self._task

    async def close(self) -> None:
        """Stop streaming, cancel any pending reconnect and release the socket.

        No event is emitted after this returns. Idempotent.
        """
        if self._closing:
            return
        self._closing = True
        self._set_state(ConnectionState.CLOSING)
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await self._release()
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
        self._queue.shutdown(immediate=True)
        self._set_state(ConnectionState.DISCONNECTED)
        self._logger.info("feed_closed")

    async def events(self) -> AsyncIterator[RawTradeEvent]:
        """Yield trades until close() or a fatal error.

        Raises:
            MaxReconnectAttemptsError: When the feed gave up reconnecting.
        """
        while True:
            try:
                trade = await self._queue.get()
            except asyncio.QueueShutDown:
                break
            yield trade
        if self._fatal is not None:
            raise self._fatal

    async def _run(self) -> None:
        try:
            while not self._closing:
                try:
                    await self._connect_and_stream()
                    self._logger.warning(
                        "feed_disconnected",
                        feed_reason="closed_by_server",
                    )
                except FeedTransportError as e:
                    self._logger.warning(
                        "feed_disconnected",
                        feed_reason="transport_error",
                        error_type=type(e.__cause__ or e).__name__,
                        error_message=str(e),
                    )
                finally:
                    await self._release()
                    if not self._closing:
                        self._set_state(ConnectionState.DISCONNECTED)

                if self._closing:
                    break
                self._attempt += 1
                if self._attempt > self._max_reconnect_attempts:
                    raise MaxReconnectAttemptsError(self._max_reconnect_attempts)
                delay = self._reconnect_base_delay * (1.5 ** (self._attempt - 1))
                self._logger.info(
                    "feed_reconnect_scheduled",
                    feed_attempt=self._attempt,
                    feed_max_attempts=self._max_reconnect_attempts,
                    feed_delay_seconds=round(delay, 3),
                )
                await self._sleep(delay)
        except MaxReconnectAttemptsError as e:
            self._logger.critical(
                "feed_max_reconnect_attempts_exceeded",
                feed_attempts=e.attempts,
            )
            self._fatal = e
            self._queue.shutdown()
            raise
        except asyncio.CancelledError:
            self._logger.debug("feed_run_cancelled")
            raise
        except Exception as e:
            self._logger.exception(
                "feed_run_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            self._fatal = e
            self._queue.shutdown()
            raise

    async def _connect_and_stream(self) -> None:
        self._set_state(ConnectionState.CONNECTING)
        try:
            self._ws = await asyncio.wait_for(self._connect(), timeout=self._connect_timeout)
            self._connections_opened += 1
            with bound_contextvars(feed_connection=self._connections_opened):
                self._logger.info("feed_connected", feed_url=self._url)

                self._set_state(ConnectionState.SUBSCRIBING)
                await self._subscribe(self._ws)

                self._set_state(ConnectionState.STREAMING)
                self._attempt = 0
                await self._stream(self._ws)
        except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as e:
            raise FeedTransportError(str(e) or type(e).__name__) from e

    async def _subscribe(self, ws: WebSocketLike) -> None:
        self._logger.info("feed_subscribing", feed_coins=self._coins)
        for index, coin in enumerate(self._coins):
            await ws.send_str(subscribe_frame(coin))
            self._logger.debug("feed_subscription_sent", feed_coin=coin)
            if self._subscribe_delay > 0 and index < len(self._coins) - 1:
                await self._sleep(self._subscribe_delay)

    async def _stream(self, ws: WebSocketLike) -> None:
        async for msg in ws:
            if msg.type == aiohttp.WSMsgType.TEXT or msg.type == aiohttp.WSMsgType.BINARY:
                await self._handle_frame(ws, msg.data)
            elif msg.type == aiohttp.WSMsgType.ERROR:
                raise FeedTransportError(f"websocket error: {msg.data!r}")
            elif msg.type in (
                aiohttp.WSMsgType.CLOSE,
                aiohttp.WSMsgType.CLOSING,
                aiohttp.WSMsgType.CLOSED,
            ):
                return

    async def _handle_frame(self, ws: WebSocketLike, data: str | bytes) -> None:
        try:
            frame = parse_frame(data)
        except FeedProtocolError as e:
            self._logger.warning(
                "feed_frame_dropped",
                error_message=str(e),
                feed_frame_preview=(e.raw or "")[:200],
            )
            return

        if isinstance(frame, PingFrame):
            await ws.send_str(pong_frame())
            self._logger.debug("feed_pong_sent")
        elif isinstance(frame, TradesFrame):
            if frame.rejected:
                self._logger.warning(
                    "feed_trades_rejected",
                    feed_rejected_count=len(frame.rejected),
                )
            for trade in frame.trades:
                try:
                    await self._queue.put(trade)
                except asyncio.QueueShutDown:
                    return
        elif isinstance(frame, IgnoredFrame):
            self._logger.debug("feed_frame_ignored", feed_channel=frame.channel)

    async def _default_connect(self) -> WebSocketLike:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return await self._session.ws_connect(
            self._url,
            heartbeat=self._heartbeat,
            receive_timeout=self._receive_timeout,
        )

    async def _release(self) -> None:
        ws = self._ws
        self._ws = None
        if ws is not None and not ws.closed:
            try:
                await ws.close()
            except (aiohttp.ClientError, OSError) as e:
                self._logger.debug(
                    "feed_close_error",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )

    def _on_run_done(self, task: asyncio.Task[None]) -> None:
        # The error is re-raised from events(); retrieving it here keeps asyncio quiet.
        if not task.cancelled():
            task.exception()

    def _set_state(self, new_state: ConnectionState) -> None:
        if new_state is self._state:
            return
        old_state = self._state
        self._state = new_state
        self._logger.debug(
            "feed_state_changed",
            feed_old_state=old_state.value,
            feed_new_state=new_state.value,
        )
