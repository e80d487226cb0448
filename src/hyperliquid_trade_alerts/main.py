# -*- coding: utf-8 -*-
"""
Entry point for the trade alert service.

Orchestrates: logging, settings, container, health endpoint, notifications,
feed, dispatcher and shutdown (SIGINT/SIGTERM, CancelledError or a fatal feed error).
Trades flow: feed -> dispatcher -> enrichment -> formatter -> notification channels.

Run with: python -m hyperliquid_trade_alerts.main
"""
from __future__ import annotations

import asyncio
import signal
import sys
from typing import Any

import structlog
from dependency_injector import providers

from hyperliquid_trade_alerts.DI import Container
from hyperliquid_trade_alerts.config import Settings, get_settings
from hyperliquid_trade_alerts.exceptions import (
    DeliveryError,
    MaxReconnectAttemptsError,
    MissingRequiredConfigError,
)
from hyperliquid_trade_alerts.logging import configure_logging
from hyperliquid_trade_alerts.notifications import NotificationMessage, NotificationService

STARTUP_MESSAGE = "Bot now up and running. Watching for liquidations..."
SHUTDOWN_MESSAGE = "Bot shutting down."


def _setup_signals(shutdown_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_event.set)
        except NotImplementedError:
            pass  # Windows has no add_signal_handler


async def _notify_system(
    notification_service: NotificationService,
    logger: Any,
    event_type: str,
    text: str,
) -> None:
    try:
        await notification_service.deliver(NotificationMessage(event_type=event_type, text=text))
    except DeliveryError as e:
        logger.warning(
            "main_system_notification_failed",
            notification_event_type=event_type,
            error_message=str(e),
        )


async def run(settings: Settings | None = None) -> None:
    """Run the service until a shutdown signal or a fatal feed error.

    Raises:
        MissingRequiredConfigError: When required configuration is absent.
        MaxReconnectAttemptsError: When the feed gave up reconnecting.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    logger = structlog.get_logger("main")
    try:
        settings.validate_required()
    except MissingRequiredConfigError as e:
        logger.critical("main_missing_required_config", config_key=str(e))
        raise

    container = Container()
    container.config.override(providers.Object(settings))
    feed = container.feed()
    dispatcher = container.dispatcher()
    notification_service = container.notification_service()
    http_client = container.http_client()
    health_server = container.health_server() if settings.health.enabled else None

    if settings.app.startup_delay_seconds > 0:
        logger.info("main_startup_delay", delay_seconds=settings.app.startup_delay_seconds)
        await asyncio.sleep(settings.app.startup_delay_seconds)

    shutdown_event = asyncio.Event()
    _setup_signals(shutdown_event)

    dispatcher_task: asyncio.Task[None] | None = None
    try:
        if health_server is not None:
            await health_server.start()
        await notification_service.initialize()
        await feed.start()
        dispatcher_task = asyncio.create_task(dispatcher.run(), name="dispatcher")
        logger.info(
            "main_watching_started",
            feed_coins=feed.coins,
            filter_min_notional=settings.filter.min_notional_value,
            filter_liquidations_only=settings.filter.liquidations_only,
        )
        await _notify_system(notification_service, logger, "system_started", STARTUP_MESSAGE)

        stop_waiter = asyncio.create_task(shutdown_event.wait())
        try:
            await asyncio.wait(
                {stop_waiter, dispatcher_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            stop_waiter.cancel()

        if dispatcher_task.done():
            # Re-raises a fatal feed error.
            dispatcher_task.result()
            logger.warning("main_dispatcher_ended")
        else:
            logger.info("main_shutdown_requested")
    finally:
        await feed.close()
        if dispatcher_task is not None and not dispatcher_task.done():
            dispatcher_task.cancel()
            try:
                await dispatcher_task
            except asyncio.CancelledError:
                pass
        await dispatcher.shutdown(settings.app.shutdown_timeout_seconds)
        if notification_service.is_initialized:
            await _notify_system(
                notification_service, logger, "system_stopped", SHUTDOWN_MESSAGE
            )
        await notification_service.shutdown()
        await http_client.aclose()
        if health_server is not None:
            await health_server.stop()
        logger.info(
            "main_shutdown_complete",
            **{f"dispatcher_{k}": v for k, v in vars(dispatcher.stats).items()},
        )


def main() -> None:
    try:
        asyncio.run(run())
    except (MissingRequiredConfigError, MaxReconnectAttemptsError) as e:
        structlog.get_logger("main").critical(
            "main_fatal_exit",
            error_type=type(e).__name__,
            error_message=str(e),
        )
        sys.exit(1)
    except KeyboardInterrupt:
        pass


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
