# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from hyperliquid_trade_alerts.clients.http import AsyncHttpClient
from hyperliquid_trade_alerts.clients.hyperliquid import HyperliquidInfoClient
from hyperliquid_trade_alerts.config import Settings, get_settings
from hyperliquid_trade_alerts.feed import FeedConnection
from hyperliquid_trade_alerts.health import HealthServer
from hyperliquid_trade_alerts.notifications.notification_manager import NotificationService
from hyperliquid_trade_alerts.notifications.strategies.base import BaseNotificationStrategy
from hyperliquid_trade_alerts.notifications.strategies.console import ConsoleNotifier
from hyperliquid_trade_alerts.notifications.strategies.telegram import TelegramNotifier
from hyperliquid_trade_alerts.notifications.stylers.notification_styler import (
    TradeNotificationFormatter,
)
from hyperliquid_trade_alerts.services.dispatching import Dispatcher
from hyperliquid_trade_alerts.services.enrichment import EnrichmentClient, RetryPolicy
from hyperliquid_trade_alerts.services.filtering import EventFilter
from hyperliquid_trade_alerts.utils.dedupe import SeenTradeCache


def _build_notification_notifiers(settings: Settings) -> list[BaseNotificationStrategy]:
    notifiers: list[BaseNotificationStrategy] = []
    if settings.console.enabled:
        notifiers.append(ConsoleNotifier(settings=settings))
    if settings.telegram.enabled:
        notifiers.append(TelegramNotifier(settings=settings))
    return notifiers


def _build_feed(settings: Settings) -> FeedConnection:
    cfg = settings.feed
    return FeedConnection(
        url=cfg.url,
        coins=cfg.coins,
        subscribe_delay_seconds=cfg.subscribe_delay_ms / 1000,
        max_reconnect_attempts=cfg.max_reconnect_attempts,
        reconnect_base_delay_seconds=cfg.reconnect_base_delay_ms / 1000,
        connect_timeout_seconds=cfg.connect_timeout_seconds,
        receive_timeout_seconds=cfg.receive_timeout_seconds,
        heartbeat_seconds=cfg.heartbeat_seconds,
        buffer_size=cfg.buffer_size,
    )


def _build_retry_policy(settings: Settings) -> RetryPolicy:
    cfg = settings.enrichment
    return RetryPolicy(
        max_retries=cfg.max_retries,
        pacing_delay_seconds=cfg.pacing_delay_ms / 1000,
        base_delay_seconds=cfg.retry_base_delay_ms / 1000,
    )


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, clients, feed, pipeline and sinks."""

    config = providers.Callable(get_settings)

    http_client = providers.Singleton(
        AsyncHttpClient,
        timeout_seconds=config.provided.enrichment.request_timeout_seconds,
    )

    info_client = providers.Singleton(
        HyperliquidInfoClient,
        http_client=http_client,
        explorer_url=config.provided.enrichment.explorer_url,
        info_url=config.provided.enrichment.info_url,
    )

    feed = providers.Singleton(_build_feed, config)

    seen_trades = providers.Singleton(
        SeenTradeCache,
        ttl_seconds=config.provided.dedupe.ttl_seconds,
        maxsize=config.provided.dedupe.maxsize,
    )

    event_filter = providers.Singleton(
        EventFilter,
        min_notional_value=config.provided.filter.min_notional_value,
    )

    retry_policy = providers.Singleton(_build_retry_policy, config)

    enrichment_client = providers.Singleton(
        EnrichmentClient,
        info_client=info_client,
        retry_policy=retry_policy,
        concurrency=config.provided.enrichment.concurrency,
        request_timeout_seconds=config.provided.enrichment.request_timeout_seconds,
        fetch_account_context=config.provided.enrichment.fetch_account_context,
    )

    formatter = providers.Singleton(
        TradeNotificationFormatter,
        tx_link_base=config.provided.enrichment.tx_link_base,
    )

    notification_service = providers.Singleton(
        NotificationService,
        notifiers=providers.Callable(_build_notification_notifiers, config),
    )

    dispatcher = providers.Singleton(
        Dispatcher,
        feed=feed,
        event_filter=event_filter,
        enrichment_client=enrichment_client,
        formatter=formatter,
        notification_service=notification_service,
        seen_trades=seen_trades,
        liquidations_only=config.provided.filter.liquidations_only,
    )

    health_server = providers.Singleton(
        HealthServer,
        host=config.provided.health.host,
        port=config.provided.health.port,
    )
