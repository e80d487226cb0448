# -*- coding: utf-8 -*-
"""Logging configuration for structlog + Logfire.

structlog events are rendered through stdlib handlers via
``structlog.stdlib.ProcessorFormatter``: the console follows
``LOGGING__JSON_FORMAT`` while the rotating file is always JSON. Records from
aiohttp, httpx and python-telegram-bot go through the same formatters.
"""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Optional

import logfire
import structlog
from structlog.types import EventDict, Processor

from hyperliquid_trade_alerts.config import AppSettings, LoggingSettings, Settings, get_settings

LOG_LEVEL_TO_LOGFIRE: dict[str, str] = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "fatal",
}

# Chatty transport loggers (websocket frames, Telegram polling requests).
LIBRARY_LOGGERS: tuple[str, ...] = ("aiohttp", "httpx", "httpcore", "telegram")


def _service_fields(app: AppSettings) -> dict[str, str]:
    fields = {"app_name": app.app_name, "environment": app.environment}
    if app.service_name:
        fields["service_name"] = app.service_name
    if app.service_version:
        fields["service_version"] = app.service_version
    return fields


def _service_context_processor(app: AppSettings) -> Processor:
    """Stamp every event with the service identity."""
    fields = _service_fields(app)

    def _add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in fields.items():
            event_dict.setdefault(key, value)
        return event_dict

    return _add_service_context


def _level(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _formatter(renderer: Any, pre_chain: list[Processor]) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )


def _build_handlers(cfg: LoggingSettings, pre_chain: list[Processor]) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if cfg.log_to_console:
        console_renderer: Any = (
            structlog.processors.JSONRenderer()
            if cfg.json_format
            else structlog.dev.ConsoleRenderer()
        )
        console = logging.StreamHandler()
        console.setLevel(_level(cfg.console_level))
        console.setFormatter(_formatter(console_renderer, pre_chain))
        handlers.append(console)

    if cfg.log_to_file:
        path = Path(cfg.log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            path,
            when=cfg.log_file_when,
            interval=cfg.log_file_interval,
            backupCount=cfg.log_file_backup_count,
            encoding="utf-8",
            utc=cfg.log_file_utc,
        )
        file_handler.setLevel(_level(cfg.file_level))
        file_handler.setFormatter(_formatter(structlog.processors.JSONRenderer(), pre_chain))
        handlers.append(file_handler)

    return handlers


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure stdlib handlers, structlog and (optionally) Logfire.

    Safe to call more than once; handlers installed by a previous call are
    replaced and handlers owned by anything else are left alone.
    """
    settings = settings or get_settings()
    app = settings.app
    cfg = settings.logging

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _service_context_processor(app),
    ]

    handlers = _build_handlers(cfg, pre_chain)
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min((h.level for h in handlers), default=logging.WARNING))

    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(_level(cfg.library_level))

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        *pre_chain,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    if cfg.logfire_enabled:
        logfire.configure(
            token=cfg.logfire_token,
            service_name=app.service_name or app.app_name,
            service_version=app.service_version,
            min_level=LOG_LEVEL_TO_LOGFIRE.get(cfg.logfire_level, "info"),  # type: ignore[arg-type]
            environment=app.environment,
        )
        processors.append(logfire.StructlogProcessor())  # type: ignore[arg-type]

    processors.append(structlog.stdlib.ProcessorFormatter.wrap_for_formatter)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
