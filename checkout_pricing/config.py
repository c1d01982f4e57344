"""Logging setup and environment-driven settings."""

import logging
import os
import sys
from dataclasses import dataclass

import structlog

_ENV_PREFIX = "CHECKOUT_"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class Settings:
    log_level: str = "info"
    log_format: str = "json"
    reject_unknown_skus: bool = True
    currency_symbol: str = "$"


def _to_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def get_settings() -> Settings:
    """Read settings from the environment.

    Environment variables:
        CHECKOUT_LOG_LEVEL: debug, info (default), warning or error
        CHECKOUT_LOG_FORMAT: "json" (default) or "console"
        CHECKOUT_REJECT_UNKNOWN_SKUS: reject orders naming unknown SKUs (default true)
        CHECKOUT_CURRENCY_SYMBOL: symbol printed on receipts (default "$")
    """
    level = os.environ.get(f"{_ENV_PREFIX}LOG_LEVEL", "info").lower()
    if level not in _LEVELS:
        level = "info"
    log_format = os.environ.get(f"{_ENV_PREFIX}LOG_FORMAT", "json").lower()
    if log_format not in ("json", "console"):
        log_format = "json"
    return Settings(
        log_level=level,
        log_format=log_format,
        reject_unknown_skus=_to_bool(os.environ.get(f"{_ENV_PREFIX}REJECT_UNKNOWN_SKUS"), True),
        currency_symbol=os.environ.get(f"{_ENV_PREFIX}CURRENCY_SYMBOL", "$"),
    )


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog with ISO timestamps and JSON or console rendering.

    Log lines are written to stderr; stdout is left to command output.
    """
    settings = settings or get_settings()
    if settings.log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_LEVELS[settings.log_level]),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )
