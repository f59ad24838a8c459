"""Structured logging for the fetcher, built on structlog.

Fetch logs carry attempt numbers, classifications and outcome kinds as
key/value pairs. Production renders them as JSON lines; development uses
the colored console renderer. stdlib records (httpx, asyncio) go through
the same processor chain.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from resilient_fetch.config import Settings, settings as default_settings

# Transport libraries log every request; fetch attempt logs already cover them
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def app_context_processor(settings: Settings) -> Processor:
    """Build a processor that stamps every event with the application identity."""
    app_name = settings.APP_NAME
    app_version = settings.APP_VERSION
    environment = settings.ENVIRONMENT

    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("version", app_version)
        event_dict.setdefault("env", environment)
        return event_dict

    return add_app_context


def build_processors(settings: Settings) -> tuple[list[Processor], Processor]:
    """
    Return the shared processor chain and the final renderer for ``settings``.

    Args:
        settings: Application settings (ENVIRONMENT selects the renderer)

    Returns:
        (shared processors, renderer)
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context_processor(settings),
    ]

    if settings.ENVIRONMENT.lower() == "production":
        processors.append(structlog.processors.format_exc_info)
        return processors, structlog.processors.JSONRenderer()

    return processors, structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog and the stdlib root logger from ``settings``.

    Safe to call more than once: the root logger always ends up with a
    single stdout handler.
    """
    settings = settings or default_settings
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    processors, renderer = build_processors(settings)

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=processors)
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=logging.getLevelName(level),
        environment=settings.ENVIRONMENT,
        renderer=type(renderer).__name__,
    )
