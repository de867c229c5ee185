"""
Logging Configuration for the Manufacturing Dashboard Service

structlog is configured on top of the standard library so that uvicorn,
SQLAlchemy and application events share one output stream. Every event is
stamped with the service name and environment.
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.processors import JSONRenderer, TimeStamper
from structlog.stdlib import ProcessorFormatter, add_log_level
from structlog.types import EventDict, Processor, WrappedLogger

from mfg_dashboard.config.settings import Settings, get_settings

SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "gunicorn.error")

# Library loggers that are too chatty at INFO
LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "faker": logging.WARNING,
}


class ServiceContext:
    """Processor adding service and environment to every event"""

    def __init__(self, service: str, environment: str):
        self.service = service
        self.environment = environment

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", self.service)
        event_dict.setdefault("environment", self.environment)
        return event_dict


def _shared_processors(settings: Settings) -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso", utc=True),
        ServiceContext(settings.app_name, settings.app_env),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structured logging for the API server and the seeding CLI.

    Args:
        log_level: Override of the configured level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()
    level = (log_level or settings.monitoring.log_level).upper()
    numeric_level = logging.getLevelName(level)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    shared = _shared_processors(settings)

    structlog.configure(
        processors=shared + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(ProcessorFormatter(
        processor=_renderer(settings.monitoring.log_format),
        foreign_pre_chain=shared,
    ))

    handlers: List[logging.Handler] = [stream_handler]
    if settings.monitoring.log_file:
        # files are always machine-readable
        file_handler = logging.FileHandler(settings.monitoring.log_file, encoding="utf-8")
        file_handler.setFormatter(ProcessorFormatter(processor=JSONRenderer(), foreign_pre_chain=shared))
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(numeric_level)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = []
        server_logger.propagate = True
        server_logger.setLevel(numeric_level)

    for name, library_level in LIBRARY_LEVELS.items():
        if name == "sqlalchemy.engine" and settings.database.echo:
            continue
        logging.getLogger(name).setLevel(library_level)

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level,
        format=settings.monitoring.log_format,
        log_file=settings.monitoring.log_file,
    )
