# medicaledu/shared/logging_config.py
"""
structlog setup for the API process.

Application code logs through ``structlog.get_logger()``. uvicorn and
SQLAlchemy log through the standard library; their records are rendered by
the same processor chain through ``ProcessorFormatter``.
"""
import logging
import sys

import structlog
from opentelemetry import trace

from medicaledu.shared.config import AppEnv, Settings, settings as default_settings


def add_trace_context(_, __, event_dict):
    """Attach the active trace and span ids so a log line can be joined to its trace."""
    ctx = trace.get_current_span().get_span_context()
    if ctx.is_valid:
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def service_context(config: Settings):
    def add_service(_, __, event_dict):
        event_dict.setdefault("service", config.APP_NAME)
        event_dict.setdefault("env", config.APP_ENV.value)
        return event_dict

    return add_service


def _render_processors(config: Settings) -> list:
    if config.LOG_FORMAT == "json" or config.APP_ENV == AppEnv.PRODUCTION:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def configure_logging(config: Settings = default_settings) -> None:
    level = logging.getLevelName(config.LOG_LEVEL.upper())

    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        service_context(config),
        add_trace_context,
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *_render_processors(config)],
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    # Statement logging only when explicitly asked for.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if config.DATABASE_ECHO else logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING if config.APP_ENV == AppEnv.PRODUCTION else level)
