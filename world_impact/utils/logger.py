# world_impact/utils/logger.py

"""
Structured Logging Configuration (structlog).

Every component logs under a short name (Workflow, BiographyFetcher,
Retry, API, ...). Pipeline events carry the person name, the stage, the
LLM latency in milliseconds and the name the analysis resolved to; the API
logs method, path, status and duration per request. Output is JSON unless
LOG_FORMAT=text or a terminal is attached at DEBUG/INFO.
"""

import sys
import logging

import structlog

from structlog.processors import EventRenamer, dict_tracebacks
from structlog.processors import StackInfoRenderer
from structlog.processors import CallsiteParameterAdder
from structlog.processors import CallsiteParameter
from structlog.stdlib import add_logger_name, add_log_level

from config.settings import get_settings


def key_stripper(keys):
    def processor(logger, method_name, event_dict):
        for key in keys:
            event_dict.pop(key, None)
        return event_dict
    return processor

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

def configure_logging():
    """
    Configures structlog to format logs based on environment and settings.
    """
    settings = get_settings()

    # Console rendering only when a human is watching and text was asked for
    use_console = settings.log_format == "text" or (
        settings.log_level in ("DEBUG", "INFO") and sys.stderr.isatty()
    )

    shared_processors = [
        structlog.processors.TimeStamper(fmt="iso"),
        # Logger name (e.g., 'Workflow', 'BiographyFetcher')
        add_logger_name,
        add_log_level,
        structlog.processors.format_exc_info,
        StackInfoRenderer(),
        CallsiteParameterAdder(parameters=[
            CallsiteParameter.PATHNAME,
            CallsiteParameter.LINENO,
            CallsiteParameter.FUNC_NAME,
        ]),
        EventRenamer("message"),
        key_stripper(keys=['_record', '_from_structlog']),
        dict_tracebacks,
    ]

    if use_console:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True, sort_keys=True)
        ]
    else:
        processors = shared_processors + [
            structlog.processors.JSONRenderer(sort_keys=True)
        ]

    # Standard logging carries uvicorn, httpx and LangChain output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=settings.log_level,
    )

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Returns a configured structlog logger instance.

    Args:
        name: The name of the logger (e.g., the component name).
    """
    global _logging_configured
    if not _logging_configured:
        configure_logging()
        _logging_configured = True

    return structlog.get_logger(name)

# Initial configuration state
_logging_configured = False
