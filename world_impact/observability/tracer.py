# world_impact/observability/tracer.py

import os
from typing import Optional

from world_impact.utils.logger import get_logger
from config.settings import Settings, get_settings

logger = get_logger("Tracer")


def setup_tracing_environment(settings: Optional[Settings] = None) -> bool:
    """
    Exports the LangSmith configuration for LangChain/LangGraph and reports it.

    LangChain reads LANGCHAIN_TRACING_V2, LANGCHAIN_PROJECT and
    LANGCHAIN_API_KEY from the process environment; values already exported
    there take precedence over the settings.

    Returns:
        True if tracing is enabled.
    """
    settings = settings or get_settings()

    if settings.langsmith_tracing and settings.langsmith_api_key:
        os.environ.setdefault("LANGCHAIN_TRACING_V2", "true")
        os.environ.setdefault("LANGCHAIN_API_KEY", settings.langsmith_api_key)
        os.environ.setdefault("LANGCHAIN_PROJECT", settings.langsmith_project)
        logger.info(f"LangSmith tracing is configured for project: {settings.langsmith_project}")
        return True

    logger.info(
        "LangSmith tracing is disabled. Set LANGSMITH_API_KEY and LANGSMITH_TRACING=true "
        "in your .env file to enable it."
    )
    return False
