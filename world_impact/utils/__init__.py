# world_impact/utils/__init__.py

"""
Utility package for the world impact analysis service.

Contains standalone, reusable helper modules:
- biography_fetcher: Gateway and direct Wikipedia biography providers.
- logger: Centralized logging configuration (structlog).
- retry: Retry policy and retrying HTTP fetcher.
- validators: Biography validation and name normalization.
"""

from .logger import get_logger
from .retry import RetryPolicy, decide_retry, fetch_with_retry
from .validators import is_valid_biography, normalize_person_name

__all__ = [
    "get_logger",
    "RetryPolicy",
    "decide_retry",
    "fetch_with_retry",
    "is_valid_biography",
    "normalize_person_name",
]
