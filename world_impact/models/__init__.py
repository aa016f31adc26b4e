# world_impact/models/__init__.py

"""
Data models for the world impact analysis service.

Defines Pydantic models for the request, the intermediate summary, the final
analysis and the streamed progress events.
"""

from .inputs import AnalysisRequest, format_validation_errors
from .outputs import (
    HistoricalFigureAnalysis,
    AnalyzeResponse,
    ProgressEvent,
    StatusContent,
)
from .schemas import BiographySummary

__all__ = [
    "AnalysisRequest",
    "format_validation_errors",
    "HistoricalFigureAnalysis",
    "AnalyzeResponse",
    "ProgressEvent",
    "StatusContent",
    "BiographySummary",
]
