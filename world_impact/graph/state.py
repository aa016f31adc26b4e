from typing import TypedDict, Optional, List

from world_impact.errors import AnalysisError
from world_impact.models.inputs import AnalysisRequest
from world_impact.models.outputs import HistoricalFigureAnalysis
from world_impact.models.schemas import BiographySummary
from world_impact.utils.biography_fetcher import BiographyDocument

# =============================================================================
# State Definition
# =============================================================================

class AnalysisState(TypedDict):
    """
    The state object for the LangGraph workflow.
    It tracks the request and every intermediate artifact of one analysis run.
    """
    # ------------------------------------
    # 1. Input
    # ------------------------------------
    request: AnalysisRequest
    user_id: str

    # ------------------------------------
    # 2. Intermediate artifacts
    # ------------------------------------
    biography: Optional[BiographyDocument]
    summary: Optional[BiographySummary]
    analysis: Optional[HistoricalFigureAnalysis]

    # ------------------------------------
    # 3. Metadata
    # ------------------------------------
    # Set by the first failing node; every later node is skipped.
    error: Optional[AnalysisError]
    steps_completed: List[str]
