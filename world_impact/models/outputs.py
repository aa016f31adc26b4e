# world_impact/models/outputs.py

"""
Pydantic models for the final analysis and the API responses.

HistoricalFigureAnalysis doubles as the structured-output schema of the
analysis stage, so field descriptions are written for the model as much as
for the reader.
"""

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

# =============================================================================
# Analysis Components
# =============================================================================


class PersonalityCharacteristics(BaseModel):
    """Trait ratings, 0-100 each."""

    visionary: float = Field(ge=0, le=100)
    resilience: float = Field(ge=0, le=100)
    charisma: float = Field(ge=0, le=100)
    empathy: float = Field(ge=0, le=100)
    adaptability: float = Field(ge=0, le=100)
    controversial_nature: float = Field(ge=0, le=100)


class FieldsOfImpact(BaseModel):
    """Weight of influence per field, 0-100. Omitted fields had no impact."""

    science: Optional[float] = None
    philosophy: Optional[float] = None
    politics: Optional[float] = None
    arts: Optional[float] = None
    technology: Optional[float] = None
    social: Optional[float] = None
    religion: Optional[float] = None
    economics: Optional[float] = None


class SentimentIndex(BaseModel):
    """Share of positive, mixed and negative perception."""

    positive: float
    mixed: float
    negative: float


class TimelineEvent(BaseModel):
    year: str = Field(description="Year or period, e.g. '1903' or '1890s'.")
    event: str


class GeographicAreasOfInfluence(BaseModel):
    """Weight of influence per continent, 0-100."""

    europe: Optional[float] = None
    north_america: Optional[float] = None
    south_america: Optional[float] = None
    asia: Optional[float] = None
    africa: Optional[float] = None
    oceania: Optional[float] = None


class MajorContribution(BaseModel):
    title: str
    summary: str
    date: Optional[str] = None


class NotableContemporary(BaseModel):
    name: str
    relationship: str


class SourceReference(BaseModel):
    url: str
    context: str


class CounterNarrative(BaseModel):
    perspective: str
    argument: str
    significance: float = Field(description="How much weight the narrative carries, 0-100.")
    relevant_sources: list[SourceReference] = Field(default_factory=list)


class AdditionalMetric(BaseModel):
    title: str
    type: Literal["index", "score", "ratio", "multiplier"]
    value: float
    description: str


class AdditionalReading(BaseModel):
    title: str
    author: Optional[str] = None
    type: Literal["book", "article", "paper", "video", "podcast", "website", "other"]
    url: Optional[str] = None
    year: Optional[str] = None
    description: str
    difficulty_level: Literal["introductory", "intermediate", "advanced", "scholarly"]


class Source(BaseModel):
    title: str
    url: str
    type: Literal["academic", "primary_source", "biography", "analysis", "media", "other"]
    description: Optional[str] = None


# =============================================================================
# Final Analysis
# =============================================================================


class HistoricalFigureAnalysis(BaseModel):
    """Complete impact analysis of a historical figure."""

    name: str = Field(
        description="Canonical full name of the subject. Used as the cache key."
    )
    worldly_impact_score: float = Field(ge=0, le=100, description="Overall impact on world history.")
    reach_score: float = Field(ge=0, le=100, description="How many people and places were affected.")
    controversy_score: float = Field(ge=0, le=100, description="How disputed the figure's legacy is.")
    longevity_score: float = Field(ge=0, le=100, description="How long the influence has lasted.")
    innovation_score: float = Field(ge=0, le=100, description="How original the contributions were.")
    influence_score: float = Field(ge=0, le=100, description="Influence on later people and ideas.")
    personality_characteristics: PersonalityCharacteristics
    fields_of_impact: FieldsOfImpact
    sentiment_index: SentimentIndex
    citations_count: Optional[int] = Field(
        default=None, description="Approximate number of scholarly citations, if known."
    )
    timeline_of_influence: list[TimelineEvent]
    geographic_areas_of_influence: GeographicAreasOfInfluence
    summary: str
    major_contributions: list[MajorContribution]
    notable_contemporaries: list[NotableContemporary]
    counter_narratives: Optional[list[CounterNarrative]] = None
    additional_metrics: Optional[list[AdditionalMetric]] = None
    additional_reading: list[AdditionalReading] = Field(default_factory=list)
    sources: Optional[list[Source]] = None


# =============================================================================
# API Responses
# =============================================================================


class AnalyzeResponse(BaseModel):
    """Non-streaming response of POST /analyze."""

    status: Literal["existing", "new"]
    result: HistoricalFigureAnalysis


class StatusContent(BaseModel):
    message: str
    progress: int = Field(ge=0, le=100)


class ProgressEvent(BaseModel):
    """
    One line of the streaming response.

    status events carry {message, progress}; exactly one error or complete
    event ends the stream.
    """

    type: Literal["status", "error", "complete"]
    content: Union[StatusContent, AnalyzeResponse, str]

    @classmethod
    def status(cls, message: str, progress: int) -> "ProgressEvent":
        return cls(type="status", content=StatusContent(message=message, progress=progress))

    @classmethod
    def error(cls, message: str) -> "ProgressEvent":
        return cls(type="error", content=message)

    @classmethod
    def complete(cls, response: AnalyzeResponse) -> "ProgressEvent":
        return cls(type="complete", content=response)

    @property
    def is_terminal(self) -> bool:
        return self.type in ("error", "complete")

    @property
    def progress(self) -> Optional[int]:
        if isinstance(self.content, StatusContent):
            return self.content.progress
        if self.type == "complete":
            return 100
        return None

    def to_line(self) -> str:
        """Serialize as one newline-terminated JSON line."""
        return self.model_dump_json() + "\n"


def analysis_to_dict(analysis: Any) -> dict:
    """Dump an analysis model (or pass a dict through) for JSON storage."""
    if isinstance(analysis, BaseModel):
        return analysis.model_dump(mode="json")
    return dict(analysis)
