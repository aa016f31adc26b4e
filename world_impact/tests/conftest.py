"""Shared fixtures: settings, temporary database, fake fetcher and generators."""
import os
import tempfile
from typing import Any, Callable, Optional, Union

import pytest

from config.settings import Settings
from world_impact.db.connection import Database
from world_impact.db.repository import AnalysisCache, AnalysisRepository
from world_impact.graph.workflow import AnalysisWorkflow
from world_impact.models.outputs import HistoricalFigureAnalysis
from world_impact.models.schemas import BiographySummary
from world_impact.nodes.analyze import AnalysisNode
from world_impact.nodes.summarize import SummarizationNode
from world_impact.utils.biography_fetcher import BiographyDocument, BiographyFetcher

MARIE_CURIE_BIOGRAPHY = (
    "Marie Salomea Skłodowska-Curie (1867–1934) was a Polish and naturalised-French "
    "physicist and chemist who conducted pioneering research on radioactivity. "
    "Early life: Maria Skłodowska was born in Warsaw, in what was then the Kingdom "
    "of Poland. She is known for the discovery of polonium and radium and was the "
    "first woman to win a Nobel Prize. Curie died in 1934 at the Sancellemoz "
    "sanatorium in Passy, Haute-Savoie."
)


# --- Fakes ---


class FakeFetcher(BiographyFetcher):
    """Returns canned content (or raises) instead of calling a provider."""

    def __init__(self, settings: Settings, content: Union[str, Exception] = MARIE_CURIE_BIOGRAPHY):
        super().__init__(settings)
        self.content = content
        self.calls: list[str] = []

    def _fetch_content(self, person_name: str) -> BiographyDocument:
        self.calls.append(person_name)
        if isinstance(self.content, Exception):
            raise self.content
        return BiographyDocument(person_name=person_name, content=self.content)


class FakeGenerator:
    """Stands in for StructuredGenerator; records prompt variables of every call."""

    def __init__(self, name: str, result: Union[Any, Exception, Callable[..., Any]]):
        self.name = name
        self.result = result
        self.calls: list[dict] = []

    def generate(self, **prompt_vars: Any) -> Any:
        self.calls.append(prompt_vars)
        if isinstance(self.result, Exception):
            raise self.result
        if callable(self.result):
            return self.result(**prompt_vars)
        return self.result


# --- Fixtures ---


@pytest.fixture
def biography_text() -> str:
    return MARIE_CURIE_BIOGRAPHY


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        biography_gateway_url="http://gateway.test/",
        log_format="json",
    )


@pytest.fixture
def temp_db_url() -> str:
    """SQLite URL for a temporary file."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield f"sqlite:///{path}"
    try:
        os.unlink(path)
    except OSError:
        pass


@pytest.fixture
def database(temp_db_url: str) -> Database:
    """Database with all tables created."""
    db = Database(temp_db_url)
    db.create_all()
    yield db
    db.engine.dispose()


@pytest.fixture
def repository(database: Database) -> AnalysisRepository:
    return AnalysisRepository(database)


@pytest.fixture
def analysis_payload() -> dict:
    """A complete analysis as the analysis stage would return it."""
    return {
        "name": "Marie Curie",
        "worldly_impact_score": 92,
        "reach_score": 85,
        "controversy_score": 12,
        "longevity_score": 95,
        "innovation_score": 97,
        "influence_score": 90,
        "personality_characteristics": {
            "visionary": 90,
            "resilience": 98,
            "charisma": 55,
            "empathy": 70,
            "adaptability": 80,
            "controversial_nature": 15,
        },
        "fields_of_impact": {"science": 95, "technology": 60, "social": 40},
        "sentiment_index": {"positive": 88, "mixed": 10, "negative": 2},
        "citations_count": 50000,
        "timeline_of_influence": [
            {"year": "1898", "event": "Discovery of polonium and radium"},
            {"year": "1903", "event": "Nobel Prize in Physics"},
        ],
        "geographic_areas_of_influence": {"europe": 95, "north_america": 70},
        "summary": "Pioneer of radioactivity research and two-time Nobel laureate.",
        "major_contributions": [
            {"title": "Theory of radioactivity", "summary": "Coined the term and studied it.", "date": "1898"},
        ],
        "notable_contemporaries": [{"name": "Pierre Curie", "relationship": "Husband and collaborator"}],
        "additional_reading": [],
    }


@pytest.fixture
def analysis(analysis_payload: dict) -> HistoricalFigureAnalysis:
    return HistoricalFigureAnalysis.model_validate(analysis_payload)


@pytest.fixture
def biography_summary() -> BiographySummary:
    return BiographySummary(
        name="Marie Curie",
        birth_date="7 November 1867",
        birth_place="Warsaw",
        death_date="4 July 1934",
        nationality="Polish, French",
        occupations=["Physicist", "Chemist"],
        summary="Physicist and chemist who pioneered research on radioactivity.",
    )


@pytest.fixture
def make_workflow(settings, repository, biography_summary, analysis):
    """
    Builds an AnalysisWorkflow over fakes.

    Returns (workflow, fetcher, summarizer, analyzer) so tests can inspect calls.
    """

    def _make(
        content: Union[str, Exception] = MARIE_CURIE_BIOGRAPHY,
        summary_result: Optional[Any] = None,
        analysis_result: Optional[Any] = None,
        cache: Optional[AnalysisCache] = None,
    ):
        fetcher = FakeFetcher(settings, content)
        summarizer = FakeGenerator("summarization", summary_result or biography_summary)
        analyzer = FakeGenerator("analysis", analysis_result or analysis)
        workflow = AnalysisWorkflow(
            fetcher=fetcher,
            summarization_node=SummarizationNode(summarizer),
            analysis_node=AnalysisNode(analyzer),
            cache=cache or AnalysisCache(repository),
            repository=repository,
            settings=settings,
        )
        return workflow, fetcher, summarizer, analyzer

    return _make
