from typing import Any, Dict, Iterator, Literal, Optional

from langgraph.graph import StateGraph, END
from langchain_core.runnables import RunnableConfig
from sqlalchemy.exc import SQLAlchemyError

from config.settings import Settings
from world_impact.chains.analysis import create_analysis_chain
from world_impact.chains.summarization import create_summarization_chain
from world_impact.db.connection import Database
from world_impact.db.repository import AnalysisCache, AnalysisRepository
from world_impact.errors import AnalysisError, BiographyNotFoundError, PersistenceError
from world_impact.graph.state import AnalysisState
from world_impact.llm.factory import LLMFactory
from world_impact.llm.structured import StructuredGenerator
from world_impact.models.inputs import AnalysisRequest
from world_impact.models.outputs import (
    AnalyzeResponse,
    HistoricalFigureAnalysis,
    ProgressEvent,
    analysis_to_dict,
)
from world_impact.models.schemas import BiographySummary
from world_impact.nodes.analyze import AnalysisNode
from world_impact.nodes.summarize import SummarizationNode
from world_impact.utils.biography_fetcher import BiographyFetcher, create_biography_fetcher
from world_impact.utils.logger import get_logger
from world_impact.utils.validators import is_valid_biography

logger = get_logger("Workflow")

GENERIC_ERROR_MESSAGE = "Failed to generate analysis"

# Status announced before each node runs: (message, progress)
STAGE_PROGRESS: Dict[str, tuple] = {
    "fetch_biography": ("Fetching Wikipedia biography...", 5),
    "validate_biography": ("Validating biography content...", 10),
    "summarize": ("Summarizing biography...", 20),
    "analyze": ("Analyzing world impact...", 50),
    "save": ("Saving analysis...", 90),
}
STAGE_ORDER = list(STAGE_PROGRESS)


class AnalysisWorkflow:
    """
    The orchestrator for one historical figure analysis, implemented using LangGraph.

    cache check -> fetch -> validate -> summarize -> analyze -> save. The first
    node that fails records its error in the state and the graph ends there.
    """

    def __init__(
        self,
        fetcher: BiographyFetcher,
        summarization_node: SummarizationNode,
        analysis_node: AnalysisNode,
        cache: AnalysisCache,
        repository: AnalysisRepository,
        settings: Optional[Settings] = None,
    ):
        """
        Initializes the workflow with its collaborators and builds the graph.
        """
        self.fetcher = fetcher
        self.summarization_node = summarization_node
        self.analysis_node = analysis_node
        self.cache = cache
        self.repository = repository
        self.settings = settings or fetcher.settings
        self.graph = self._build_graph()

    # =========================================================================
    # Nodes
    # =========================================================================

    def fetch_biography_node(self, state: AnalysisState) -> Dict[str, Any]:
        """Node 1: Fetches the raw biography text."""
        person_name = state["request"].person_name
        try:
            biography = self.fetcher.fetch(person_name)
        except AnalysisError as e:
            logger.warning(f"Biography fetch failed for {person_name}: {e.message}")
            return {"error": e}
        except Exception as e:
            logger.error(f"Biography fetch failed for {person_name}: {e}", exc_info=True)
            return {"error": BiographyNotFoundError(stage="fetch_biography", cause=e)}

        return {
            "biography": biography,
            "steps_completed": state["steps_completed"] + ["fetch_biography"],
        }

    def validate_biography_node(self, state: AnalysisState) -> Dict[str, Any]:
        """Node 2: Rejects content that is not a biography of the requested person."""
        person_name = state["request"].person_name
        valid = is_valid_biography(
            state["biography"].content,
            person_name,
            threshold=self.settings.fuzzy_match_threshold,
            max_ngram=self.settings.max_ngram_length,
        )
        if not valid:
            return {
                "error": BiographyNotFoundError(
                    "No relevant biography markers found in Wikipedia entry",
                    stage="validate_biography",
                )
            }

        return {"steps_completed": state["steps_completed"] + ["validate_biography"]}

    def save_node(self, state: AnalysisState) -> Dict[str, Any]:
        """
        Node 5: Caches the analysis under the resolved name, then records the chat.
        """
        analysis: HistoricalFigureAnalysis = state["analysis"]
        request: AnalysisRequest = state["request"]

        try:
            stored_name = self.cache.put(analysis.name, analysis_to_dict(analysis))
            self.repository.save_chat(
                chat_id=str(request.chat_id),
                user_id=state["user_id"],
                title=analysis.name,
                analyzed_person_name=stored_name,
            )
        except PersistenceError as e:
            return {"error": e}
        except SQLAlchemyError as e:
            logger.error(f"Chat record could not be saved for {analysis.name}: {e}", exc_info=True)
            return {"error": PersistenceError(stage="save", cause=e)}

        logger.info(f"Analysis saved for {analysis.name}", chat_id=str(request.chat_id))
        return {"steps_completed": state["steps_completed"] + ["save"]}

    # =========================================================================
    # Conditional Edges
    # =========================================================================

    def route_on_error(self, state: AnalysisState) -> Literal["continue", "end"]:
        """Stop the run as soon as any node has recorded an error."""
        if state.get("error") is not None:
            return "end"
        return "continue"

    # =========================================================================
    # Graph Builder
    # =========================================================================

    def _build_graph(self):
        workflow = StateGraph(AnalysisState)

        workflow.add_node("fetch_biography", self.fetch_biography_node)
        workflow.add_node("validate_biography", self.validate_biography_node)
        workflow.add_node("summarize", self.summarization_node.run)
        workflow.add_node("analyze", self.analysis_node.run)
        workflow.add_node("save", self.save_node)

        workflow.set_entry_point("fetch_biography")
        for current, following in zip(STAGE_ORDER, STAGE_ORDER[1:]):
            workflow.add_conditional_edges(
                current,
                self.route_on_error,
                {"continue": following, "end": END},
            )
        workflow.add_edge("save", END)

        return workflow.compile()

    # =========================================================================
    # Public Runners
    # =========================================================================

    def check_cache(self, person_name: str) -> Optional[AnalyzeResponse]:
        """Cached analysis for the name as an "existing" response, or None."""
        cached = self.cache.get(person_name)
        if cached is None:
            return None
        try:
            result = HistoricalFigureAnalysis.model_validate(cached)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable cache entry for {person_name}: {e}")
            return None
        logger.info(f"Cache hit for {person_name}")
        return AnalyzeResponse(status="existing", result=result)

    def _initial_state(self, request: AnalysisRequest, user_id: str) -> AnalysisState:
        return {
            "request": request,
            "user_id": user_id,
            "biography": None,
            "summary": None,
            "analysis": None,
            "error": None,
            "steps_completed": [],
        }

    def _config(self, request: AnalysisRequest) -> RunnableConfig:
        # Used for tracing with LangSmith
        return {
            "run_name": "world_impact_analysis",
            "tags": ["world_impact"],
            "metadata": {
                "person_name": request.person_name,
                "chat_id": str(request.chat_id),
            },
        }

    def stream(self, request: AnalysisRequest, user_id: str) -> Iterator[ProgressEvent]:
        """
        Run the pipeline, yielding progress as each stage starts.

        Ends with exactly one error or complete event. Progress never decreases.
        """
        logger.info(f"Starting analysis for: {request.person_name}")

        message, progress = STAGE_PROGRESS["fetch_biography"]
        yield ProgressEvent.status(message, progress)

        analysis: Optional[HistoricalFigureAnalysis] = None
        try:
            for update in self.graph.stream(
                self._initial_state(request, user_id),
                config=self._config(request),
                stream_mode="updates",
            ):
                for node_name, changes in update.items():
                    changes = changes or {}
                    error = changes.get("error")
                    if error is not None:
                        logger.warning(
                            f"Analysis failed at {node_name}: {error.message}",
                            stage=error.stage,
                        )
                        yield ProgressEvent.error(error.message)
                        return

                    if changes.get("analysis") is not None:
                        analysis = changes["analysis"]

                    index = STAGE_ORDER.index(node_name)
                    if index + 1 < len(STAGE_ORDER):
                        message, progress = STAGE_PROGRESS[STAGE_ORDER[index + 1]]
                        yield ProgressEvent.status(message, progress)
        except Exception as e:
            logger.error(f"Unexpected failure analyzing {request.person_name}: {e}", exc_info=True)
            yield ProgressEvent.error(GENERIC_ERROR_MESSAGE)
            return

        if analysis is None:
            logger.error(f"Workflow ended without an analysis for {request.person_name}")
            yield ProgressEvent.error(GENERIC_ERROR_MESSAGE)
            return

        logger.info(f"Analysis complete for {request.person_name}", resolved_name=analysis.name)
        yield ProgressEvent.complete(AnalyzeResponse(status="new", result=analysis))

    def run(self, request: AnalysisRequest, user_id: str) -> AnalyzeResponse:
        """
        Non-streaming run: cache fast path, otherwise the full pipeline.

        Raises:
            AnalysisError: The failing stage's error.
        """
        cached = self.check_cache(request.person_name)
        if cached is not None:
            return cached

        final_state: AnalysisState = self.graph.invoke(
            self._initial_state(request, user_id),
            config=self._config(request),
        )

        if final_state.get("error") is not None:
            raise final_state["error"]
        if final_state.get("analysis") is None:
            raise AnalysisError(stage="workflow")
        return AnalyzeResponse(status="new", result=final_state["analysis"])


def build_workflow(settings: Settings, database: Database) -> AnalysisWorkflow:
    """
    Wire the production workflow: configured LLMs, biography source and storage.

    Raises:
        ValueError: If a stage's LLM provider has no API key.
    """
    llm_factory = LLMFactory(settings)

    summarizer = StructuredGenerator(
        create_summarization_chain(llm_factory.get_summarization_llm()),
        BiographySummary,
        name="summarization",
    )
    analyzer = StructuredGenerator(
        create_analysis_chain(llm_factory.get_analysis_llm()),
        HistoricalFigureAnalysis,
        name="analysis",
    )

    repository = AnalysisRepository(database)
    return AnalysisWorkflow(
        fetcher=create_biography_fetcher(settings),
        summarization_node=SummarizationNode(summarizer),
        analysis_node=AnalysisNode(analyzer),
        cache=AnalysisCache(repository),
        repository=repository,
        settings=settings,
    )
