"""
FastAPI surface of the World Impact Analyzer.

POST /analyze runs (or serves from cache) one historical figure analysis,
optionally streaming progress as newline-delimited JSON. The /pantheon
endpoints serve the globe's dataset and filter options.
"""

from typing import Optional
import time

from fastapi import FastAPI, Request, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from config.settings import Settings, get_settings
from world_impact.db.connection import Database
from world_impact.db.pantheon import PantheonFilters, get_filter_options, query_people
from world_impact.errors import AnalysisError, AuthenticationError, RequestValidationFailed
from world_impact.graph.workflow import AnalysisWorkflow, GENERIC_ERROR_MESSAGE, build_workflow
from world_impact.models.inputs import AnalysisRequest, format_validation_errors
from world_impact.observability.tracer import setup_tracing_environment
from world_impact.utils.logger import get_logger

logger = get_logger("API")

NDJSON_MEDIA_TYPE = "application/x-ndjson"


def _split_list(value: Optional[str]) -> Optional[list[str]]:
    """Comma-separated query value to a list, dropping empty items."""
    if value is None:
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


def create_app(
    settings: Optional[Settings] = None,
    workflow: Optional[AnalysisWorkflow] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create the configured FastAPI application.

    Collaborators not passed in are built from settings; tests inject fakes.
    """
    settings = settings or get_settings()
    if database is None:
        database = Database(settings.database_url, echo=settings.database_echo)
        database.create_all()
    if workflow is None:
        setup_tracing_environment(settings)
        workflow = build_workflow(settings, database)

    app = FastAPI(title="World Impact Analyzer API", version="0.1.0")
    app.state.settings = settings
    app.state.workflow = workflow
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Exception handlers
    # =========================================================================

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(request: Request, exc: AnalysisError):
        """Stage errors carry their own status code and user-facing message."""
        logger.warning(
            f"Analysis error in {request.method} {request.url.path}",
            error=exc.message,
            stage=exc.stage,
            status_code=exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Query parameter errors are 400s, not FastAPI's default 422."""
        logger.warning(
            f"Validation error in {request.method} {request.url.path}",
            errors=str(exc.errors()),
        )
        return JSONResponse(status_code=400, content=RequestValidationFailed().to_dict())

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(
            f"Unexpected error in {request.method} {request.url.path}",
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})

    @app.middleware("http")
    async def timing_middleware(request: Request, call_next):
        """Log every request with its duration."""
        start_time = time.time()
        response = await call_next(request)
        logger.info(
            f"{request.method} {request.url.path}",
            status_code=response.status_code,
            duration_ms=round((time.time() - start_time) * 1000, 1),
        )
        return response

    # =========================================================================
    # Routes
    # =========================================================================

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/analyze")
    async def analyze(request: Request, stream: bool = Query(False)):
        """
        Analyze a historical figure.

        Cache hits return {status: "existing"} immediately, streamed or not.
        """
        user_id = (request.headers.get(settings.user_header) or "").strip()
        if not user_id:
            raise AuthenticationError()

        try:
            body = await request.json()
        except ValueError as e:
            raise RequestValidationFailed("Request body must be valid JSON", cause=e) from e

        try:
            analysis_request = AnalysisRequest.model_validate(body)
        except ValidationError as e:
            raise RequestValidationFailed(format_validation_errors(e), cause=e) from e

        cached = await run_in_threadpool(workflow.check_cache, analysis_request.person_name)
        if cached is not None:
            return JSONResponse(content=cached.model_dump(mode="json"))

        if stream:
            # Iterated in a worker thread; closed if the client disconnects.
            lines = (event.to_line() for event in workflow.stream(analysis_request, user_id))
            return StreamingResponse(lines, media_type=NDJSON_MEDIA_TYPE)

        response = await run_in_threadpool(workflow.run, analysis_request, user_id)
        return JSONResponse(content=response.model_dump(mode="json"))

    @app.get("/pantheon/people")
    def pantheon_people(
        continents: Optional[str] = None,
        domains: Optional[str] = None,
        eras: Optional[str] = None,
        countries: Optional[str] = None,
        occupations: Optional[str] = None,
        genders: Optional[str] = None,
        hpi_min: Optional[float] = Query(None, alias="hpiMin"),
        hpi_max: Optional[float] = Query(None, alias="hpiMax"),
        alive_only: Optional[str] = Query(None, alias="aliveOnly"),
        limit: Optional[int] = Query(None, gt=0),
    ):
        """People with birthplace coordinates matching every given filter."""
        filters = PantheonFilters(
            continents=_split_list(continents),
            domains=_split_list(domains),
            eras=_split_list(eras),
            countries=_split_list(countries),
            occupations=_split_list(occupations),
            genders=_split_list(genders),
            hpi_min=hpi_min,
            hpi_max=hpi_max,
            alive_only=alive_only == "true",
            **({"limit": limit} if limit else {}),
        )

        try:
            with database.session_scope() as session:
                people = query_people(session, filters)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching pantheon people: {e}", exc_info=True)
            return JSONResponse(status_code=500, content={"error": "Failed to fetch people data"})

        return {
            "people": people,
            "count": len(people),
            "filters": filters.model_dump(by_alias=True, exclude_none=True),
        }

    @app.get("/pantheon/filter-options")
    def pantheon_filter_options():
        """Distinct values and counts for every globe filter."""
        try:
            with database.session_scope() as session:
                return get_filter_options(session)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching filter options: {e}", exc_info=True)
            return JSONResponse(status_code=500, content={"error": "Failed to fetch filter options"})

    return app
