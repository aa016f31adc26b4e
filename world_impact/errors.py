# world_impact/errors.py

"""
Error taxonomy for the analysis pipeline.

Every external call is wrapped at its own boundary and re-raised as one of
these errors, so a failure is attributed to the stage that caused it. Each
error carries the user-facing message and the HTTP status it maps to.
"""

from typing import Any, Dict, Optional


class AnalysisError(Exception):
    """Base class for all user-facing pipeline errors."""

    status_code: int = 500
    default_message: str = "Failed to generate analysis"

    def __init__(
        self,
        message: Optional[str] = None,
        stage: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message or self.default_message
        self.stage = stage
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to the API response body."""
        return {"error": self.message}


class AuthenticationError(AnalysisError):
    """No authenticated session; the pipeline never starts."""

    status_code = 401
    default_message = "Unauthorized"


class RequestValidationFailed(AnalysisError):
    """Malformed request body; message aggregates the field errors."""

    status_code = 400
    default_message = "Invalid request"


class BiographyNotFoundError(AnalysisError):
    """Biography provider unreachable, misconfigured, empty or irrelevant."""

    status_code = 400
    default_message = "Could not find Wikipedia entry for this person"


class SummarizationError(AnalysisError):
    """Stage 1 failed or returned nothing usable."""

    status_code = 400
    default_message = "Could not summarize Wikipedia entry"


class AnalysisGenerationError(AnalysisError):
    """Stage 2 failed or returned nothing usable."""

    status_code = 400
    default_message = "Could not analyze historical figure"


class PersistenceError(AnalysisError):
    """Cache or chat record could not be written."""

    status_code = 500
    default_message = "Failed to save analysis"

