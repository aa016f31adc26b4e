# world_impact/models/inputs.py

"""
Pydantic models for system inputs.

Defines the structure of the analysis request submitted by the client.
"""

import re
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from world_impact.utils.validators import normalize_person_name

MAX_PERSON_NAME_LENGTH = 100

# Canonical 8-4-4-4-12 form only; no braces, urn: prefix or bare hex
UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


class AnalysisRequest(BaseModel):
    """Input for one analysis run. Created per HTTP call."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    person_name: str = Field(
        alias="personName",
        description="Name of the historical figure as typed by the user.",
    )
    chat_id: UUID = Field(
        alias="chatId",
        description="Chat session the analysis is attached to.",
    )

    @field_validator("person_name", mode="before")
    @classmethod
    def validate_person_name(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("Person name must be a string")
        name = normalize_person_name(v)
        if not name:
            raise ValueError(
                f"Person name is required (length must be 1-{MAX_PERSON_NAME_LENGTH} characters)"
            )
        if len(name) > MAX_PERSON_NAME_LENGTH:
            raise ValueError(
                f"Person name is too long (length must be 1-{MAX_PERSON_NAME_LENGTH} characters)"
            )
        return name

    @field_validator("chat_id", mode="before")
    @classmethod
    def validate_chat_id(cls, v: Any) -> UUID:
        if isinstance(v, UUID):
            return v
        if not isinstance(v, str) or not UUID_PATTERN.fullmatch(v):
            raise ValueError("Valid chat ID is required")
        return UUID(v)


def format_validation_errors(exc: ValidationError) -> str:
    """
    Aggregate pydantic field errors into one user-facing message.

    Custom validator messages are used verbatim; missing fields are reported
    by their wire name.
    """
    messages = []
    for error in exc.errors():
        if error["type"] == "missing":
            field = error["loc"][-1] if error["loc"] else "field"
            messages.append(f"{field} is required")
        elif error["type"] == "value_error":
            messages.append(str(error["ctx"]["error"]))
        else:
            messages.append(error["msg"])
    return ", ".join(messages)
