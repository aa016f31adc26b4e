# world_impact/models/schemas.py

"""
Structured output schema for the summarization stage.

The summary only lives for the duration of one request; it is handed to the
analysis stage as JSON and then discarded.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Achievement(BaseModel):
    title: str
    description: str
    date: Optional[str] = None


class KeyEvent(BaseModel):
    date: str
    event: str


class Associate(BaseModel):
    name: str
    relationship: str


class BiographySummary(BaseModel):
    """
    Structured facts extracted from a Wikipedia biography (stage 1 output).
    """

    name: str = Field(description="Canonical full name of the subject.")
    birth_date: Optional[str] = Field(default=None, description="Date of birth as written in the source.")
    birth_place: Optional[str] = None
    death_date: Optional[str] = Field(default=None, description="Date of death, empty if living.")
    death_place: Optional[str] = None
    nationality: Optional[str] = None
    occupations: list[str] = Field(default_factory=list)
    early_life: Optional[str] = None
    education: Optional[str] = None
    career_highlights: list[str] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)
    key_events: list[KeyEvent] = Field(
        default_factory=list, description="Chronological events with dates."
    )
    notable_associates: list[Associate] = Field(default_factory=list)
    controversies: list[str] = Field(default_factory=list)
    legacy: Optional[str] = None
    summary: str = Field(description="Narrative overview of the subject's life and work.")
