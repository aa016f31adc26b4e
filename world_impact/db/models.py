"""ORM models: analysis cache, chat records, Pantheon dataset."""
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, MetaData, Numeric, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Naming conventions for constraints/indexes
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base with shared metadata and conventions."""

    metadata = MetaData(naming_convention=convention)


class AnalysisCacheEntry(Base):
    """Last computed analysis per resolved person name. Never expires."""

    __tablename__ = "historical_figure_analysis"

    name: Mapped[str] = mapped_column(Text, primary_key=True)
    # Casefolded in Python; SQL lower() is ASCII-only on SQLite
    lookup_key: Mapped[str] = mapped_column(Text, unique=True, index=True, nullable=False)
    analysis: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )


class Chat(Base):
    """Chat session linked to the analyzed person. Owned by the requesting user."""

    __tablename__ = "chat"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, nullable=False
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    visibility: Mapped[str] = mapped_column(String(16), nullable=False, default="private")
    analyzed_person_name: Mapped[str] = mapped_column(
        Text, ForeignKey("historical_figure_analysis.name"), nullable=False
    )


class PantheonPerson(Base):
    """Notable person from the Pantheon dataset (loaded by a separate ingest)."""

    __tablename__ = "pantheon_person"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    slug: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    occupation: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    domain: Mapped[Optional[str]] = mapped_column(Text, index=True)
    era: Mapped[Optional[str]] = mapped_column(Text, index=True)
    gender: Mapped[Optional[str]] = mapped_column(String(1))
    alive: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    hpi: Mapped[Optional[float]] = mapped_column(Numeric(15, 6, asdecimal=False), index=True)

    birthplace_name: Mapped[Optional[str]] = mapped_column(Text)
    birthplace_lat: Mapped[Optional[float]] = mapped_column(Numeric(10, 7, asdecimal=False))
    birthplace_lon: Mapped[Optional[float]] = mapped_column(Numeric(10, 7, asdecimal=False))
    birthplace_country: Mapped[Optional[str]] = mapped_column(Text, index=True)
    birthplace_country_code: Mapped[Optional[str]] = mapped_column(String(2))
    birthplace_continent: Mapped[Optional[str]] = mapped_column(Text, index=True)
    birthyear: Mapped[Optional[int]] = mapped_column(Integer, index=True)
    deathyear: Mapped[Optional[int]] = mapped_column(Integer)
