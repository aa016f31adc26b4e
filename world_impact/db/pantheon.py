"""
Queries over the Pantheon dataset backing the globe view.

Only people with birthplace coordinates are ever returned by query_people.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from world_impact.db.models import PantheonPerson
from world_impact.eras import sort_eras

DEFAULT_PEOPLE_LIMIT = 10000
GENDER_LABELS = {"M": "Male", "F": "Female"}


class PantheonFilters(BaseModel):
    """Filters for the globe; list filters match any of their values."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    continents: Optional[list[str]] = None
    domains: Optional[list[str]] = None
    eras: Optional[list[str]] = None
    countries: Optional[list[str]] = None
    occupations: Optional[list[str]] = None
    genders: Optional[list[str]] = None
    hpi_min: Optional[float] = None
    hpi_max: Optional[float] = None
    alive_only: bool = False
    limit: int = Field(default=DEFAULT_PEOPLE_LIMIT, gt=0)


_LIST_FILTER_COLUMNS = {
    "continents": PantheonPerson.birthplace_continent,
    "domains": PantheonPerson.domain,
    "eras": PantheonPerson.era,
    "countries": PantheonPerson.birthplace_country,
    "occupations": PantheonPerson.occupation,
    "genders": PantheonPerson.gender,
}

_PERSON_FIELDS = [
    ("id", PantheonPerson.id),
    ("name", PantheonPerson.name),
    ("slug", PantheonPerson.slug),
    ("birthplaceName", PantheonPerson.birthplace_name),
    ("birthplaceLat", PantheonPerson.birthplace_lat),
    ("birthplaceLon", PantheonPerson.birthplace_lon),
    ("occupation", PantheonPerson.occupation),
    ("domain", PantheonPerson.domain),
    ("era", PantheonPerson.era),
    ("gender", PantheonPerson.gender),
    ("hpi", PantheonPerson.hpi),
    ("birthplaceCountry", PantheonPerson.birthplace_country),
    ("birthplaceCountryCode", PantheonPerson.birthplace_country_code),
    ("birthplaceContinent", PantheonPerson.birthplace_continent),
    ("birthyear", PantheonPerson.birthyear),
    ("deathyear", PantheonPerson.deathyear),
    ("alive", PantheonPerson.alive),
]


def query_people(session: Session, filters: PantheonFilters) -> list[dict[str, Any]]:
    """People matching all filters, most prominent (highest HPI) first."""
    conditions = [
        PantheonPerson.birthplace_lat.is_not(None),
        PantheonPerson.birthplace_lon.is_not(None),
    ]

    for field_name, column in _LIST_FILTER_COLUMNS.items():
        values = getattr(filters, field_name)
        if values:
            conditions.append(column.in_(values))

    if filters.hpi_min is not None:
        conditions.append(PantheonPerson.hpi >= filters.hpi_min)
    if filters.hpi_max is not None:
        conditions.append(PantheonPerson.hpi <= filters.hpi_max)
    if filters.alive_only:
        conditions.append(PantheonPerson.alive.is_(True))

    stmt = (
        select(*[column for _, column in _PERSON_FIELDS])
        .where(*conditions)
        .order_by(PantheonPerson.hpi.desc(), PantheonPerson.id)
        .limit(filters.limit)
    )
    keys = [key for key, _ in _PERSON_FIELDS]
    return [dict(zip(keys, row)) for row in session.execute(stmt).all()]


def _distinct_values(session: Session, column) -> list[str]:
    rows = session.execute(select(column).where(column.is_not(None)).distinct()).scalars()
    return sorted(rows)


def _counted_options(session: Session, column, labels: Optional[dict[str, str]] = None) -> list[dict]:
    count = func.count().label("count")
    rows = session.execute(
        select(column, count)
        .where(column.is_not(None))
        .group_by(column)
        .order_by(count.desc(), column)
    ).all()

    labels = labels or {}
    return [
        {"value": value, "label": f"{labels.get(value, value)} ({n})", "count": n}
        for value, n in rows
    ]


def get_filter_options(session: Session) -> dict[str, Any]:
    """Everything the filter panel needs to render its controls."""
    hpi_min, hpi_max = session.execute(
        select(func.min(PantheonPerson.hpi), func.max(PantheonPerson.hpi))
    ).one()
    total_count = session.execute(select(func.count()).select_from(PantheonPerson)).scalar_one()

    return {
        "continents": _distinct_values(session, PantheonPerson.birthplace_continent),
        "domains": _distinct_values(session, PantheonPerson.domain),
        "eras": sort_eras(_distinct_values(session, PantheonPerson.era)),
        "countries": _counted_options(session, PantheonPerson.birthplace_country),
        "occupations": _counted_options(session, PantheonPerson.occupation),
        "genders": _counted_options(session, PantheonPerson.gender, GENDER_LABELS),
        "hpiRange": {
            "min": float(hpi_min) if hpi_min is not None else 0,
            "max": float(hpi_max) if hpi_max is not None else 100,
        },
        "totalCount": total_count,
    }
