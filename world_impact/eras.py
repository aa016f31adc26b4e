# world_impact/eras.py

"""
Historical era codes used by the Pantheon dataset and the globe filters.
"""

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class EraInfo:
    code: str
    label: str
    date_range: str
    order: int


UNKNOWN_ERA_ORDER = 999

ERA_INFO: dict[str, EraInfo] = {
    info.code: info
    for info in [
        EraInfo("PREHISTORIC", "Prehistoric", "Before 500 BC", 1),
        EraInfo("ANCIENT", "Ancient", "500 BC - 0 AD", 2),
        EraInfo("CLASSICAL", "Classical", "0 AD - 500 AD", 3),
        EraInfo("MEDIEVAL", "Medieval", "500 - 1500", 4),
        EraInfo("RENAISSANCE", "Renaissance", "1500 - 1700", 5),
        EraInfo("AGE OF ENLIGHTENMENT", "Age of Enlightenment", "1700 - 1800", 6),
        EraInfo("INDUSTRIAL AGE", "Industrial Age", "1800 - 1900", 7),
        EraInfo("MODERN", "Modern", "1900 - 2000", 8),
        EraInfo("CONTEMPORARY", "Contemporary", "2000 - Present", 9),
    ]
}

# (exclusive upper bound on birth year, era code), checked in order
_ERA_BOUNDARIES = [
    (-500, "PREHISTORIC"),
    (0, "ANCIENT"),
    (500, "CLASSICAL"),
    (1500, "MEDIEVAL"),
    (1700, "RENAISSANCE"),
    (1800, "AGE OF ENLIGHTENMENT"),
    (1900, "INDUSTRIAL AGE"),
    (2000, "MODERN"),
]


def get_era_info(code: str) -> EraInfo:
    """Era info for a code; unknown codes sort last and label as themselves."""
    return ERA_INFO.get(code) or EraInfo(code, code, "", UNKNOWN_ERA_ORDER)


def sort_eras(codes: Iterable[str]) -> list[str]:
    """Sort era codes chronologically."""
    return sorted(codes, key=lambda code: get_era_info(code).order)


def calculate_era(birthyear: Optional[int]) -> Optional[str]:
    """Era of a person from their birth year (negative years are BC)."""
    if birthyear is None:
        return None
    for upper_bound, code in _ERA_BOUNDARIES:
        if birthyear < upper_bound:
            return code
    return "CONTEMPORARY"
