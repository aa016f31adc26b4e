# world_impact/utils/validators.py

"""
Biography validation and name helpers.

Decides whether fetched content is a usable biography of the requested
subject before any LLM budget is spent on it. Two independent signals must
both hold: the text reads like a biography, and the subject's name (or a
close variant of it) appears in it.
"""

import re
import unicodedata

from rapidfuzz import fuzz

from world_impact.utils.logger import get_logger

logger = get_logger("Validators")

DEFAULT_FUZZY_THRESHOLD = 0.72
DEFAULT_MAX_NGRAM = 6

BIOGRAPHY_MARKERS = [
    re.compile(r"\b(born in|died in|achieved|contributed to|known for|early life)\b", re.IGNORECASE),
    # Year ranges use an en-dash, as Wikipedia does
    re.compile(r"\b(\d{4}–\d{4}|\d{4}–present)\b"),
]

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w\s]")


def normalize_person_name(name: str) -> str:
    """Trim and collapse internal whitespace."""
    return _WHITESPACE.sub(" ", name).strip()


def _fold(text: str) -> str:
    """Lowercase, strip diacritics and punctuation for fuzzy comparison."""
    decomposed = unicodedata.normalize("NFKD", text)
    without_marks = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _WHITESPACE.sub(" ", _NON_WORD.sub(" ", without_marks.casefold())).strip()


def has_biography_markers(content: str) -> bool:
    """True when the content contains at least one biographical marker."""
    return any(marker.search(content) for marker in BIOGRAPHY_MARKERS)


def contains_fuzzy_name(
    content: str,
    name: str,
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
    max_ngram: int = DEFAULT_MAX_NGRAM,
) -> bool:
    """
    Check whether the name, or a close variant, appears in the content.

    Every run of 1..min(len(name words) + 2, max_ngram) consecutive words is
    compared with the name. Stops at the first phrase whose similarity
    reaches the threshold.

    Args:
        content: Text to search.
        name: Subject name.
        threshold: Minimum similarity in [0, 1].
        max_ngram: Upper bound on phrase length in words.
    """
    target = _fold(name)
    if not target:
        return False

    words = content.split()
    longest = min(len(target.split()) + 2, max_ngram)
    cutoff = threshold * 100

    for n in range(1, longest + 1):
        for i in range(len(words) - n + 1):
            phrase = _fold(" ".join(words[i:i + n]))
            if not phrase:
                continue
            if fuzz.ratio(target, phrase, score_cutoff=cutoff):
                return True
    return False


def is_valid_biography(
    content: str,
    subject_name: str,
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
    max_ngram: int = DEFAULT_MAX_NGRAM,
) -> bool:
    """
    Decide whether the content is a biography of the subject.

    Returns:
        True only when biographical markers are present AND the name matches.
    """
    if not content:
        return False

    markers = has_biography_markers(content)
    if not markers:
        logger.info(f"No biography markers found for {subject_name}")
        return False

    name_found = contains_fuzzy_name(content, subject_name, threshold, max_ngram)
    if not name_found:
        logger.info(f"Subject name not found in content: {subject_name}")
    return name_found
