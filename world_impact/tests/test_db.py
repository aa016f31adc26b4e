import pytest
from sqlalchemy.exc import OperationalError

from world_impact.db.models import AnalysisCacheEntry, Chat
from world_impact.db.repository import AnalysisCache
from world_impact.errors import PersistenceError

CHAT_ID = "9b2f7c1e-3a4d-4b8e-9f0a-1c2d3e4f5a6b"


# --- AnalysisRepository ---


def test_cache_miss_returns_none(repository):
    assert repository.get_cached_analysis("Marie Curie") is None


def test_cache_round_trip_is_case_insensitive(repository, analysis_payload):
    repository.save_analysis_to_cache("Marie Curie", analysis_payload)

    assert repository.get_cached_analysis("marie curie") == analysis_payload
    assert repository.get_cached_analysis("  MARIE   CURIE ") == analysis_payload


def test_cache_upsert_last_write_wins(repository, analysis_payload):
    repository.save_analysis_to_cache("Marie Curie", analysis_payload)
    updated = dict(analysis_payload, worldly_impact_score=50)

    stored_name = repository.save_analysis_to_cache("MARIE CURIE", updated)

    # The existing key is kept so chat records keep pointing at it
    assert stored_name == "Marie Curie"
    assert repository.get_cached_analysis("Marie Curie")["worldly_impact_score"] == 50


def test_cache_matches_non_ascii_capitals(repository, analysis_payload):
    """Names starting with accented capitals are found regardless of case."""
    payload = dict(analysis_payload, name="Émile Durkheim")
    repository.save_analysis_to_cache("Émile Durkheim", payload)

    assert repository.get_cached_analysis("Émile Durkheim") == payload
    assert repository.get_cached_analysis("émile durkheim") == payload
    assert repository.get_cached_analysis("ÉMILE DURKHEIM") == payload


def test_cache_upsert_non_ascii_name_updates_in_place(repository, database, analysis_payload):
    repository.save_analysis_to_cache("Øystein Ore", dict(analysis_payload, name="Øystein Ore"))

    stored_name = repository.save_analysis_to_cache(
        "øystein ore", dict(analysis_payload, name="Øystein Ore", reach_score=10)
    )

    assert stored_name == "Øystein Ore"
    assert repository.get_cached_analysis("Øystein Ore")["reach_score"] == 10
    with database.session_scope() as session:
        assert session.query(AnalysisCacheEntry).count() == 1


def test_save_chat_inserts_once(repository, database, analysis_payload):
    repository.save_analysis_to_cache("Marie Curie", analysis_payload)

    assert repository.save_chat(CHAT_ID, "user-1", "Marie Curie", "Marie Curie") is True
    assert repository.save_chat(CHAT_ID, "user-2", "Other", "Marie Curie") is False

    with database.session_scope() as session:
        chat = session.get(Chat, CHAT_ID)
        assert chat.user_id == "user-1"
        assert chat.title == "Marie Curie"
        assert chat.visibility == "private"


def test_session_scope_rolls_back_on_error(database, analysis_payload):
    with pytest.raises(RuntimeError):
        with database.session_scope() as session:
            session.add(AnalysisCacheEntry(name="Ada Lovelace", lookup_key="ada lovelace", analysis=analysis_payload))
            session.flush()
            raise RuntimeError("boom")

    with database.session_scope() as session:
        assert session.get(AnalysisCacheEntry, "Ada Lovelace") is None


# --- AnalysisCache ---


def test_cache_read_failure_is_a_miss(repository, mocker):
    mocker.patch.object(
        repository, "get_cached_analysis", side_effect=OperationalError("SELECT", {}, Exception("locked"))
    )
    assert AnalysisCache(repository).get("Marie Curie") is None


def test_cache_write_failure_raises_persistence_error(repository, mocker, analysis_payload):
    mocker.patch.object(
        repository, "save_analysis_to_cache", side_effect=OperationalError("INSERT", {}, Exception("locked"))
    )

    with pytest.raises(PersistenceError) as exc_info:
        AnalysisCache(repository).put("Marie Curie", analysis_payload)

    assert exc_info.value.status_code == 500
