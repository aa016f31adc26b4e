"""Analysis cache and chat persistence."""
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from world_impact.db.connection import Database
from world_impact.db.models import AnalysisCacheEntry, Chat
from world_impact.errors import PersistenceError
from world_impact.utils.logger import get_logger
from world_impact.utils.validators import normalize_person_name

logger = get_logger("Repository")


def cache_lookup_key(name: str) -> str:
    """Case-insensitive cache key: normalized whitespace, Unicode casefolded."""
    return normalize_person_name(name).casefold()


class AnalysisRepository:
    """Reads and writes analyses and chats. Each call runs in its own transaction."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def get_cached_analysis(self, name: str) -> Optional[dict[str, Any]]:
        """Stored analysis for a name (case-insensitive), or None."""
        key = cache_lookup_key(name)
        with self._database.session_scope() as session:
            row = session.execute(
                select(AnalysisCacheEntry)
                .where(AnalysisCacheEntry.lookup_key == key)
                .limit(1)
            ).scalar_one_or_none()
            return dict(row.analysis) if row else None

    def save_analysis_to_cache(self, name: str, analysis: dict[str, Any]) -> str:
        """
        Upsert an analysis; last write wins.

        A row whose name differs only by case (any script) is overwritten in place.

        Returns:
            The stored key, which chat records must reference.
        """
        name = normalize_person_name(name)
        key = cache_lookup_key(name)
        with self._database.session_scope() as session:
            row = session.execute(
                select(AnalysisCacheEntry)
                .where(AnalysisCacheEntry.lookup_key == key)
                .limit(1)
            ).scalar_one_or_none()
            if row is None:
                row = AnalysisCacheEntry(name=name, lookup_key=key, analysis=analysis)
                session.add(row)
            else:
                row.analysis = analysis
                row.created_at = datetime.now(timezone.utc)
            return row.name

    def save_chat(
        self,
        chat_id: str,
        user_id: str,
        title: str,
        analyzed_person_name: str,
    ) -> bool:
        """
        Insert the chat record once.

        Returns:
            False when a chat with this id already exists (left unchanged).
        """
        with self._database.session_scope() as session:
            if session.get(Chat, chat_id) is not None:
                return False
            session.add(
                Chat(
                    id=chat_id,
                    user_id=user_id,
                    title=title,
                    analyzed_person_name=analyzed_person_name,
                )
            )
            return True


class AnalysisCache:
    """
    Cache view over the repository used by the pipeline.

    A failed read is treated as a miss. A failed write is an error.
    """

    def __init__(self, repository: AnalysisRepository) -> None:
        self.repository = repository

    def get(self, name: str) -> Optional[dict[str, Any]]:
        try:
            return self.repository.get_cached_analysis(name)
        except SQLAlchemyError as e:
            logger.error(f"Cache lookup failed for {name}: {e}")
            return None

    def put(self, name: str, analysis: dict[str, Any]) -> str:
        try:
            return self.repository.save_analysis_to_cache(name, analysis)
        except SQLAlchemyError as e:
            logger.error(f"Cache write failed for {name}: {e}", exc_info=True)
            raise PersistenceError(stage="save", cause=e) from e
