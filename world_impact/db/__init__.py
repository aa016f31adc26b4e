"""Relational storage: analysis cache, chats and the Pantheon dataset."""
from .connection import Database
from .repository import AnalysisCache, AnalysisRepository

__all__ = ["Database", "AnalysisCache", "AnalysisRepository"]
