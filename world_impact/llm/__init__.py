# world_impact/llm/__init__.py

"""
LLM Management Package.

Contains the logic for initializing chat models (factory) and the
structured-generation contract shared by both pipeline stages (structured).
"""

from .factory import LLMFactory
from .structured import StructuredGenerator, flatten_structured_output

__all__ = ["LLMFactory", "StructuredGenerator", "flatten_structured_output"]
