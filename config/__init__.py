"""
Configuration module for the world impact analysis service.

This module contains:
- settings.py: Environment configuration and application settings
- prompts.py: All LLM prompts used by the summarize and analyze stages
"""

from config.settings import Settings, LLMProvider, BiographySource, get_settings

__all__ = ["Settings", "LLMProvider", "BiographySource", "get_settings"]
