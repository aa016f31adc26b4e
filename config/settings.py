"""
Configuration settings for the world impact analysis service.

Loads configuration from environment variables using Pydantic Settings.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMProvider(str, Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GROQ = "groq"
    DEEPSEEK = "deepseek"


class BiographySource(str, Enum):
    """Where biography text is fetched from."""

    GATEWAY = "gateway"
    WIKIPEDIA = "wikipedia"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # LLM Provider Configuration
    # -------------------------------------------------------------------------
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API key")
    groq_api_key: Optional[str] = Field(default=None, description="Groq API key")
    deepseek_api_key: Optional[str] = Field(default=None, description="DeepSeek API key")

    deepseek_base_url: str = Field(
        default="https://api.deepseek.com",
        description="OpenAI-compatible endpoint for DeepSeek",
    )

    # Default model names per provider
    openai_model: str = Field(default="gpt-4o-mini", description="OpenAI model to use")
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Anthropic model to use",
    )
    groq_model: str = Field(default="llama-3.3-70b-versatile", description="Groq model to use")
    deepseek_model: str = Field(default="deepseek-chat", description="DeepSeek model to use")

    # -------------------------------------------------------------------------
    # Pipeline Stages (summarize -> analyze)
    # -------------------------------------------------------------------------
    summarization_provider: LLMProvider = Field(
        default=LLMProvider.OPENAI,
        description="Provider used to summarize the raw biography",
    )
    summarization_model: Optional[str] = Field(
        default=None,
        description="Model override for the summarization stage",
    )
    summarization_temperature: float = Field(default=0.3, ge=0.0, le=2.0)

    analysis_provider: LLMProvider = Field(
        default=LLMProvider.OPENAI,
        description="Provider used to score and characterize the figure",
    )
    analysis_model: Optional[str] = Field(
        default=None,
        description="Model override for the analysis stage",
    )
    analysis_temperature: float = Field(default=1.0, ge=0.0, le=2.0)

    # -------------------------------------------------------------------------
    # Biography Fetching
    # -------------------------------------------------------------------------
    biography_source: BiographySource = Field(
        default=BiographySource.GATEWAY,
        description="Fetch biographies through the serverless gateway or directly from Wikipedia",
    )
    biography_gateway_url: Optional[str] = Field(
        default=None,
        description="Base URL of the biography gateway (serverless proxy)",
    )
    wikipedia_base_url: str = Field(
        default="https://en.wikipedia.org",
        description="Wikipedia site used by the direct fetcher",
    )
    user_agent: str = Field(
        default="WorldImpactAnalyzer/1.0 (contact: maintainers@example.com)",
        description="User agent for outbound requests",
    )
    max_biography_length: int = Field(
        default=60000,
        ge=1000,
        le=500000,
        description="Maximum biography length passed to the summarizer (characters)",
    )

    # -------------------------------------------------------------------------
    # Retry Policy
    # -------------------------------------------------------------------------
    fetch_max_attempts: int = Field(default=3, ge=1, le=10)
    fetch_first_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for the first attempt (absorbs cold starts), seconds",
    )
    fetch_retry_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for subsequent attempts, seconds",
    )
    cold_start_delay: float = Field(
        default=2.0,
        ge=0,
        description="Wait after an HTTP 500 or a timeout before retrying, seconds",
    )
    backoff_base_delay: float = Field(
        default=1.0,
        ge=0,
        description="Linear backoff unit for other network errors, seconds",
    )

    # -------------------------------------------------------------------------
    # Biography Validation
    # -------------------------------------------------------------------------
    fuzzy_match_threshold: float = Field(default=0.72, ge=0.0, le=1.0)
    max_ngram_length: int = Field(default=6, ge=1, le=12)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite:///world_impact.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")

    # -------------------------------------------------------------------------
    # Web API
    # -------------------------------------------------------------------------
    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8000, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    user_header: str = Field(
        default="X-User-Id",
        description="Header set by the auth proxy carrying the session user id",
    )

    # -------------------------------------------------------------------------
    # Observability & Logging
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARN, ERROR)",
    )
    log_format: str = Field(
        default="json",
        description="Log format (json or text)",
    )

    # LangSmith
    langsmith_api_key: Optional[str] = Field(
        default=None,
        description="LangSmith API key for observability",
    )
    langsmith_project: str = Field(
        default="world-impact-analysis",
        description="LangSmith project name",
    )
    langsmith_tracing: bool = Field(
        default=False,
        description="Enable LangSmith tracing",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARN", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of {valid_formats}")
        return v_lower

    @field_validator("biography_gateway_url")
    @classmethod
    def strip_gateway_slash(cls, v: Optional[str]) -> Optional[str]:
        """Drop a trailing slash so endpoint paths join cleanly."""
        if v:
            return v.rstrip("/")
        return v

    def get_available_providers(self) -> list[LLMProvider]:
        """
        Get list of providers with valid API keys.

        Returns:
            List of available LLM providers
        """
        return [p for p in LLMProvider if self.get_api_key(p)]

    def get_api_key(self, provider: LLMProvider) -> Optional[str]:
        """
        Get API key for specified provider.

        Args:
            provider: LLM provider

        Returns:
            API key if available, None otherwise
        """
        if provider == LLMProvider.OPENAI:
            return self.openai_api_key
        elif provider == LLMProvider.ANTHROPIC:
            return self.anthropic_api_key
        elif provider == LLMProvider.GROQ:
            return self.groq_api_key
        elif provider == LLMProvider.DEEPSEEK:
            return self.deepseek_api_key
        return None

    def get_model_name(self, provider: LLMProvider) -> str:
        """
        Get default model name for specified provider.

        Args:
            provider: LLM provider

        Returns:
            Model name
        """
        if provider == LLMProvider.OPENAI:
            return self.openai_model
        elif provider == LLMProvider.ANTHROPIC:
            return self.anthropic_model
        elif provider == LLMProvider.GROQ:
            return self.groq_model
        elif provider == LLMProvider.DEEPSEEK:
            return self.deepseek_model
        return ""

    def validate_provider(self, provider: LLMProvider) -> bool:
        """
        Check if provider is available (has valid API key).

        Args:
            provider: LLM provider to validate

        Returns:
            True if provider is available, False otherwise
        """
        return provider in self.get_available_providers()

    @property
    def gateway_endpoint(self) -> Optional[str]:
        """Full URL of the biography gateway endpoint, if configured."""
        if not self.biography_gateway_url:
            return None
        return f"{self.biography_gateway_url}/world-impact-analysis"


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get singleton settings instance.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
