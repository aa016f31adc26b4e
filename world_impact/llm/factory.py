# world_impact/llm/factory.py

"""
LLM Client Factory.

Responsible for creating and configuring LangChain chat models
(OpenAI, Anthropic, Groq, DeepSeek) for the two pipeline stages.
"""

from typing import Optional

from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI
from langchain_anthropic import ChatAnthropic
from langchain_groq import ChatGroq

from config.settings import Settings, LLMProvider


class LLMFactory:
    """
    Manages the creation and configuration of LangChain chat models.
    The summarization and analysis stages each get their own model so
    either can be swapped independently.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the factory with the application settings.
        """
        self.settings = settings

    def _get_openai_client(self, model_name: str, temperature: float) -> ChatOpenAI:
        """Create and configure the ChatOpenAI client."""
        return ChatOpenAI(
            model=model_name,
            temperature=temperature,
            api_key=self.settings.openai_api_key,
        )

    def _get_deepseek_client(self, model_name: str, temperature: float) -> ChatOpenAI:
        """DeepSeek speaks the OpenAI protocol on its own base URL."""
        return ChatOpenAI(
            model=model_name,
            temperature=temperature,
            api_key=self.settings.deepseek_api_key,
            base_url=self.settings.deepseek_base_url,
        )

    def _get_anthropic_client(self, model_name: str, temperature: float) -> ChatAnthropic:
        """Create and configure the ChatAnthropic client."""
        return ChatAnthropic(
            model=model_name,
            temperature=temperature,
            api_key=self.settings.anthropic_api_key,
        )

    def _get_groq_client(self, model_name: str, temperature: float) -> ChatGroq:
        """Create and configure the ChatGroq client."""
        return ChatGroq(
            model_name=model_name,
            temperature=temperature,
            api_key=self.settings.groq_api_key,
        )

    def get_llm(
        self,
        provider: LLMProvider,
        model_name: Optional[str] = None,
        temperature: float = 0.0,
    ) -> BaseChatModel:
        """
        Get a configured chat model instance.

        Args:
            provider: The LLMProvider enum specifying the required provider.
            model_name: Optional model name override. Defaults to settings.
            temperature: Sampling temperature.

        Returns:
            A configured LangChain chat model.

        Raises:
            ValueError: If the provider is invalid or not configured.
        """
        if not model_name:
            model_name = self.settings.get_model_name(provider)

        if not self.settings.validate_provider(provider):
            raise ValueError(f"Provider {provider.value} is not configured (API key missing).")

        if provider == LLMProvider.OPENAI:
            return self._get_openai_client(model_name, temperature)
        elif provider == LLMProvider.DEEPSEEK:
            return self._get_deepseek_client(model_name, temperature)
        elif provider == LLMProvider.ANTHROPIC:
            return self._get_anthropic_client(model_name, temperature)
        elif provider == LLMProvider.GROQ:
            return self._get_groq_client(model_name, temperature)
        else:
            raise ValueError(f"Unsupported LLM provider: {provider}")

    def get_summarization_llm(self) -> BaseChatModel:
        """Cheaper, faster model for stage 1."""
        return self.get_llm(
            self.settings.summarization_provider,
            self.settings.summarization_model,
            self.settings.summarization_temperature,
        )

    def get_analysis_llm(self) -> BaseChatModel:
        """More capable model for scoring and characterization (stage 2)."""
        return self.get_llm(
            self.settings.analysis_provider,
            self.settings.analysis_model,
            self.settings.analysis_temperature,
        )
