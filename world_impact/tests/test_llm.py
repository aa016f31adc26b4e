import os
from unittest.mock import MagicMock

import pytest
from langchain_core.runnables import RunnableLambda
from langchain_openai import ChatOpenAI

from config.settings import LLMProvider, Settings
from world_impact.chains.analysis import create_analysis_chain
from world_impact.chains.summarization import create_summarization_chain
from world_impact.llm.factory import LLMFactory
from world_impact.models.outputs import HistoricalFigureAnalysis
from world_impact.models.schemas import BiographySummary
from world_impact.observability.tracer import setup_tracing_environment

# --- Fixtures and Helpers ---


def fake_structured_llm(output):
    """A chat model whose structured output records the rendered prompt."""
    seen = []

    def respond(prompt_value):
        seen.append(prompt_value.to_string())
        return output

    llm = MagicMock()
    llm.with_structured_output.return_value = RunnableLambda(respond)
    return llm, seen


# --- Factory ---


def test_factory_uses_stage_temperatures(settings):
    factory = LLMFactory(settings)

    summarizer = factory.get_summarization_llm()
    analyzer = factory.get_analysis_llm()

    assert isinstance(summarizer, ChatOpenAI)
    assert summarizer.temperature == pytest.approx(0.3)
    assert analyzer.temperature == pytest.approx(1.0)
    assert summarizer.model_name == "gpt-4o-mini"


def test_factory_rejects_unconfigured_provider():
    factory = LLMFactory(Settings(_env_file=None))

    with pytest.raises(ValueError, match="not configured"):
        factory.get_llm(LLMProvider.ANTHROPIC)


def test_factory_points_deepseek_at_its_endpoint():
    factory = LLMFactory(Settings(_env_file=None, deepseek_api_key="test-key"))

    llm = factory.get_llm(LLMProvider.DEEPSEEK)

    assert isinstance(llm, ChatOpenAI)
    assert llm.model_name == "deepseek-chat"
    assert "deepseek" in llm.openai_api_base


# --- Chains ---


def test_summarization_chain_renders_biography(biography_summary, biography_text):
    llm, seen = fake_structured_llm(biography_summary)

    result = create_summarization_chain(llm).invoke(
        {"person_name": "Marie Curie", "biography": biography_text}
    )

    assert result == biography_summary
    llm.with_structured_output.assert_called_once_with(BiographySummary)
    assert "Marie Curie" in seen[0]
    assert "Sancellemoz" in seen[0]


def test_analysis_chain_renders_summary(analysis, biography_summary):
    llm, seen = fake_structured_llm(analysis)

    result = create_analysis_chain(llm).invoke(
        {"person_name": "Marie Curie", "summary": biography_summary.model_dump_json()}
    )

    assert result == analysis
    llm.with_structured_output.assert_called_once_with(HistoricalFigureAnalysis)
    assert "radioactivity" in seen[0]


# --- Tracing ---


def test_tracing_disabled_without_key(settings):
    assert setup_tracing_environment(settings) is False


def test_tracing_exports_langsmith_settings(mocker):
    # Restored after the test so later tests do not trace
    mocker.patch.dict(os.environ)
    for var in ("LANGCHAIN_TRACING_V2", "LANGCHAIN_API_KEY", "LANGCHAIN_PROJECT"):
        os.environ.pop(var, None)
    settings = Settings(_env_file=None, langsmith_api_key="ls-key", langsmith_tracing=True)

    assert setup_tracing_environment(settings) is True

    assert os.environ["LANGCHAIN_TRACING_V2"] == "true"
    assert os.environ["LANGCHAIN_PROJECT"] == settings.langsmith_project
