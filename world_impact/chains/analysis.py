# world_impact/chains/analysis.py

"""
LangChain Runnable for the impact analysis (stage 2).

Takes the stage-1 summary as JSON and returns a HistoricalFigureAnalysis.
"""
from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable

from config.prompts import ANALYSIS_SYSTEM_PROMPT, ANALYSIS_USER_PROMPT
from world_impact.models.outputs import HistoricalFigureAnalysis


def create_analysis_chain(llm: BaseChatModel) -> Runnable:
    """
    Creates the LangChain Runnable for the impact analysis.

    Args:
        llm: The configured chat model for stage 2.

    Returns:
        A Runnable taking {person_name, summary} and returning HistoricalFigureAnalysis.
    """
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", ANALYSIS_SYSTEM_PROMPT),
            ("human", ANALYSIS_USER_PROMPT),
        ]
    )

    return (
        prompt
        | llm.with_structured_output(HistoricalFigureAnalysis)
    ).with_config(tags=["analysis_chain"])
