# world_impact/chains/summarization.py

"""
LangChain Runnable for biography summarization (stage 1).

Takes the raw Wikipedia text and returns a BiographySummary.
"""
from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable

from config.prompts import SUMMARIZATION_SYSTEM_PROMPT, SUMMARIZATION_USER_PROMPT
from world_impact.models.schemas import BiographySummary


def create_summarization_chain(llm: BaseChatModel) -> Runnable:
    """
    Creates the LangChain Runnable for biography summarization.

    Args:
        llm: The configured chat model for stage 1.

    Returns:
        A Runnable taking {person_name, biography} and returning BiographySummary.
    """
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", SUMMARIZATION_SYSTEM_PROMPT),
            ("human", SUMMARIZATION_USER_PROMPT),
        ]
    )

    return (
        prompt
        | llm.with_structured_output(BiographySummary)
    ).with_config(tags=["summarization_chain"])
