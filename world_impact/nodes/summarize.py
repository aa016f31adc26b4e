# world_impact/nodes/summarize.py

"""
Node that condenses the raw biography into a BiographySummary (stage 1).
"""
from typing import Any, Dict

from world_impact.errors import SummarizationError
from world_impact.graph.state import AnalysisState
from world_impact.nodes.base import BaseNode
from world_impact.utils.logger import get_logger

logger = get_logger("SummarizationNode")


class SummarizationNode(BaseNode):
    """Runs the summarization generator once; no internal retry."""

    step_name = "summarize"

    def run(self, state: AnalysisState) -> Dict[str, Any]:
        person_name = state["request"].person_name
        biography = state["biography"]

        logger.info(f"Summarizing biography for {person_name}...")

        try:
            summary = self._generate_with_timing(person_name, biography=biography.content)
        except Exception as e:
            logger.error(f"Summarization failed for {person_name}: {e}", exc_info=True)
            return {
                "error": SummarizationError(
                    f"Could not summarize Wikipedia entry: {e}", stage=self.step_name, cause=e
                )
            }

        return {
            "summary": summary,
            "steps_completed": state["steps_completed"] + [self.step_name],
        }
